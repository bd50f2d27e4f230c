"""Pytest configuration for pdfh tests.

Provides builders for in-memory graphs so the page-tree algorithms can be
tested without touching the file system, plus a pikepdf-based builder for the
file-level tests.
"""

from itertools import count

import pikepdf
import pytest

from pdfh.model.graph import Graph
from pdfh.model.objects import Name, ObjectId, Reference, Stream


def _add_page(objects, new_id, parent_id, marker):
    content_id = new_id()
    page_id = new_id()
    objects[content_id] = Stream({}, f"page {marker}".encode())
    objects[page_id] = {
        "Type": Name("Page"),
        "Parent": Reference(parent_id),
        "Contents": Reference(content_id),
        "Marker": marker,
    }
    return page_id


def build_graph(num_pages: int, nested: bool = False) -> Graph:
    """Build a graph with *num_pages* pages carrying ``Marker`` 1..N.

    With *nested*, the pages are split over two child Pages nodes. The
    MediaBox lives on the root Pages node and is inherited by every page.
    """
    numbers = count(1)
    objects = {}

    def new_id():
        return ObjectId(next(numbers))

    catalog_id = new_id()
    root_id = new_id()

    if nested and num_pages > 1:
        half = num_pages // 2
        groups = [range(1, half + 1), range(half + 1, num_pages + 1)]
        parents = [new_id() for _ in groups]
        for parent_id, group in zip(parents, groups):
            kids = [Reference(_add_page(objects, new_id, parent_id, n)) for n in group]
            objects[parent_id] = {
                "Type": Name("Pages"),
                "Parent": Reference(root_id),
                "Kids": kids,
                "Count": len(kids),
            }
        kids = [Reference(parent_id) for parent_id in parents]
    else:
        kids = [Reference(_add_page(objects, new_id, root_id, n)) for n in range(1, num_pages + 1)]

    objects[root_id] = {
        "Type": Name("Pages"),
        "Kids": kids,
        "Count": num_pages,
        "MediaBox": [0, 0, 612, 792],
    }
    objects[catalog_id] = {"Type": Name("Catalog"), "Pages": Reference(root_id)}
    return Graph(objects, {"Root": Reference(catalog_id)})


def add_form_field(graph: Graph) -> ObjectId:
    """Attach a hierarchical text field with two widgets on page 1.

    The field has ``Kids`` but no ``Type``, like real AcroForm fields.
    """
    page_id = graph.enumerate_pages()[1]
    field_id = graph.add_object({"T": b"name", "FT": Name("Tx")})
    widgets = [
        graph.add_object(
            {
                "Type": Name("Annot"),
                "Subtype": Name("Widget"),
                "Parent": Reference(field_id),
                "P": Reference(page_id),
                "Rect": [0, 0, 100, 20 * (i + 1)],
            }
        )
        for i in range(2)
    ]
    graph.get_object(field_id)["Kids"] = [Reference(w) for w in widgets]
    graph.get_object(page_id)["Annots"] = [Reference(w) for w in widgets]
    graph.catalog()["AcroForm"] = {"Fields": [Reference(field_id)]}
    return field_id


def page_markers(graph: Graph) -> list[int]:
    """Markers of the graph's pages in page-number order."""
    return [graph.get_object(pid)["Marker"] for pid in graph.enumerate_pages().values()]


def create_test_pdf(path, num_pages: int = 3) -> str:
    """Create a simple test PDF whose pages carry ``/Marker`` 1..N."""
    pdf = pikepdf.Pdf.new()
    for i in range(num_pages):
        page = pikepdf.Page(
            pikepdf.Dictionary(
                Type=pikepdf.Name.Page,
                MediaBox=[0, 0, 612, 792],
                Marker=i + 1,
                Contents=pdf.make_stream(f"BT /F1 12 Tf 100 700 Td (Page {i + 1}) Tj ET".encode()),
            )
        )
        pdf.pages.append(page)
    pdf.save(str(path), compress_streams=False)
    pdf.close()
    return str(path)


def pdf_markers(path) -> list[int]:
    """Markers of a saved PDF's pages, in order."""
    with pikepdf.open(str(path)) as pdf:
        return [int(page.obj["/Marker"]) for page in pdf.pages]


@pytest.fixture
def make_graph():
    """Factory for in-memory graphs (see :func:`build_graph`)."""
    return build_graph


@pytest.fixture
def markers():
    """Page markers of an in-memory graph (see :func:`page_markers`)."""
    return page_markers


@pytest.fixture
def make_pdf(tmp_path):
    """Factory writing a marked test PDF into ``tmp_path``."""

    def _make(name: str = "input.pdf", num_pages: int = 3) -> str:
        return create_test_pdf(tmp_path / name, num_pages)

    return _make


@pytest.fixture
def read_markers():
    """Page markers of a PDF file (see :func:`pdf_markers`)."""
    return pdf_markers


@pytest.fixture
def form_field():
    """Adds a Kids-bearing form field to a graph (see :func:`add_form_field`)."""
    return add_form_field
