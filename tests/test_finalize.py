"""Tests for finalize and the outline repair it runs."""

import pytest

from pdfh.model.objects import Name, Reference, Stream
from pdfh.model.outline import Bookmark, fix_dangling_bookmarks, read_outline, rebuild_outline
from pdfh.services.finalize import finalize
from pdfh.utils.exceptions import EmptyResultError


def _page_ids(graph):
    return list(graph.enumerate_pages().values())


def _add_outline(graph, entries):
    """Attach an outline with one top-level item per (title, page_number)."""
    pages = graph.enumerate_pages()
    root_id = graph.add_object({"Type": Name("Outlines")})
    item_ids = [graph.add_object({}) for _ in entries]
    for index, ((title, number), item_id) in enumerate(zip(entries, item_ids)):
        item = {
            "Title": title,
            "Parent": Reference(root_id),
            "Dest": [Reference(pages[number]), Name("XYZ"), 0, 792, 0],
        }
        if index + 1 < len(item_ids):
            item["Next"] = Reference(item_ids[index + 1])
        graph.set_object(item_id, item)
    graph.set_object(
        root_id,
        {
            "Type": Name("Outlines"),
            "First": Reference(item_ids[0]),
            "Last": Reference(item_ids[-1]),
            "Count": len(item_ids),
        },
    )
    graph.catalog()["Outlines"] = Reference(root_id)
    graph.bookmarks = read_outline(graph)


class TestFinalize:
    def test_returns_page_count(self, make_graph):
        graph = make_graph(3)
        assert finalize(graph) == 3

    def test_empty_document_rejected(self, make_graph):
        graph = make_graph(2)
        graph.delete_pages([1, 2])
        with pytest.raises(EmptyResultError):
            finalize(graph)

    def test_prunes_unreachable(self, make_graph):
        graph = make_graph(2)
        orphan = graph.add_object({"Type": Name("Orphan")})
        finalize(graph)
        assert orphan not in graph.objects

    def test_drops_empty_streams(self, make_graph):
        graph = make_graph(1)
        page_id = _page_ids(graph)[0]
        graph.get_object(page_id)["Contents"] = Reference(graph.add_object(Stream({}, b"")))
        finalize(graph)
        assert "Contents" not in graph.get_object(page_id)
        assert not any(isinstance(v, Stream) and not v.data for v in graph.objects.values())


class TestOutline:
    def test_read_outline(self, make_graph):
        graph = make_graph(3)
        _add_outline(graph, [(b"One", 1), (b"Three", 3)])
        assert [b.title for b in graph.bookmarks] == [b"One", b"Three"]
        assert graph.bookmarks[1].page == _page_ids(graph)[2]

    def test_dangling_bookmark_removed(self, make_graph):
        graph = make_graph(3)
        _add_outline(graph, [(b"One", 1), (b"Two", 2)])
        graph.delete_pages([2])
        assert fix_dangling_bookmarks(graph) == 1
        assert [b.title for b in graph.bookmarks] == [b"One"]

    def test_dangling_parent_retargeted_to_child(self, make_graph):
        graph = make_graph(3)
        pages = _page_ids(graph)
        graph.bookmarks = [Bookmark(b"Part", pages[0], children=[Bookmark(b"Sub", pages[2])])]
        graph.delete_pages([1])
        fix_dangling_bookmarks(graph)
        assert graph.bookmarks[0].title == b"Part"
        assert graph.bookmarks[0].page == pages[2]

    def test_orphaned_children_promoted(self, make_graph):
        graph = make_graph(3)
        pages = _page_ids(graph)
        graph.bookmarks = [
            Bookmark(b"Gone", pages[1], children=[Bookmark(b"Named", None, destination=b"chap1")])
        ]
        graph.delete_pages([2])
        fix_dangling_bookmarks(graph)
        assert [b.title for b in graph.bookmarks] == [b"Named"]

    def test_rebuild_writes_linked_items(self, make_graph):
        graph = make_graph(2)
        pages = _page_ids(graph)
        graph.bookmarks = [
            Bookmark(b"A", pages[0], children=[Bookmark(b"A.1", pages[0])]),
            Bookmark(b"B", pages[1]),
        ]
        root_id = rebuild_outline(graph)
        root = graph.get_object(root_id)
        assert graph.catalog()["Outlines"] == Reference(root_id)
        assert root["Count"] == 3

        first = graph.resolve(root["First"])
        last = graph.resolve(root["Last"])
        assert first["Title"] == b"A"
        assert last["Title"] == b"B"
        assert graph.resolve(first["Next"]) is last
        assert graph.resolve(last["Prev"]) is first
        assert graph.resolve(first["First"])["Title"] == b"A.1"
        assert last["Dest"] == [Reference(pages[1]), Name("Fit")]

    def test_rebuild_keeps_existing_destination(self, make_graph):
        graph = make_graph(2)
        _add_outline(graph, [(b"Two", 2)])
        root_id = rebuild_outline(graph)
        item = graph.resolve(graph.get_object(root_id)["First"])
        assert item["Dest"][1] == Name("XYZ")

    def test_rebuild_without_bookmarks_removes_outline(self, make_graph):
        graph = make_graph(2)
        _add_outline(graph, [(b"One", 1)])
        graph.bookmarks = []
        assert rebuild_outline(graph) is None
        assert "Outlines" not in graph.catalog()

    def test_finalize_after_delete_keeps_valid_outline(self, make_graph):
        graph = make_graph(3)
        _add_outline(graph, [(b"One", 1), (b"Two", 2), (b"Three", 3)])
        graph.delete_pages([2])
        finalize(graph)
        root = graph.resolve(graph.catalog()["Outlines"])
        assert root["Count"] == 2
        live = set(_page_ids(graph))
        item = graph.resolve(root["First"])
        while item is not None:
            assert item["Dest"][0].target in live
            item = graph.resolve(item["Next"]) if "Next" in item else None
