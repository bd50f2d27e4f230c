"""
pdfh - Document Merge

Combines independently loaded graphs into one graph with a single Catalog and
a single flat Pages node whose Kids list every input page in order.

Identifier bookkeeping is threaded through the merge loop as a local value:
each input is renumbered from ``next_id`` and the highest id it ends up using
decides where the next input starts.
"""

import copy
import logging
from collections.abc import Iterable
from typing import Any

from pdfh.constants import PDF_VERSION
from pdfh.model.graph import Graph
from pdfh.model.objects import ObjectId, Reference, type_name
from pdfh.utils.exceptions import SelectionInputError, StructuralAbsenceError

logger = logging.getLogger(__name__)

# Attributes of a Pages node rebuilt by the merge rather than merged
_REBUILT_PAGES_KEYS = ("Kids", "Count", "Parent")

# Outline nodes are not carried across documents
_OUTLINE_TYPES = ("Outlines", "Outline")


def _top_pages_node(graph: Graph) -> ObjectId | None:
    """The Pages node at the top of *graph*'s page tree."""
    root_id = graph.pages_root_id()
    if root_id is not None and graph.is_pages_node(graph.objects[root_id]):
        return root_id
    for node_id in graph.pages_nodes():
        if "Parent" not in graph.objects[node_id]:
            return node_id
    return None


def _flatten_inherited(graph: Graph, page_ids: list[ObjectId]) -> None:
    """Copy attributes inherited from ancestor Pages nodes onto each page."""
    for page_id in page_ids:
        inherited = graph.inherited_attributes(page_id)
        if inherited:
            graph.objects[page_id].update(copy.deepcopy(inherited))


def merge_graphs(graphs: Iterable[Graph], version: str = PDF_VERSION) -> Graph:
    """Merge *graphs* into one document.

    The inputs are renumbered in place and must not be used afterwards.
    Bookmarks are not carried over.

    Args:
        graphs: Documents in output order.
        version: PDF version of the merged document.

    Returns:
        The merged graph, numbered contiguously from 1.

    Raises:
        StructuralAbsenceError: If no input has a Pages node or a Catalog.
    """
    merged: dict[ObjectId, Any] = {}
    page_ids: list[ObjectId] = []
    catalog_id: ObjectId | None = None
    pages_id: ObjectId | None = None
    info: Any = None

    next_id = 1
    for index, graph in enumerate(graphs):
        highest = graph.renumber_from(next_id)
        next_id = highest + 1

        top = _top_pages_node(graph)
        leaves = list(graph.enumerate_pages(top).values()) if top is not None else []
        _flatten_inherited(graph, leaves)
        leaf_set = set(leaves)

        for object_id, value in graph.objects.items():
            if object_id in leaf_set:
                continue
            kind = type_name(value)

            if kind == "Catalog":
                if catalog_id is None:
                    catalog_id = object_id
                    merged[object_id] = value
                continue

            if graph.is_pages_node(value):
                if object_id != top:
                    continue
                if pages_id is None:
                    pages_id = object_id
                    merged[object_id] = value
                else:
                    canonical = merged[pages_id]
                    for key, item in value.items():
                        if key not in _REBUILT_PAGES_KEYS:
                            canonical[key] = item
                continue

            if kind == "Page" or kind in _OUTLINE_TYPES:
                continue

            merged[object_id] = value

        for page_id in leaves:
            page = graph.objects[page_id]
            merged[page_id] = page
            page_ids.append(page_id)

        if info is None and isinstance(graph.trailer.get("Info"), Reference):
            info = graph.trailer["Info"]

        logger.debug("Merged input %d: %d pages, ids up to %d", index + 1, len(leaves), highest)

    if pages_id is None:
        raise StructuralAbsenceError("Pages")
    if catalog_id is None:
        raise StructuralAbsenceError("Catalog")

    for page_id in page_ids:
        merged[page_id]["Parent"] = Reference(pages_id)

    canonical = merged[pages_id]
    canonical.pop("Parent", None)
    canonical["Kids"] = [Reference(page_id) for page_id in page_ids]
    canonical["Count"] = len(page_ids)

    catalog = merged[catalog_id]
    catalog["Pages"] = Reference(pages_id)
    catalog.pop("Outlines", None)

    trailer: dict[str, Any] = {"Root": Reference(catalog_id)}
    if info is not None:
        trailer["Info"] = info

    result = Graph(merged, trailer, version=version)
    result.renumber_from(1)
    logger.info("Merged document has %d pages", len(page_ids))
    return result


def duplicate_graph(graph: Graph, times: int, version: str | None = None) -> Graph:
    """Merge *times* independent copies of *graph*.

    The result keeps *graph*'s version unless *version* is given.

    Raises:
        SelectionInputError: If *times* is below 1.
    """
    if times < 1:
        raise SelectionInputError("num", times, "must be at least 1")
    copies = [graph.copy() for _ in range(times)]
    return merge_graphs(copies, version=version or graph.version)
