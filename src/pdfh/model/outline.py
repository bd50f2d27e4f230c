"""
pdfh - Document Outline

Bookmark data for a graph: read from the ``/Outlines`` tree when a document
is loaded, repaired after pages are removed, and written back as a fresh
outline tree before saving.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pdfh.model.objects import Name, ObjectId, Reference, map_references

if TYPE_CHECKING:
    from pdfh.model.graph import Graph

logger = logging.getLogger(__name__)

# Outline item keys carried over verbatim (color and font flags)
_STYLE_KEYS = ("C", "F")


@dataclass
class Bookmark:
    """One outline entry.

    Attributes:
        title: Raw PDF string of the entry.
        page: Target page id, or None for named/remote destinations.
        destination: Original ``/Dest`` value, reused when still valid.
        action: Original ``/A`` value for non-GoTo actions.
        style: Color/flag entries copied from the source item.
        children: Nested entries.
    """

    title: bytes
    page: ObjectId | None = None
    destination: Any = None
    action: Any = None
    style: dict[str, Any] = field(default_factory=dict)
    children: list[Bookmark] = field(default_factory=list)

    def remap(self, mapping: dict[ObjectId, ObjectId]) -> None:
        """Apply an id renumbering to this entry and its children."""

        def _remap(target: ObjectId) -> Reference | None:
            new_id = mapping.get(target)
            return Reference(new_id) if new_id is not None else None

        if self.page is not None:
            self.page = mapping.get(self.page)
        self.destination = map_references(self.destination, _remap)
        self.action = map_references(self.action, _remap)
        for child in self.children:
            child.remap(mapping)


def _explicit_page(graph: Graph, destination: Any) -> ObjectId | None:
    """Page id of an explicit destination array, if it has one."""
    if isinstance(destination, Reference):
        destination = graph.objects.get(destination.target)
    if isinstance(destination, list) and destination and isinstance(destination[0], Reference):
        return destination[0].target
    return None


def _read_item(graph: Graph, item: dict[str, Any]) -> Bookmark:
    title = item.get("Title", b"")
    if isinstance(title, Reference):
        title = graph.objects.get(title.target, b"")
    if isinstance(title, str):
        title = title.encode("latin-1", errors="replace")
    if not isinstance(title, bytes):
        title = b""

    bookmark = Bookmark(title=title, style={k: item[k] for k in _STYLE_KEYS if k in item})

    destination = item.get("Dest")
    action = item.get("A")
    if isinstance(action, Reference):
        action = graph.objects.get(action.target)

    if destination is not None:
        bookmark.page = _explicit_page(graph, destination)
        bookmark.destination = destination
    elif isinstance(action, dict):
        kind = action.get("S")
        if kind == Name("GoTo") and _explicit_page(graph, action.get("D")) is not None:
            bookmark.page = _explicit_page(graph, action.get("D"))
            bookmark.destination = action.get("D")
        else:
            bookmark.action = action
    return bookmark


def _read_siblings(graph: Graph, first: Any, seen: set[ObjectId]) -> list[Bookmark]:
    bookmarks: list[Bookmark] = []
    current = first
    while isinstance(current, Reference) and current.target not in seen:
        seen.add(current.target)
        item = graph.objects.get(current.target)
        if not isinstance(item, dict):
            break
        bookmark = _read_item(graph, item)
        bookmark.children = _read_siblings(graph, item.get("First"), seen)
        bookmarks.append(bookmark)
        current = item.get("Next")
    return bookmarks


def read_outline(graph: Graph) -> list[Bookmark]:
    """Read the bookmark tree of *graph* from its Catalog ``/Outlines``."""
    catalog = graph.catalog()
    if catalog is None:
        return []
    outlines = catalog.get("Outlines")
    if not isinstance(outlines, Reference):
        return []
    root = graph.objects.get(outlines.target)
    if not isinstance(root, dict):
        return []
    return _read_siblings(graph, root.get("First"), {outlines.target})


def _first_page(bookmarks: list[Bookmark]) -> ObjectId | None:
    for bookmark in bookmarks:
        if bookmark.page is not None:
            return bookmark.page
        found = _first_page(bookmark.children)
        if found is not None:
            return found
    return None


def fix_dangling_bookmarks(graph: Graph) -> int:
    """Repair bookmarks whose target page is no longer in the page tree.

    A dangling entry is retargeted to the first live page among its
    descendants; without one it is removed and its children take its place.
    Entries without a page target (named destinations, actions) are kept.

    Returns:
        Number of entries repaired or removed.
    """
    live = set(graph.enumerate_pages().values())
    repaired = 0

    def _repair(bookmarks: list[Bookmark]) -> list[Bookmark]:
        nonlocal repaired
        result: list[Bookmark] = []
        for bookmark in bookmarks:
            bookmark.children = _repair(bookmark.children)
            if bookmark.page is None or bookmark.page in live:
                result.append(bookmark)
                continue
            repaired += 1
            target = _first_page(bookmark.children)
            if target is not None:
                bookmark.page = target
                bookmark.destination = None
                result.append(bookmark)
            else:
                logger.debug("Dropping bookmark %r pointing at a removed page", bookmark.title)
                result.extend(bookmark.children)
        return result

    graph.bookmarks = _repair(graph.bookmarks)
    return repaired


def _remove_outline_tree(graph: Graph, root_id: ObjectId) -> None:
    stack = [root_id]
    seen: set[ObjectId] = set()
    while stack:
        object_id = stack.pop()
        if object_id in seen:
            continue
        seen.add(object_id)
        item = graph.remove_object(object_id)
        if not isinstance(item, dict):
            continue
        for key in ("First", "Next"):
            link = item.get(key)
            if isinstance(link, Reference):
                stack.append(link.target)


def _write_items(
    graph: Graph, bookmarks: list[Bookmark], parent_id: ObjectId
) -> tuple[ObjectId, ObjectId, int]:
    ids = [graph.add_object({}) for _ in bookmarks]
    total = 0
    for index, (bookmark, object_id) in enumerate(zip(bookmarks, ids)):
        item: dict[str, Any] = {"Title": bookmark.title, "Parent": Reference(parent_id)}
        if index > 0:
            item["Prev"] = Reference(ids[index - 1])
        if index < len(ids) - 1:
            item["Next"] = Reference(ids[index + 1])

        if bookmark.page is not None:
            if _explicit_page(graph, bookmark.destination) == bookmark.page:
                item["Dest"] = bookmark.destination
            else:
                item["Dest"] = [Reference(bookmark.page), Name("Fit")]
        elif bookmark.destination is not None:
            item["Dest"] = bookmark.destination
        elif bookmark.action is not None:
            item["A"] = bookmark.action
        item.update(bookmark.style)

        total += 1
        if bookmark.children:
            first, last, count = _write_items(graph, bookmark.children, object_id)
            item["First"] = Reference(first)
            item["Last"] = Reference(last)
            item["Count"] = count
            total += count

        graph.set_object(object_id, item)
    return ids[0], ids[-1], total


def rebuild_outline(graph: Graph) -> ObjectId | None:
    """Replace the Catalog's outline tree with one built from ``graph.bookmarks``.

    Returns:
        Id of the new outline root, or None when there are no bookmarks.
    """
    catalog = graph.catalog()
    if catalog is None:
        return None

    previous = catalog.pop("Outlines", None)
    if isinstance(previous, Reference):
        _remove_outline_tree(graph, previous.target)

    if not graph.bookmarks:
        return None

    root_id = graph.add_object({"Type": Name("Outlines")})
    first, last, count = _write_items(graph, graph.bookmarks, root_id)
    graph.set_object(
        root_id,
        {"Type": Name("Outlines"), "First": Reference(first), "Last": Reference(last), "Count": count},
    )
    catalog["Outlines"] = Reference(root_id)
    return root_id
