"""
pdfh - Object Graph

In-memory arena holding one document: an object table keyed by ObjectId and a
trailer pointing at the root Catalog. References are plain values that are
only followed through the explicit lookups of this class.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Any

from pdfh.constants import INHERITABLE_PAGE_ATTRIBUTES, MAX_PAGE_TREE_DEPTH, PDF_VERSION
from pdfh.model.objects import (
    ObjectId,
    Reference,
    Stream,
    iter_references,
    map_references,
    type_name,
)
from pdfh.utils.exceptions import ObjectNotFoundError

if TYPE_CHECKING:
    from pdfh.model.outline import Bookmark

logger = logging.getLogger(__name__)


def _without_references(value: Any, targets: set[ObjectId]) -> Any:
    """Return *value* with every reference to *targets* removed."""
    if isinstance(value, Stream):
        return Stream(_without_references(value.dictionary, targets), value.data)
    if isinstance(value, dict):
        return {
            key: _without_references(item, targets)
            for key, item in value.items()
            if not (isinstance(item, Reference) and item.target in targets)
        }
    if isinstance(value, list):
        return [
            _without_references(item, targets)
            for item in value
            if not (isinstance(item, Reference) and item.target in targets)
        ]
    return value


class Graph:
    """A PDF document as an object table plus trailer.

    Attributes:
        objects: Mapping of ObjectId to the object's value.
        trailer: Trailer dictionary; ``Root`` references the Catalog.
        version: PDF header version written on save.
        bookmarks: Outline data read at load time, rebuilt on finalize.
    """

    def __init__(
        self,
        objects: dict[ObjectId, Any] | None = None,
        trailer: dict[str, Any] | None = None,
        version: str = PDF_VERSION,
        bookmarks: list[Bookmark] | None = None,
    ) -> None:
        self.objects: dict[ObjectId, Any] = dict(objects or {})
        self.trailer: dict[str, Any] = dict(trailer or {})
        self.version = version
        self.bookmarks: list[Bookmark] = list(bookmarks or [])

    def __repr__(self) -> str:
        return f"<Graph objects={len(self.objects)} root={self.root_id}>"

    # ------------------------------------------------------------------
    # Object table access
    # ------------------------------------------------------------------

    @property
    def max_id(self) -> int:
        """Highest object number in use (0 for an empty graph)."""
        return max((oid.number for oid in self.objects), default=0)

    def add_object(self, value: Any) -> ObjectId:
        """Insert *value* under a fresh id and return that id."""
        object_id = ObjectId(self.max_id + 1, 0)
        self.objects[object_id] = value
        return object_id

    def get_object(self, object_id: ObjectId) -> Any:
        """Dereference *object_id*.

        Raises:
            ObjectNotFoundError: If the id is not in the table.
        """
        try:
            return self.objects[object_id]
        except KeyError:
            raise ObjectNotFoundError(object_id) from None

    def set_object(self, object_id: ObjectId, value: Any) -> None:
        self.objects[object_id] = value

    def remove_object(self, object_id: ObjectId) -> Any:
        return self.objects.pop(object_id, None)

    def resolve(self, value: Any) -> Any:
        """Follow *value* if it is a reference, otherwise return it as is."""
        if isinstance(value, Reference):
            return self.get_object(value.target)
        return value

    def copy(self) -> Graph:
        """Deep copy; the copy shares no mutable state with this graph."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Page tree
    # ------------------------------------------------------------------

    @property
    def root_id(self) -> ObjectId | None:
        root = self.trailer.get("Root")
        return root.target if isinstance(root, Reference) else None

    def catalog(self) -> dict[str, Any] | None:
        root_id = self.root_id
        if root_id is None:
            return None
        catalog = self.objects.get(root_id)
        return catalog if isinstance(catalog, dict) else None

    def pages_root_id(self) -> ObjectId | None:
        """Id of the Pages node referenced by the Catalog, if any."""
        catalog = self.catalog()
        if catalog is None:
            return None
        pages = catalog.get("Pages")
        if isinstance(pages, Reference) and pages.target in self.objects:
            return pages.target
        return None

    def is_pages_node(self, value: Any) -> bool:
        """True only for dictionaries typed ``/Pages``."""
        return isinstance(value, dict) and type_name(value) == "Pages"

    def enumerate_pages(self, root_id: ObjectId | None = None) -> dict[int, ObjectId]:
        """Map 1-based page numbers to page ids in depth-first, left-to-right order.

        Walks from *root_id*, or from the Catalog's Pages node by default.
        Computed fresh on every call.
        """
        pages: dict[int, ObjectId] = {}
        if root_id is None:
            root_id = self.pages_root_id()
        if root_id is None:
            return pages

        visited: set[ObjectId] = set()

        def _collect(node_id: ObjectId, depth: int) -> None:
            if node_id in visited or depth > MAX_PAGE_TREE_DEPTH:
                logger.warning("Page tree cycle or excessive depth at object %s", node_id)
                return
            visited.add(node_id)
            node = self.objects.get(node_id)
            if not isinstance(node, dict):
                return
            if self.is_pages_node(node):
                kids = node.get("Kids")
                if not isinstance(kids, list):
                    return
                for kid in kids:
                    if isinstance(kid, Reference):
                        _collect(kid.target, depth + 1)
            else:
                pages[len(pages) + 1] = node_id

        _collect(root_id, 0)
        return pages

    def page_count(self) -> int:
        return len(self.enumerate_pages())

    def pages_nodes(self) -> list[ObjectId]:
        """Ids of every Pages node in the object table, sorted."""
        return sorted(oid for oid, value in self.objects.items() if self.is_pages_node(value))

    def inherited_attributes(self, page_id: ObjectId) -> dict[str, Any]:
        """Inheritable attributes an ancestor supplies for *page_id*.

        Only attributes the page does not define itself are returned; the
        nearest ancestor wins.
        """
        page = self.objects.get(page_id)
        if not isinstance(page, dict):
            return {}

        inherited: dict[str, Any] = {}
        seen: set[ObjectId] = {page_id}
        parent = page.get("Parent")
        while isinstance(parent, Reference) and parent.target not in seen:
            seen.add(parent.target)
            node = self.objects.get(parent.target)
            if not isinstance(node, dict):
                break
            for key in INHERITABLE_PAGE_ATTRIBUTES:
                if key in node and key not in page and key not in inherited:
                    inherited[key] = node[key]
            parent = node.get("Parent")
        return inherited

    def _find_parent(self, page_id: ObjectId) -> ObjectId | None:
        page = self.objects.get(page_id)
        if isinstance(page, dict):
            parent = page.get("Parent")
            if isinstance(parent, Reference) and parent.target in self.objects:
                return parent.target
        # Parent link missing: search the Pages nodes for the kid instead
        wanted = Reference(page_id)
        for node_id in self.pages_nodes():
            kids = self.objects[node_id].get("Kids")
            if isinstance(kids, list) and wanted in kids:
                return node_id
        return None

    def _detach_page(self, page_id: ObjectId) -> None:
        """Unlink *page_id* from its parent and decrement Count up the tree."""
        parent_id = self._find_parent(page_id)
        if parent_id is None:
            return

        parent = self.objects[parent_id]
        kids = parent.get("Kids")
        if isinstance(kids, list):
            parent["Kids"] = [kid for kid in kids if kid != Reference(page_id)]

        seen: set[ObjectId] = set()
        node_id: ObjectId | None = parent_id
        while node_id is not None and node_id not in seen:
            seen.add(node_id)
            node = self.objects.get(node_id)
            if not isinstance(node, dict):
                break
            count = node.get("Count")
            if isinstance(count, int) and not isinstance(count, bool):
                node["Count"] = max(count - 1, 0)
            grandparent = node.get("Parent")
            node_id = grandparent.target if isinstance(grandparent, Reference) else None

    def delete_pages(self, page_numbers) -> int:
        """Remove the pages with the given numbers and fix up the tree.

        Numbers outside ``[1, page_count]`` are ignored.

        Returns:
            Number of pages actually removed.
        """
        pages = self.enumerate_pages()
        removed = 0
        for number in sorted(set(page_numbers)):
            page_id = pages.get(number)
            if page_id is None:
                logger.debug("Page %s is not in the document, skipped", number)
                continue
            self._detach_page(page_id)
            self.objects.pop(page_id, None)
            removed += 1
        return removed

    # ------------------------------------------------------------------
    # Whole-graph maintenance
    # ------------------------------------------------------------------

    def renumber_from(self, start: int) -> int:
        """Renumber every object contiguously starting at *start*.

        Objects keep their relative order. References to ids absent from the
        table become null, which is how PDF readers treat them anyway.

        Returns:
            The highest object number now in use (``start - 1`` when empty).
        """
        ordered = sorted(self.objects)
        mapping = {old: ObjectId(start + index, 0) for index, old in enumerate(ordered)}

        def _remap(target: ObjectId) -> Reference | None:
            new_id = mapping.get(target)
            if new_id is None:
                logger.debug("Dangling reference to %s replaced with null", target)
                return None
            return Reference(new_id)

        self.objects = {mapping[old]: map_references(self.objects[old], _remap) for old in ordered}
        self.trailer = map_references(self.trailer, _remap)
        for bookmark in self.bookmarks:
            bookmark.remap(mapping)
        return start + len(ordered) - 1

    def prune_unreachable(self) -> int:
        """Delete objects that cannot be reached from the trailer.

        Returns:
            Number of objects removed.
        """
        reachable: set[ObjectId] = set()
        stack = [ref.target for ref in iter_references(self.trailer)]
        while stack:
            object_id = stack.pop()
            if object_id in reachable or object_id not in self.objects:
                continue
            reachable.add(object_id)
            stack.extend(ref.target for ref in iter_references(self.objects[object_id]))

        unreachable = [oid for oid in self.objects if oid not in reachable]
        for object_id in unreachable:
            del self.objects[object_id]
        if unreachable:
            logger.debug("Pruned %d unreachable objects", len(unreachable))
        return len(unreachable)

    def drop_empty_streams(self) -> int:
        """Delete zero-length streams and every reference pointing at them.

        Returns:
            Number of streams removed.
        """
        empty = {
            oid for oid, value in self.objects.items() if isinstance(value, Stream) and not value.data
        }
        if not empty:
            return 0
        for object_id in empty:
            del self.objects[object_id]
        self.objects = {
            oid: _without_references(value, empty) for oid, value in self.objects.items()
        }
        logger.debug("Dropped %d zero-length streams", len(empty))
        return len(empty)
