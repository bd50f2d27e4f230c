"""Tests for the Graph object table and its page-tree primitives."""

import pytest

from pdfh.model.graph import Graph
from pdfh.model.objects import Name, ObjectId, Reference, Stream
from pdfh.utils.exceptions import ObjectNotFoundError


class TestObjectAccess:
    def test_get_missing_object_raises(self, make_graph):
        graph = make_graph(1)
        with pytest.raises(ObjectNotFoundError):
            graph.get_object(ObjectId(999))

    def test_add_object_uses_fresh_id(self, make_graph):
        graph = make_graph(2)
        highest = graph.max_id
        new_id = graph.add_object({"Foo": 1})
        assert new_id == ObjectId(highest + 1, 0)
        assert graph.get_object(new_id) == {"Foo": 1}

    def test_resolve(self, make_graph):
        graph = make_graph(1)
        catalog = graph.resolve(graph.trailer["Root"])
        assert catalog["Type"] == Name("Catalog")
        assert graph.resolve(5) == 5

    def test_empty_graph(self):
        graph = Graph()
        assert graph.max_id == 0
        assert graph.enumerate_pages() == {}
        assert graph.catalog() is None

    def test_copy_is_independent(self, make_graph, markers):
        graph = make_graph(3)
        clone = graph.copy()
        clone.delete_pages([1])
        assert markers(graph) == [1, 2, 3]
        assert markers(clone) == [2, 3]


class TestEnumeratePages:
    def test_flat_order(self, make_graph, markers):
        assert markers(make_graph(4)) == [1, 2, 3, 4]

    def test_nested_order(self, make_graph, markers):
        graph = make_graph(5, nested=True)
        assert list(graph.enumerate_pages()) == [1, 2, 3, 4, 5]
        assert markers(graph) == [1, 2, 3, 4, 5]

    def test_cycle_does_not_loop(self, make_graph):
        graph = make_graph(2)
        root_id = graph.pages_root_id()
        graph.get_object(root_id)["Kids"].append(Reference(root_id))
        assert graph.page_count() == 2

    def test_malformed_kids_yields_no_pages(self, make_graph):
        graph = make_graph(2)
        graph.get_object(graph.pages_root_id())["Kids"] = Name("Broken")
        assert graph.page_count() == 0


class TestInheritedAttributes:
    def test_mediabox_from_root(self, make_graph):
        graph = make_graph(2, nested=True)
        page_id = graph.enumerate_pages()[1]
        assert graph.inherited_attributes(page_id) == {"MediaBox": [0, 0, 612, 792]}

    def test_own_attribute_wins(self, make_graph):
        graph = make_graph(1)
        page_id = graph.enumerate_pages()[1]
        graph.get_object(page_id)["MediaBox"] = [0, 0, 100, 100]
        assert graph.inherited_attributes(page_id) == {}


class TestDeletePages:
    def test_delete_updates_kids_and_count(self, make_graph, markers):
        graph = make_graph(4)
        assert graph.delete_pages([2, 4]) == 2
        root = graph.get_object(graph.pages_root_id())
        assert root["Count"] == 2
        assert len(root["Kids"]) == 2
        assert markers(graph) == [1, 3]

    def test_delete_nested_updates_every_count(self, make_graph, markers):
        graph = make_graph(6, nested=True)
        graph.delete_pages([1, 2])
        root = graph.get_object(graph.pages_root_id())
        first_child = graph.resolve(root["Kids"][0])
        assert root["Count"] == 4
        assert first_child["Count"] == 1
        assert markers(graph) == [3, 4, 5, 6]

    def test_out_of_range_ignored(self, make_graph):
        graph = make_graph(3)
        assert graph.delete_pages([0, 4, 10]) == 0
        assert graph.page_count() == 3


class TestRenumber:
    def test_contiguous_from_start(self, make_graph, markers):
        graph = make_graph(3)
        graph.delete_pages([2])
        graph.prune_unreachable()
        highest = graph.renumber_from(10)
        numbers = sorted(oid.number for oid in graph.objects)
        assert numbers == list(range(10, highest + 1))
        assert all(oid.generation == 0 for oid in graph.objects)
        assert markers(graph) == [1, 3]

    def test_empty_graph_returns_start_minus_one(self):
        assert Graph().renumber_from(5) == 4

    def test_dangling_reference_becomes_null(self, make_graph):
        graph = make_graph(1)
        page_id = graph.enumerate_pages()[1]
        graph.get_object(page_id)["Thumb"] = Reference(ObjectId(500))
        graph.renumber_from(1)
        page_id = graph.enumerate_pages()[1]
        assert graph.get_object(page_id)["Thumb"] is None


class TestPruneUnreachable:
    def test_removes_orphans(self, make_graph):
        graph = make_graph(2)
        orphan = graph.add_object({"Type": Name("Orphan")})
        assert graph.prune_unreachable() == 1
        assert orphan not in graph.objects

    def test_deleted_page_content_is_pruned(self, make_graph):
        graph = make_graph(3)
        before = len(graph.objects)
        graph.delete_pages([1])
        graph.prune_unreachable()
        # page dictionary and its content stream
        assert len(graph.objects) == before - 2


class TestDropEmptyStreams:
    def test_removes_stream_and_references(self, make_graph):
        graph = make_graph(1)
        page_id = graph.enumerate_pages()[1]
        empty_id = graph.add_object(Stream({}, b""))
        page = graph.get_object(page_id)
        page["Contents"] = [page["Contents"], Reference(empty_id)]

        assert graph.drop_empty_streams() == 1
        assert empty_id not in graph.objects
        contents = graph.get_object(page_id)["Contents"]
        assert Reference(empty_id) not in contents
        assert len(contents) == 1

    def test_nothing_to_drop(self, make_graph):
        assert make_graph(2).drop_empty_streams() == 0
