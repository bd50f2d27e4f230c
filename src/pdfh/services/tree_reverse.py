"""
pdfh - Page Tree Reversal
"""

import logging

from pdfh.model.graph import Graph

logger = logging.getLogger(__name__)


def reverse_page_tree(graph: Graph) -> int:
    """Reverse ``Kids`` on every Pages node of *graph*, nested ones included.

    Reversing each node independently mirrors the whole depth-first order.
    A node whose ``Kids`` is missing or not an array is left alone.

    Returns:
        Number of Pages nodes reversed.
    """
    reversed_nodes = 0
    for object_id, value in graph.objects.items():
        if not graph.is_pages_node(value):
            continue
        kids = value.get("Kids")
        if not isinstance(kids, list):
            logger.warning("Pages node %s has no usable Kids array, left as is", object_id)
            continue
        value["Kids"] = kids[::-1]
        reversed_nodes += 1

    logger.debug("Reversed %d Pages nodes", reversed_nodes)
    return reversed_nodes
