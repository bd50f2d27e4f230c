"""
pdfh - Finalization

Cleanup run on every graph right before it is saved.
"""

import logging

from pdfh.model.graph import Graph
from pdfh.model.outline import fix_dangling_bookmarks, rebuild_outline
from pdfh.utils.exceptions import EmptyResultError

logger = logging.getLogger(__name__)


def finalize(graph: Graph) -> int:
    """Prepare *graph* for saving.

    Steps, in order: drop unreachable objects, repair bookmarks left pointing
    at removed pages, rebuild the outline tree, drop zero-length streams and
    check that at least one page remains.

    Returns:
        Final page count.

    Raises:
        EmptyResultError: If the document has no pages left.
    """
    pruned = graph.prune_unreachable()
    repaired = fix_dangling_bookmarks(graph)
    rebuild_outline(graph)
    dropped = graph.drop_empty_streams()

    page_count = graph.page_count()
    logger.debug(
        "Finalized: %d objects pruned, %d bookmarks repaired, %d empty streams dropped",
        pruned,
        repaired,
        dropped,
    )
    if page_count == 0:
        raise EmptyResultError()
    return page_count
