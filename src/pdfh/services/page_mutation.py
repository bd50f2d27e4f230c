"""
pdfh - Page Mutation

Delete, extract and rotate operations applied to a resolved page selection
of a single graph.
"""

import logging
from collections.abc import Iterable

from pdfh.constants import ROTATION_MULTIPLE
from pdfh.model.graph import Graph
from pdfh.services.page_selection import resolve_pages
from pdfh.utils.exceptions import SelectionInputError

logger = logging.getLogger(__name__)


def validate_degrees(degrees: int) -> None:
    """Raise SelectionInputError unless *degrees* is a multiple of 90."""
    if isinstance(degrees, bool) or not isinstance(degrees, int) or degrees % ROTATION_MULTIPLE:
        raise SelectionInputError(
            "degrees", degrees, f"must be a multiple of {ROTATION_MULTIPLE}"
        )


def delete_pages(
    graph: Graph,
    explicit: Iterable[int] | None = None,
    every: int | None = None,
    negate: bool = False,
) -> int:
    """Remove the selected pages from *graph*.

    Selected numbers with no matching page are skipped.

    Returns:
        Number of pages removed.
    """
    total = graph.page_count()
    selection = resolve_pages(total, explicit, every, negate)
    targets = sorted(p for p in selection if 1 <= p <= total)

    skipped = len(selection) - len(targets)
    if skipped:
        logger.debug("Ignoring %d page numbers outside 1-%d", skipped, total)

    removed = graph.delete_pages(targets)
    logger.info("Deleted %d of %d pages", removed, total)
    return removed


def extract_pages(
    graph: Graph,
    explicit: Iterable[int] | None = None,
    every: int | None = None,
) -> int:
    """Keep only the selected pages of *graph*.

    Returns:
        Number of pages kept.
    """
    delete_pages(graph, explicit, every, negate=True)
    return graph.page_count()


def rotate_pages(
    graph: Graph,
    degrees: int,
    explicit: Iterable[int] | None = None,
    every: int | None = None,
) -> int:
    """Set ``Rotate`` on the selected pages (all pages without a selection).

    The value replaces any existing rotation rather than adding to it.

    Returns:
        Number of pages rotated.
    """
    validate_degrees(degrees)

    pages = graph.enumerate_pages()
    selection = resolve_pages(len(pages), explicit, every)

    rotated = 0
    for number in sorted(selection):
        page_id = pages.get(number)
        if page_id is None:
            continue
        page = graph.get_object(page_id)
        page["Rotate"] = degrees
        graph.set_object(page_id, page)
        rotated += 1

    logger.info("Rotated %d pages to %d°", rotated, degrees)
    return rotated


def read_rotations(graph: Graph) -> dict[int, int]:
    """Map each page number to its ``Rotate`` value, 0 when absent."""
    rotations = {}
    for number, page_id in graph.enumerate_pages().items():
        value = graph.get_object(page_id).get("Rotate", 0)
        rotations[number] = value if isinstance(value, int) else 0
    return rotations
