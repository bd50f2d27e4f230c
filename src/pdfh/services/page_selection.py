"""
pdfh - Page Selection

Turns a user's page targeting (explicit list or every-Nth rule, optionally
inverted) into a concrete set of 1-based page numbers.
"""

from collections.abc import Iterable

from pdfh.utils.exceptions import SelectionInputError


def validate_selection(explicit: Iterable[int] | None, every: int | None) -> None:
    """Reject contradictory or degenerate selection parameters.

    Raises:
        SelectionInputError: If both modes are given or ``every`` is below 1.
    """
    if explicit is not None and every is not None:
        raise SelectionInputError("pages", reason="cannot be combined with 'every'")
    if every is not None and every < 1:
        raise SelectionInputError("every", every, "must be a positive integer")


def resolve_pages(
    total: int,
    explicit: Iterable[int] | None = None,
    every: int | None = None,
    negate: bool = False,
) -> set[int]:
    """Resolve a selection against a document of *total* pages.

    Args:
        total: Current page count.
        explicit: Page numbers chosen by the user. Numbers out of range are
            kept; the operation applying the selection skips them.
        every: Select every page whose number is a multiple of this value.
        negate: Select the complement within ``1..total`` instead.

    Returns:
        The selected page numbers.

    Raises:
        SelectionInputError: See :func:`validate_selection`.
    """
    if explicit is not None:
        explicit = set(explicit)
    validate_selection(explicit, every)

    all_pages = set(range(1, total + 1))
    if explicit is not None:
        return all_pages - explicit if negate else explicit
    if every is not None:
        if negate:
            return {p for p in all_pages if p % every != 0}
        return {p for p in all_pages if p % every == 0}
    return all_pages
