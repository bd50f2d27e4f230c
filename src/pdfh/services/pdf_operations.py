"""
pdfh - PDF Operations Service

File-level entry points, one per command. Each loads its input through
pikepdf, runs the graph operation, finalizes and saves the result.

Supported operations:
  - Merge multiple PDFs (directories are expanded)
  - Duplicate a PDF N times into one file
  - Split into one file per page
  - Delete / extract pages
  - Rotate pages
  - Reverse page order
"""

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path

from pdfh.constants import PDF_EXTENSIONS, PDF_VERSION, SPLIT_NAME_WIDTH
from pdfh.model.graph import Graph
from pdfh.services import page_mutation
from pdfh.services.finalize import finalize
from pdfh.services.merge import duplicate_graph, merge_graphs
from pdfh.services.pdf_io import load, save
from pdfh.services.tree_reverse import reverse_page_tree
from pdfh.utils.exceptions import (
    EmptyResultError,
    LoadError,
    PdfhError,
    SaveError,
    SelectionInputError,
    StructuralAbsenceError,
)
from pdfh.utils.i18n import _

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """Error classification for PDF operations."""

    NONE = auto()
    FILE_NOT_FOUND = auto()
    PERMISSION_DENIED = auto()
    CORRUPT_PDF = auto()
    PASSWORD_PROTECTED = auto()
    DISK_FULL = auto()
    INVALID_SELECTION = auto()
    MISSING_STRUCTURE = auto()
    EMPTY_RESULT = auto()
    UNKNOWN = auto()


def _classify_error(e: Exception) -> ErrorCode:
    """Classify an exception into an ErrorCode."""
    cause = e.__cause__
    if isinstance(e, LoadError):
        if isinstance(cause, FileNotFoundError):
            return ErrorCode.FILE_NOT_FOUND
        if isinstance(cause, PermissionError):
            return ErrorCode.PERMISSION_DENIED
        if e.reason and e.reason.startswith("password protected"):
            return ErrorCode.PASSWORD_PROTECTED
        return ErrorCode.CORRUPT_PDF
    if isinstance(e, SaveError):
        if isinstance(cause, PermissionError):
            return ErrorCode.PERMISSION_DENIED
        if isinstance(cause, OSError) and cause.errno == 28:
            return ErrorCode.DISK_FULL
        return ErrorCode.UNKNOWN
    if isinstance(e, SelectionInputError):
        return ErrorCode.INVALID_SELECTION
    if isinstance(e, StructuralAbsenceError):
        return ErrorCode.MISSING_STRUCTURE
    if isinstance(e, EmptyResultError):
        return ErrorCode.EMPTY_RESULT
    return ErrorCode.UNKNOWN


def _friendly_error(e: Exception) -> str:
    """Map exceptions to the message shown to the user."""
    if isinstance(e, EmptyResultError):
        return _("Resulting document would have no pages. Nothing was written.")
    if isinstance(e, PdfhError):
        return e.message
    return str(e)


def _fail(e: Exception) -> "OperationResult":
    """Create a failed OperationResult from an exception."""
    return OperationResult(
        success=False,
        message=_friendly_error(e),
        error_code=_classify_error(e),
    )


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class SplitResult:
    """Result of a split operation."""

    output_files: list[str] = field(default_factory=list)
    total_pages: int = 0
    parts: int = 0


@dataclass
class OperationResult:
    """Generic result for PDF operations."""

    success: bool
    message: str = ""
    output_path: str = ""
    pages_affected: int = 0
    error_code: ErrorCode = ErrorCode.NONE


def _finalize_and_save(
    graph: Graph,
    pdf_path: str | Path,
    output_path: str | Path | None,
    compress: bool,
) -> tuple[str, int]:
    """Finalize *graph* and write it to *output_path* (in place when None).

    Returns:
        The path written and the final page count.
    """
    target = Path(output_path) if output_path else Path(pdf_path)
    page_count = finalize(graph)
    save(graph, target, compress=compress)
    return str(target), page_count


# ---------------------------------------------------------------------------
# Input expansion
# ---------------------------------------------------------------------------


def expand_inputs(
    paths: list[str | Path],
    extensions: tuple[str, ...] | list[str] = PDF_EXTENSIONS,
) -> list[str]:
    """Replace each directory in *paths* with the PDF files it contains.

    Directories are not searched recursively; their files are taken in name
    order and filtered by *extensions*. Other paths are kept as given.
    """
    expanded: list[str] = []
    for path in paths:
        path = Path(path)
        if not path.is_dir():
            expanded.append(str(path))
            continue
        found = sorted(
            entry
            for entry in path.iterdir()
            if entry.is_file() and entry.suffix in extensions
        )
        if not found:
            logger.warning("No PDF files found in directory: %s", path)
        expanded.extend(str(entry) for entry in found)
    return expanded


# ---------------------------------------------------------------------------
# Merge / Duplicate
# ---------------------------------------------------------------------------


def merge_pdfs(
    input_paths: list[str | Path],
    output_path: str | Path,
    compress: bool = False,
    *,
    extensions: tuple[str, ...] | list[str] = PDF_EXTENSIONS,
    version: str = PDF_VERSION,
) -> OperationResult:
    """Merge multiple PDF files into one.

    Args:
        input_paths: PDF files or directories of PDF files, in order.
        output_path: Path for the merged output PDF.
        compress: Compress streams of the output.
        extensions: File suffixes picked up from directories.
        version: PDF version of the output.

    Returns:
        OperationResult.
    """
    files = expand_inputs(input_paths, extensions)
    if not files:
        return OperationResult(success=False, message=_("No input files provided."))

    try:
        graphs = []
        for path in files:
            graphs.append(load(path))
            logger.info("Loaded %s", Path(path).name)

        merged = merge_graphs(graphs, version=version)
        out, total_pages = _finalize_and_save(merged, files[0], output_path, compress)
    except PdfhError as e:
        logger.error("Merge failed: %s", e)
        return _fail(e)

    logger.info("Merged PDF saved: %s (%d pages)", out, total_pages)
    return OperationResult(
        success=True,
        message=_("Merged {files} files → {pages} pages").format(
            files=len(files), pages=total_pages
        ),
        output_path=out,
        pages_affected=total_pages,
    )


def duplicate_pdf(
    pdf_path: str | Path,
    output_path: str | Path,
    times: int,
    compress: bool = False,
    *,
    version: str | None = None,
) -> OperationResult:
    """Write *times* consecutive copies of a PDF into one file.

    Args:
        pdf_path: Source PDF path.
        output_path: Output PDF path.
        times: Number of copies, at least 1.
        compress: Compress streams of the output.
        version: PDF version of the output, the input's when None.

    Returns:
        OperationResult.
    """
    try:
        graph = load(pdf_path)
        duplicated = duplicate_graph(graph, times, version)
        out, total_pages = _finalize_and_save(duplicated, pdf_path, output_path, compress)
    except PdfhError as e:
        logger.error("Duplicate failed: %s", e)
        return _fail(e)

    logger.info("Duplicated %s %d times → %s", pdf_path, times, out)
    return OperationResult(
        success=True,
        message=_("Wrote {times} copies ({pages} pages)").format(times=times, pages=total_pages),
        output_path=out,
        pages_affected=total_pages,
    )


# ---------------------------------------------------------------------------
# Split
# ---------------------------------------------------------------------------


def split_pdf(
    pdf_path: str | Path,
    output_path: str | Path | None = None,
    compress: bool = False,
) -> SplitResult:
    """Split a PDF into one file per page.

    Files are named ``<stem>_page<NNN><suffix>`` after *output_path* (or the
    input when no output is given) and placed in its directory.

    Args:
        pdf_path: Source PDF path.
        output_path: Template path for the output files.
        compress: Compress streams of the outputs.

    Returns:
        SplitResult with list of created files.

    Raises:
        PdfhError: If the input cannot be loaded or a part cannot be written.
    """
    template = Path(output_path) if output_path else Path(pdf_path)
    source = load(pdf_path)
    total = source.page_count()
    width = max(SPLIT_NAME_WIDTH, len(str(total)))

    result = SplitResult(total_pages=total)
    for number in range(1, total + 1):
        part = source.copy()
        page_mutation.extract_pages(part, [number])

        out_path = template.with_name(f"{template.stem}_page{number:0{width}d}{template.suffix}")
        out, _pages = _finalize_and_save(part, pdf_path, out_path, compress)

        result.output_files.append(out)
        result.parts += 1
        logger.info("Split page %d/%d → %s", number, total, out_path.name)

    return result


# ---------------------------------------------------------------------------
# Delete / Extract pages
# ---------------------------------------------------------------------------


def delete_pages(
    pdf_path: str | Path,
    output_path: str | Path | None = None,
    pages: list[int] | None = None,
    every: int | None = None,
    negate: bool = False,
    compress: bool = False,
) -> OperationResult:
    """Remove selected pages from a PDF.

    Args:
        pdf_path: Source PDF path.
        output_path: Output PDF path; the source is edited in place when None.
        pages: 1-indexed page numbers to remove.
        every: Remove every page whose number is a multiple of this value.
        negate: Remove every page except the selected ones.
        compress: Compress streams of the output.

    Returns:
        OperationResult.
    """
    try:
        graph = load(pdf_path)
        removed = page_mutation.delete_pages(graph, pages, every, negate)
        out, kept = _finalize_and_save(graph, pdf_path, output_path, compress)
    except PdfhError as e:
        logger.error("Delete pages failed: %s", e)
        return _fail(e)

    logger.info("Deleted %d pages, kept %d pages → %s", removed, kept, out)
    return OperationResult(
        success=True,
        message=_("Deleted {removed} pages, {kept} remaining").format(removed=removed, kept=kept),
        output_path=out,
        pages_affected=removed,
    )


def extract_pages(
    pdf_path: str | Path,
    output_path: str | Path | None = None,
    pages: list[int] | None = None,
    every: int | None = None,
    compress: bool = False,
) -> OperationResult:
    """Keep only the selected pages of a PDF.

    Args:
        pdf_path: Source PDF path.
        output_path: Output PDF path; the source is edited in place when None.
        pages: 1-indexed page numbers to keep.
        every: Keep every page whose number is a multiple of this value.
        compress: Compress streams of the output.

    Returns:
        OperationResult.
    """
    try:
        graph = load(pdf_path)
        page_mutation.extract_pages(graph, pages, every)
        out, kept = _finalize_and_save(graph, pdf_path, output_path, compress)
    except PdfhError as e:
        logger.error("Extract failed: %s", e)
        return _fail(e)

    logger.info("Extracted %d pages → %s", kept, out)
    return OperationResult(
        success=True,
        message=_("Extracted {kept} pages").format(kept=kept),
        output_path=out,
        pages_affected=kept,
    )


# ---------------------------------------------------------------------------
# Rotate pages
# ---------------------------------------------------------------------------


def rotate_pages(
    pdf_path: str | Path,
    output_path: str | Path | None = None,
    *,
    degrees: int,
    pages: list[int] | None = None,
    every: int | None = None,
    compress: bool = False,
) -> OperationResult:
    """Set the rotation of selected pages (all pages without a selection).

    Args:
        pdf_path: Source PDF path.
        output_path: Output PDF path; the source is edited in place when None.
        degrees: Absolute rotation, a multiple of 90.
        pages: 1-indexed page numbers to rotate.
        every: Rotate every page whose number is a multiple of this value.
        compress: Compress streams of the output.

    Returns:
        OperationResult.
    """
    try:
        page_mutation.validate_degrees(degrees)
        graph = load(pdf_path)
        rotated = page_mutation.rotate_pages(graph, degrees, pages, every)
        out, _pages = _finalize_and_save(graph, pdf_path, output_path, compress)
    except PdfhError as e:
        logger.error("Rotate failed: %s", e)
        return _fail(e)

    logger.info("Rotated %d pages to %d° → %s", rotated, degrees, out)
    return OperationResult(
        success=True,
        message=_("Rotated {rotated} pages to {degrees}°").format(rotated=rotated, degrees=degrees),
        output_path=out,
        pages_affected=rotated,
    )


# ---------------------------------------------------------------------------
# Reverse page order
# ---------------------------------------------------------------------------


def reverse_pages(
    pdf_path: str | Path,
    output_path: str | Path | None = None,
    compress: bool = False,
) -> OperationResult:
    """Reverse the page order of a PDF.

    Args:
        pdf_path: Source PDF path.
        output_path: Output PDF path; the source is edited in place when None.
        compress: Compress streams of the output.

    Returns:
        OperationResult.
    """
    try:
        graph = load(pdf_path)
        reverse_page_tree(graph)
        out, total = _finalize_and_save(graph, pdf_path, output_path, compress)
    except PdfhError as e:
        logger.error("Reverse failed: %s", e)
        return _fail(e)

    logger.info("Reversed %d pages → %s", total, out)
    return OperationResult(
        success=True,
        message=_("Reversed {pages} pages").format(pages=total),
        output_path=out,
        pages_affected=total,
    )
