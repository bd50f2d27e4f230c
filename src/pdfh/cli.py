#!/usr/bin/env python3
"""
pdfh CLI: PDF page-tree toolbox from the terminal.

Usage:
    python -m pdfh <command> [options]

Commands:
    merge       Merge PDFs (and directories of PDFs) into one
    split       Split a PDF into one file per page
    dupe        Repeat a PDF N times in one file
    rotate      Set the rotation of pages
    delete      Delete pages
    reverse     Reverse the page order
    extract     Keep only some pages

Without -o/--output, every command except merge and dupe edits its input in
place.

Examples:
    pdfh merge a.pdf b.pdf scans/ -o merged.pdf
    pdfh split book.pdf -o pages/book.pdf
    pdfh dupe form.pdf --num 3 -o forms.pdf
    pdfh rotate input.pdf -o out.pdf --degrees 90 --pages 1,3,5
    pdfh delete input.pdf --pages 2 --negate
    pdfh extract input.pdf -o even.pdf --every 2
    pdfh reverse input.pdf -o reversed.pdf --compress
"""

import argparse
import locale
import logging
import sys
from pathlib import Path

from pdfh.config import APP_DESCRIPTION, APP_NAME, APP_VERSION, LOG_DATE_FORMAT, LOG_FORMAT
from pdfh.constants import ROTATION_MULTIPLE
from pdfh.utils.config_manager import get_config_manager
from pdfh.utils.exceptions import PdfhError
from pdfh.utils.i18n import _
from pdfh.utils.logger import set_level

# ---------------------------------------------------------------------------
# Environment setup
# ---------------------------------------------------------------------------


def _setup_environment():
    """Use the user's locale for messages but C for number formatting."""
    try:
        locale.setlocale(locale.LC_ALL, "")
        locale.setlocale(locale.LC_NUMERIC, "C")
    except locale.Error:
        locale.setlocale(locale.LC_ALL, "C")


# ---------------------------------------------------------------------------
# Argument types
# ---------------------------------------------------------------------------


def _parse_page_list(text: str) -> list[int]:
    """Parse a page specification string into a sorted list of page numbers.

    Supports: "3", "1-5", "1,3,7", "1-3,7,10-12"

    Args:
        text: Page specification string.

    Returns:
        Sorted list of 1-indexed page numbers.
    """
    pages: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            if "-" in part:
                start_s, end_s = part.split("-", 1)
                s, e = int(start_s.strip()), int(end_s.strip())
                pages.update(range(s, e + 1))
            else:
                pages.add(int(part))
        except ValueError:
            raise ValueError(
                f"Invalid page specification '{part}'. "
                "Use numbers and ranges like '1-5' or '1,3,7'."
            ) from None
    return sorted(p for p in pages if p >= 1)


def _page_list_arg(text: str) -> list[int]:
    try:
        return _parse_page_list(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _positive_int_arg(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not an integer") from None
    if value < 1:
        raise argparse.ArgumentTypeError(f"{value} must be at least 1")
    return value


def _degrees_arg(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{text}' is not an integer") from None
    if value % ROTATION_MULTIPLE:
        raise argparse.ArgumentTypeError(f"{value} is not a multiple of {ROTATION_MULTIPLE}")
    return value


# ---------------------------------------------------------------------------
# Argument parser construction
# ---------------------------------------------------------------------------


def _add_selection(parser: argparse.ArgumentParser, verb: str) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--pages",
        type=_page_list_arg,
        default=None,
        help=_("Pages to {verb} (e.g. '3,5,7' or '2-4')").format(verb=verb),
    )
    group.add_argument(
        "--every",
        type=_positive_int_arg,
        default=None,
        metavar="N",
        help=_("{verb} every page whose number is a multiple of N").format(
            verb=verb.capitalize()
        ),
    )


def _add_common(parser: argparse.ArgumentParser, output_required: bool = False) -> None:
    if output_required:
        help_text = _("Output PDF file")
    else:
        help_text = _("Output PDF file (default: edit in place)")
    parser.add_argument("-o", "--output", type=Path, required=output_required, help=help_text)
    parser.add_argument(
        "--compress",
        action="store_true",
        default=None,
        help=_("Compress streams in the output"),
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with subcommands."""
    p = argparse.ArgumentParser(
        prog=APP_NAME,
        description=APP_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("-v", "--verbose", action="store_true", help=_("Verbose logging (DEBUG)"))
    p.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")

    sub = p.add_subparsers(dest="command", help=_("Available commands"))

    # --- merge ---
    merge_p = sub.add_parser("merge", help=_("Merge multiple PDFs into one"))
    merge_p.add_argument(
        "inputs",
        type=Path,
        nargs="+",
        help=_("Input PDF files or directories, in order"),
    )
    _add_common(merge_p, output_required=True)

    # --- split ---
    split_p = sub.add_parser("split", help=_("Split a PDF into one file per page"))
    split_p.add_argument("input", type=Path, help=_("Input PDF file"))
    _add_common(split_p)

    # --- dupe ---
    dupe_p = sub.add_parser("dupe", help=_("Repeat a PDF several times in one file"))
    dupe_p.add_argument("input", type=Path, help=_("Input PDF file"))
    dupe_p.add_argument(
        "--num",
        type=_positive_int_arg,
        default=2,
        help=_("Number of copies (default: 2)"),
    )
    _add_common(dupe_p, output_required=True)

    # --- rotate ---
    rotate_p = sub.add_parser("rotate", help=_("Set the rotation of pages"))
    rotate_p.add_argument("input", type=Path, help=_("Input PDF file"))
    rotate_p.add_argument(
        "--degrees",
        type=_degrees_arg,
        required=True,
        help=_("Rotation in degrees, a multiple of 90 (clockwise)"),
    )
    _add_selection(rotate_p, _("rotate"))
    _add_common(rotate_p)

    # --- delete ---
    delete_p = sub.add_parser("delete", help=_("Remove pages from a PDF"))
    delete_p.add_argument("input", type=Path, help=_("Input PDF file"))
    _add_selection(delete_p, _("delete"))
    delete_p.add_argument(
        "--negate",
        action="store_true",
        help=_("Delete every page except the selected ones"),
    )
    _add_common(delete_p)

    # --- reverse ---
    reverse_p = sub.add_parser("reverse", help=_("Reverse the page order"))
    reverse_p.add_argument("input", type=Path, help=_("Input PDF file"))
    _add_common(reverse_p)

    # --- extract ---
    extract_p = sub.add_parser("extract", help=_("Keep only the selected pages"))
    extract_p.add_argument("input", type=Path, help=_("Input PDF file"))
    _add_selection(extract_p, _("keep"))
    _add_common(extract_p)

    return p


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


def _compress(args) -> bool:
    if args.compress is not None:
        return args.compress
    return bool(get_config_manager().get("output.compress", False))


def _report(result, label: str) -> int:
    if result.success:
        print(f"{label}: {result.message} → {result.output_path}")
        return 0
    print(f"Error: {result.message}", file=sys.stderr)
    return 1


def _cmd_merge(args, logger) -> int:
    """Handle the 'merge' command."""
    from pdfh.services.pdf_operations import merge_pdfs

    for p in args.inputs:
        if not p.exists():
            print(f"Error: {p} not found", file=sys.stderr)
            return 1

    config = get_config_manager()
    result = merge_pdfs(
        [str(p) for p in args.inputs],
        str(args.output),
        _compress(args),
        extensions=tuple(config.get("input.extensions", [".pdf", ".PDF"])),
        version=str(config.get("output.pdf_version", "1.5")),
    )
    return _report(result, "Merged")


def _cmd_split(args, logger) -> int:
    """Handle the 'split' command."""
    from pdfh.services.pdf_operations import split_pdf

    try:
        result = split_pdf(args.input, args.output, _compress(args))
    except PdfhError as e:
        logger.debug("Split failed", exc_info=True)
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    print(f"Split into {result.parts} parts ({result.total_pages} total pages)")
    for f in result.output_files:
        print(f"  → {f}")
    return 0


def _cmd_dupe(args, logger) -> int:
    """Handle the 'dupe' command."""
    from pdfh.services.pdf_operations import duplicate_pdf

    result = duplicate_pdf(
        args.input,
        args.output,
        args.num,
        _compress(args),
        version=str(get_config_manager().get("output.pdf_version", "1.5")),
    )
    return _report(result, "Duplicated")


def _cmd_rotate(args, logger) -> int:
    """Handle the 'rotate' command."""
    from pdfh.services.pdf_operations import rotate_pages

    result = rotate_pages(
        args.input,
        args.output,
        degrees=args.degrees,
        pages=args.pages,
        every=args.every,
        compress=_compress(args),
    )
    return _report(result, "Rotated")


def _cmd_delete(args, logger) -> int:
    """Handle the 'delete' command."""
    from pdfh.services.pdf_operations import delete_pages

    result = delete_pages(
        args.input,
        args.output,
        pages=args.pages,
        every=args.every,
        negate=args.negate,
        compress=_compress(args),
    )
    return _report(result, "Deleted")


def _cmd_reverse(args, logger) -> int:
    """Handle the 'reverse' command."""
    from pdfh.services.pdf_operations import reverse_pages

    result = reverse_pages(args.input, args.output, _compress(args))
    return _report(result, "Reversed")


def _cmd_extract(args, logger) -> int:
    """Handle the 'extract' command."""
    from pdfh.services.pdf_operations import extract_pages

    result = extract_pages(
        args.input,
        args.output,
        pages=args.pages,
        every=args.every,
        compress=_compress(args),
    )
    return _report(result, "Extracted")


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    _setup_environment()

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Configure logging
    level = logging.DEBUG if args.verbose else get_config_manager().get("logging.level", "INFO")
    logging.basicConfig(format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    set_level(level)
    logger = logging.getLogger("pdfh.cli")

    # Validate input file existence (except merge which has 'inputs')
    if hasattr(args, "input") and args.input and not args.input.exists():
        print(f"Error: {args.input} not found", file=sys.stderr)
        return 1

    # Dispatch to command handler
    handlers = {
        "merge": _cmd_merge,
        "split": _cmd_split,
        "dupe": _cmd_dupe,
        "rotate": _cmd_rotate,
        "delete": _cmd_delete,
        "reverse": _cmd_reverse,
        "extract": _cmd_extract,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args, logger)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
