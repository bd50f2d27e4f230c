"""
pdfh - Python package for PDF page-tree manipulation

Rotate, delete, extract, reverse, split, duplicate and merge pages of PDF
files by editing the document's object graph directly.
"""

import sys

__version__ = "0.1.0"
__license__ = "GPL-3.0"


def main(argv: list[str] | None = None) -> int:
    """Run the command-line interface."""
    from pdfh.cli import main as cli_main

    return cli_main(argv if argv is not None else sys.argv[1:])
