#!/usr/bin/env python3
"""
pdfh - Entry point for python -m pdfh

This module allows the package to be run as a module:
    python -m pdfh
"""

import sys

from pdfh import main

if __name__ == "__main__":
    sys.exit(main())
