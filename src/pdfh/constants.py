"""
pdfh - Numeric Constants

Simple constants with ZERO internal imports to avoid circular dependencies.
For application-level constants (strings, paths), use config.py.
"""

from typing import Final

# ============================================================================
# Page Tree
# ============================================================================

ROTATION_MULTIPLE: Final[int] = 90

# Attributes a page inherits from its ancestor Pages nodes when it lacks them
INHERITABLE_PAGE_ATTRIBUTES: Final[tuple[str, ...]] = (
    "Resources",
    "MediaBox",
    "CropBox",
    "Rotate",
)

# Guards page-tree walks against reference cycles in malformed files
MAX_PAGE_TREE_DEPTH: Final[int] = 256

# ============================================================================
# Output
# ============================================================================

PDF_VERSION: Final[str] = "1.5"
PDF_EXTENSIONS: Final[tuple[str, ...]] = (".pdf", ".PDF")
SPLIT_NAME_WIDTH: Final[int] = 3
