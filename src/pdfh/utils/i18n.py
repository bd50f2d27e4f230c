#!/usr/bin/env python3
"""
pdfh - Internationalization Module

This module initializes gettext for internationalization support.
"""

import gettext
import os
import sys
from collections.abc import Callable

TEXT_DOMAIN = "pdfh"


def _dummy_translate(text: str) -> str:
    """Fallback translation function that returns the original text.

    Args:
        text: The text to translate.

    Returns:
        The original text unchanged.
    """
    return text


# Initialize _ with the fallback function
_: Callable[[str], str] = _dummy_translate

# Check multiple locations where translation files might be
locale_dirs = [
    "/usr/share/locale",
    os.path.join(sys.prefix, "share", "locale"),
    os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "locale"),
]

for locale_dir in locale_dirs:
    if os.path.exists(locale_dir):
        gettext.bindtextdomain(TEXT_DOMAIN, locale_dir)

gettext.textdomain(TEXT_DOMAIN)

# gettext falls back to the original string when no catalog is installed
_ = gettext.gettext
