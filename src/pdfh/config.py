#!/usr/bin/env python3
"""
pdfh - Configuration Module

This module contains the configuration constants and paths used by the
application.
"""

import logging
import os
from typing import Final

# ============================================================================
# Application Constants
# ============================================================================

APP_NAME: Final[str] = "pdfh"
APP_VERSION: Final[str] = "0.1.0"
APP_DESCRIPTION: Final[str] = "A tool for PDF page-tree manipulation"


# ============================================================================
# Configuration Directory
# ============================================================================

CONFIG_DIR: Final[str] = os.path.expanduser("~/.config/pdfh")
CONFIG_ENV_VAR: Final[str] = "PDFH_CONFIG"


# ============================================================================
# Logging Configuration
# ============================================================================

LOG_LEVEL: int = logging.INFO
LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOGGER_NAME: Final[str] = "pdfh"
