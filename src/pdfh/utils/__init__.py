"""
pdfh - Utils Package

Utility modules for the application.
"""

from pdfh.utils.config_manager import ConfigManager, get_config_manager
from pdfh.utils.i18n import _
from pdfh.utils.logger import logger

__all__ = ["ConfigManager", "_", "get_config_manager", "logger"]
