"""
Services package.
"""

from .config_svc import ConfigService
from .text_file_svc import TextFileService

__all__ = [
    "ConfigService",
    "TextFileService",
]
