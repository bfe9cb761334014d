"""
Domain DTOs (Data Transfer Objects) used across multiple layers.

DTOs live in helpers/dto/<domain>_dto.py and form cross-layer contracts
(services → workflows → components). Safe to import from every layer.
"""

from __future__ import annotations

from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.dto.file_dto import ClassifiedLine, FileMetadata, Span

__all__ = [
    "ClassifiedLine",
    "EngineConfig",
    "FileMetadata",
    "Span",
]
