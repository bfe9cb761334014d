"""Output encoding policy for introduced content.

ASCII files are upgraded to UTF-8 when new content needs it and no encoding
was pinned. Whatever the outcome, every introduced line must then encode
with the output codec, or the edit is rejected before any I/O.
"""

from __future__ import annotations

import logging

from linewise.helpers.content import has_non_ascii
from linewise.helpers.dto.file_dto import FileMetadata
from linewise.helpers.exceptions import UnencodableContentError

logger = logging.getLogger(__name__)

UPGRADE_NOTICE = "Content contains non-ASCII characters. Upgrading encoding to UTF-8."


def should_upgrade(metadata: FileMetadata, new_lines: list[str]) -> bool:
    return not metadata.explicitly_pinned and metadata.encoding == "ascii" and has_non_ascii(new_lines)


def ensure_encodable(encoding: str, new_lines: list[str]) -> None:
    """Raise UnencodableContentError for the first line the codec cannot represent.

    Escaped surrogates from undecodable source bytes are written back as the
    original bytes, so they count as encodable.
    """
    for line in new_lines:
        try:
            line.encode(encoding, "surrogateescape")
        except UnicodeEncodeError as exc:
            raise UnencodableContentError(encoding, line[exc.start : exc.end]) from exc


def apply_encoding_policy(metadata: FileMetadata, new_lines: list[str]) -> tuple[FileMetadata, list[str]]:
    """Decide the output metadata for an edit introducing ``new_lines``.

    Returns:
        (output metadata, notices)

    Raises:
        UnencodableContentError: content cannot be written in the output encoding

    """
    notices: list[str] = []
    if should_upgrade(metadata, new_lines):
        metadata = metadata.with_encoding("utf-8")
        notices.append(UPGRADE_NOTICE)
        logger.info("[encoding] Upgrading ASCII output to UTF-8 for non-ASCII content")
    ensure_encodable(metadata.encoding, new_lines)
    return metadata, notices
