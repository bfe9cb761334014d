"""File metadata detection component.

Determines encoding, BOM, newline style and trailing-newline presence from a
bounded prefix sample plus a bounded tail probe. The file is never read in
full here.

Detection order:
1. Empty file -> UTF-8, no BOM, configured default newline
2. BOM sniff (UTF-32 before UTF-16, since the UTF-32 LE BOM starts with FF FE)
3. Every sampled byte <= 0x7F -> ASCII
4. Sample decodes as strict UTF-8 -> UTF-8
5. charset-normalizer best guess
6. UTF-8 fallback
"""

from __future__ import annotations

import codecs
import logging
import os
from pathlib import Path

import charset_normalizer

from linewise.helpers.content import first_terminator
from linewise.helpers.dto.config_dto import EngineConfig
from linewise.helpers.dto.file_dto import FileMetadata
from linewise.helpers.exceptions import NotFoundError, classify_os_error

logger = logging.getLogger(__name__)

# UTF-32 LE must be tested before UTF-16 LE
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

# Caller-facing encoding names -> (codec, BOM written for new files)
_ENCODING_ALIASES: dict[str, tuple[str, bytes]] = {
    "utf8": ("utf-8", b""),
    "utf-8": ("utf-8", b""),
    "utf-8-bom": ("utf-8", codecs.BOM_UTF8),
    "utf8bom": ("utf-8", codecs.BOM_UTF8),
    "utf-8-sig": ("utf-8", codecs.BOM_UTF8),
    "sjis": ("shift_jis", b""),
    "shift-jis": ("shift_jis", b""),
    "euc-jp": ("euc_jp", b""),
    "iso-2022-jp": ("iso2022_jp", b""),
    "jis": ("iso2022_jp", b""),
    "ascii": ("ascii", b""),
    "us-ascii": ("ascii", b""),
    "unicode": ("utf-16-le", codecs.BOM_UTF16_LE),
    "utf-16": ("utf-16-le", codecs.BOM_UTF16_LE),
    "utf-16le": ("utf-16-le", codecs.BOM_UTF16_LE),
    "utf-16be": ("utf-16-be", codecs.BOM_UTF16_BE),
    "utf-32": ("utf-32-le", codecs.BOM_UTF32_LE),
    "utf-32le": ("utf-32-le", codecs.BOM_UTF32_LE),
    "utf-32be": ("utf-32-be", codecs.BOM_UTF32_BE),
}

# Codec names that imply a BOM; the BOM is tracked separately so map to the explicit-endian codec
_BOMLESS_CODEC = {
    "utf-8-sig": "utf-8",
    "utf-16": "utf-16-le",
    "utf-32": "utf-32-le",
}


def canonical_codec(name: str) -> str:
    """Normalize a codec name through codecs.lookup, dropping implicit-BOM variants."""
    codec = codecs.lookup(name).name
    return _BOMLESS_CODEC.get(codec, codec)


def resolve_encoding(name: str) -> tuple[str, bytes] | None:
    """Resolve a caller-supplied encoding name.

    Args:
        name: Alias such as "utf8", "utf-8-bom", "sjis" or any Python codec name

    Returns:
        (codec, bom) or None when the name is unknown

    """
    key = name.strip().lower().replace("_", "-")
    if key in _ENCODING_ALIASES:
        codec, bom = _ENCODING_ALIASES[key]
        return canonical_codec(codec), bom
    try:
        return canonical_codec(key), b""
    except LookupError:
        return None


def sniff_bom(sample: bytes) -> tuple[bytes, str] | None:
    for bom, codec in _BOMS:
        if sample.startswith(bom):
            return bom, codec
    return None


def _guess_codec(body: bytes, complete: bool) -> str:
    if body.isascii():
        return "ascii"
    try:
        # The sample may end mid-character; only a complete file must end cleanly
        codecs.getincrementaldecoder("utf-8")().decode(body, final=complete)
    except UnicodeDecodeError:
        pass
    else:
        return "utf-8"

    best = charset_normalizer.from_bytes(body).best()
    if best is not None:
        try:
            return canonical_codec(best.encoding)
        except LookupError:
            logger.debug(f"[metadata] charset-normalizer proposed unknown codec {best.encoding!r}")
    return "utf-8"


def _detect_newline(body: bytes, codec: str, default: str) -> str:
    decoder = codecs.getincrementaldecoder(codec)(errors="replace")
    found = first_terminator(decoder.decode(body, final=False))
    return found if found is not None else default


def _ends_with_newline(tail: bytes, codec: str) -> bool:
    if not tail:
        return False
    return tail.endswith("\n".encode(codec)) or tail.endswith("\r".encode(codec))


def metadata_for_new_file(
    config: EngineConfig,
    encoding: str | None = None,
) -> tuple[FileMetadata, list[str]]:
    """Metadata used when an operation creates a file.

    Returns:
        (metadata, notices)

    """
    notices: list[str] = []
    codec, bom, pinned = "utf-8", b"", False
    if encoding:
        resolved = resolve_encoding(encoding)
        if resolved is None:
            notices.append(_unknown_encoding_notice(encoding))
        else:
            (codec, bom), pinned = resolved, True
    metadata = FileMetadata(
        encoding=codec,
        newline=config.default_newline,
        has_trailing_newline=config.new_file_trailing_newline,
        bom=bom,
        explicitly_pinned=pinned,
    )
    return metadata, notices


def _unknown_encoding_notice(name: str) -> str:
    logger.warning(f"[metadata] Unknown encoding '{name}', falling back to auto-detection")
    return f"Warning: Unknown encoding '{name}'. Falling back to auto-detection."


def detect_file_metadata(
    path: Path,
    config: EngineConfig,
    encoding: str | None = None,
) -> tuple[FileMetadata, list[str]]:
    """Detect metadata for an existing file from a bounded read.

    Args:
        path: File to inspect (must exist)
        config: Sample and tail-probe sizes, default newline
        encoding: Optional pinned encoding name

    Returns:
        (metadata, notices)

    Raises:
        NotFoundError: path does not exist
        BusyError: file is locked by another process
        IOFailureError: any other OS error

    """
    notices: list[str] = []
    pinned: tuple[str, bytes] | None = None
    if encoding:
        pinned = resolve_encoding(encoding)
        if pinned is None:
            notices.append(_unknown_encoding_notice(encoding))

    try:
        with open(path, "rb") as fh:
            size = os.fstat(fh.fileno()).st_size
            sample = fh.read(config.sample_bytes)
            if size > len(sample):
                fh.seek(max(0, size - config.tail_probe_bytes))
                tail = fh.read(config.tail_probe_bytes)
            else:
                tail = sample[-config.tail_probe_bytes :]
    except FileNotFoundError as exc:
        raise NotFoundError(path) from exc
    except OSError as exc:
        raise classify_os_error(exc, path) from exc

    complete = size <= len(sample)
    sniffed = sniff_bom(sample)

    if pinned is not None:
        # Existing files keep their own BOM; the alias BOM only applies to new files
        codec, bom = pinned[0], b""
        if sniffed is not None and sniffed[1] == codec:
            bom = sniffed[0]
        elif sniffed is not None:
            logger.warning(f"[metadata] {path}: BOM indicates {sniffed[1]} but {codec} was pinned")
    elif size == 0:
        codec, bom = "utf-8", b""
    elif sniffed is not None:
        bom, codec = sniffed
    else:
        codec, bom = _guess_codec(sample, complete), b""

    body = sample[len(bom) :] if sample.startswith(bom) else sample
    newline = _detect_newline(body, codec, config.default_newline)
    # A BOM-only file has no content lines
    trailing = _ends_with_newline(tail, codec) if size > len(bom) else False

    metadata = FileMetadata(
        encoding=codec,
        newline=newline,
        has_trailing_newline=trailing,
        bom=bom,
        explicitly_pinned=pinned is not None,
    )
    logger.debug(
        f"[metadata] {path}: encoding={codec} bom={bom.hex() or '-'} "
        f"newline={newline!r} trailing_newline={trailing} pinned={metadata.explicitly_pinned}"
    )
    return metadata, notices
