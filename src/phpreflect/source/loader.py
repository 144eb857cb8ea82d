# Copyright 2026 phpreflect Contributors
# SPDX-License-Identifier: Apache-2.0

"""Loading of PHP source files from disk."""

import hashlib
from dataclasses import dataclass
from pathlib import Path

import structlog

logger = structlog.get_logger()

# ###############
# Public Interface
# ###############

DEFAULT_FALLBACK_ENCODING = "latin-1"


class SourceLoadError(Exception):
    """Raised when a source file does not exist or cannot be read."""


@dataclass(frozen=True)
class SourceText:
    """The decoded contents of a source file.

    Attributes:
        path: The path as given by the caller.
        contents: The file text, decoded to str (UTF-8 byte order mark removed).
        content_hash: MD5 hex digest of the raw file bytes.
    """

    path: str
    contents: str
    content_hash: str


def load_source(path: Path, fallback_encoding: str = DEFAULT_FALLBACK_ENCODING) -> SourceText:
    """Read and decode a source file.

    Files are decoded as UTF-8. Bytes that are not valid UTF-8 are decoded
    with *fallback_encoding* instead, which is logged as a warning.

    Args:
        path: Location of the file.
        fallback_encoding: Codec used when the file is not valid UTF-8.

    Returns:
        The decoded SourceText.

    Raises:
        SourceLoadError: If *path* is not an existing, readable file or the
            fallback codec is unknown.
    """
    if not path.is_file():
        raise SourceLoadError(f"Source file not found: {path}")
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SourceLoadError(f"Cannot read source file '{path}': {exc}") from exc

    return SourceText(
        path=str(path),
        contents=_decode(raw, fallback_encoding, str(path)),
        content_hash=hashlib.md5(raw).hexdigest(),
    )


# ################
# Implementation
# ################


def _decode(raw: bytes, fallback_encoding: str, source_label: str) -> str:
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass
    try:
        contents = raw.decode(fallback_encoding, errors="replace")
    except LookupError as exc:
        raise SourceLoadError(f"Unknown fallback encoding '{fallback_encoding}'") from exc
    logger.warning("source_transcoded", path=source_label, encoding=fallback_encoding)
    return contents
