"""Open a book file and normalize it to UTF-8.

Encoding is detected with chardet. A book stored in any other encoding is
decoded, re-encoded as UTF-8, and (by default) written back over the source
file, so the normalization persists across sessions.
"""

from __future__ import annotations

import codecs
import logging
import os
from dataclasses import dataclass
from pathlib import Path

import chardet

from .errors import BookLoadError
from .fileio import atomic_write_bytes

logger = logging.getLogger(__name__)

CANONICAL_ENCODING = "utf-8"
_UTF8_COMPATIBLE = {"ascii", "utf-8"}


@dataclass(frozen=True)
class LoadedBook:
    path: Path
    name: str
    content: str
    detected_encoding: str
    converted: bool = False


def resolve_book_path(user_path: str | os.PathLike[str], cwd: Path | None = None) -> Path:
    """Resolve absolute, home-relative (``~``), or cwd-relative input to an absolute path."""
    path = Path(user_path).expanduser()
    if not path.is_absolute():
        path = (cwd if cwd is not None else Path.cwd()) / path
    return Path(os.path.abspath(path))


def detect_encoding(raw: bytes) -> str:
    """Return the normalized codec name chardet reports for ``raw``.

    Empty input and undetectable input are reported as UTF-8.
    """
    if not raw:
        return CANONICAL_ENCODING
    result = chardet.detect(raw)
    encoding = result.get("encoding")
    logger.debug("chardet result: %s", result)
    if not encoding:
        return CANONICAL_ENCODING
    try:
        return codecs.lookup(encoding).name
    except LookupError as exc:
        raise BookLoadError(f"Unsupported encoding {encoding!r} detected") from exc


def _normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def open_book(
    user_path: str | os.PathLike[str],
    *,
    convert_in_place: bool = True,
    cwd: Path | None = None,
) -> LoadedBook:
    """Read, decode, and normalize the book at ``user_path``.

    Raises ``BookLoadError`` when the file is missing, is a directory, cannot be
    read, or does not decode with the detected encoding.
    """
    path = resolve_book_path(user_path, cwd=cwd)
    logger.debug("Opening book at %s", path)
    if path.is_dir():
        raise BookLoadError(f"Not a file: {path}")
    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise BookLoadError(f"Book not found: {path}") from exc
    except OSError as exc:
        raise BookLoadError(f"Cannot read {path}: {exc.strerror or exc}") from exc

    encoding = detect_encoding(raw)
    try:
        text = raw.decode(encoding)
    except UnicodeDecodeError as exc:
        raise BookLoadError(f"Failed to decode {path} as {encoding}: {exc.reason}") from exc

    converted = False
    if encoding not in _UTF8_COMPATIBLE:
        logger.debug("Encoding detected as %s, converting to %s", encoding, CANONICAL_ENCODING)
        if convert_in_place:
            try:
                atomic_write_bytes(path, text.encode(CANONICAL_ENCODING))
            except OSError as exc:
                raise BookLoadError(f"Cannot rewrite {path} as UTF-8: {exc.strerror or exc}") from exc
            converted = True

    return LoadedBook(
        path=path,
        name=path.stem,
        content=_normalize_newlines(text),
        detected_encoding=encoding,
        converted=converted,
    )
