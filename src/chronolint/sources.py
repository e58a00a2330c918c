"""DDL source provider - discovers and reads `.sql` inputs.

Reading is one-shot with no retry. Any failure raises SourceError, and the
CLI aborts before parsing begins.
"""

from __future__ import annotations

import sys
from collections.abc import Iterable
from pathlib import Path
from typing import BinaryIO

from chronolint.core.errors import SourceError
from chronolint.core.logging import get_logger

log = get_logger("sources")

STDIN = "-"
STDIN_NAME = "<stdin>"
SQL_SUFFIX = ".sql"


def discover_sources(paths: Iterable[str]) -> list[str]:
    """Expand paths into source names.

    Directories are searched recursively for `*.sql` files (sorted). `-`
    stands for stdin. Duplicates are dropped, first occurrence wins.

    Raises:
        SourceError: a path does not exist.
    """
    found: list[str] = []
    for raw in paths:
        if raw == STDIN:
            found.append(STDIN)
            continue
        path = Path(raw)
        if path.is_dir():
            found.extend(str(p) for p in sorted(path.rglob(f"*{SQL_SUFFIX}")) if p.is_file())
        elif path.exists():
            found.append(str(path))
        else:
            raise SourceError.not_found(raw)
    return list(dict.fromkeys(found))


def display_name(name: str) -> str:
    return STDIN_NAME if name == STDIN else name


def read_source(name: str, *, stdin: BinaryIO | None = None) -> bytes:
    """Read one source as raw bytes.

    Raises:
        SourceError: missing or unreadable.
    """
    if name == STDIN:
        stream = stdin if stdin is not None else sys.stdin.buffer
        return stream.read()
    try:
        return Path(name).read_bytes()
    except FileNotFoundError:
        raise SourceError.not_found(name) from None
    except OSError as e:
        raise SourceError.unreadable(name, e.strerror or str(e)) from e


def decode_source(name: str, data: bytes) -> str:
    """Decode UTF-8 (a leading BOM is dropped).

    Raises:
        SourceError: not valid UTF-8.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SourceError.not_utf8(name, e.start) from e


def read_sources(names: Iterable[str], *, stdin: BinaryIO | None = None) -> dict[str, str]:
    """Read and decode every source up front, keyed by display name.

    Raises:
        SourceError: on the first source that cannot be read or decoded.
    """
    texts: dict[str, str] = {}
    for name in names:
        shown = display_name(name)
        texts[shown] = decode_source(shown, read_source(name, stdin=stdin))
        log.debug("source_read", source=shown, chars=len(texts[shown]))
    return texts
