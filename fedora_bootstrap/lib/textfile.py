"""Append-only edits of shell profile files.

Every helper checks for its line or marker before writing, so running it
again leaves the file untouched.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return ""


def has_line(path: Path, line: str) -> bool:
    return line in _read(path).splitlines()


def has_marker(path: Path, marker: str) -> bool:
    return marker in _read(path)


def ensure_line(path: Path, line: str) -> bool:
    """Append line unless already present. Returns True if the file changed."""

    current = _read(path)
    if line in current.splitlines():
        return False
    prefix = "" if not current or current.endswith("\n") else "\n"
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(f"{prefix}{line}\n")
    logger.debug("Appended to %s: %s", path, line)
    return True


def append_block(path: Path, *, begin: str, end: str, body: str) -> bool:
    """Append a marker-delimited block unless the begin marker is present."""

    if has_marker(path, begin):
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(f"\n{begin}\n{body.rstrip()}\n{end}\n")
    return True


def write_atomic(path: Path, data: bytes, *, mode: int = 0o644) -> None:
    """Write through a sibling temp file so a crash never leaves a partial file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(f".{path.name}.tmp")
    tmp.write_bytes(data)
    os.chmod(tmp, mode)
    os.replace(tmp, path)
