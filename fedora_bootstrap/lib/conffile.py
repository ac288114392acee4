"""Declarative KEY=value configuration files.

The format looks like the shell assignments the bootstrap configs were
historically written in, but it is parsed, never sourced:

    # comment
    ENABLE_RUST=true
    DOTFILES_INSTALL_PATH="$HOME/dotfiles"   # kept literally; config.py expands it
    DNF_ALL=(
      git
      "neovim"   # quoted items are fine
    )
    DNF_ALL+=(zsh)

Scalars map to str, arrays to list[str]. `export` prefixes are tolerated.
"""

from __future__ import annotations

import re
import shlex
from pathlib import Path
from typing import Dict, List, Union

from ..errors import ConfigError

Value = Union[str, List[str]]

_ASSIGN_RE = re.compile(r"^(?:export\s+)?([A-Za-z_][A-Za-z0-9_]*)(\+?=)(.*)$", re.S)


def _find_close(text: str) -> int:
    """Index of the first unquoted ')' outside comments, or -1."""

    quote = None
    escaped = False
    in_comment = False
    for idx, ch in enumerate(text):
        if in_comment:
            if ch == "\n":
                in_comment = False
            continue
        if escaped:
            escaped = False
            continue
        if ch == "\\" and quote != "'":
            escaped = True
            continue
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in ("'", '"'):
            quote = ch
        elif ch == "#" and (idx == 0 or text[idx - 1].isspace()):
            in_comment = True
        elif ch == ")":
            return idx
    return -1


def _split(text: str, *, where: str) -> List[str]:
    try:
        return shlex.split(text, comments=True)
    except ValueError as e:
        raise ConfigError(f"{where}: {e}") from e


def parse_conf(text: str, *, source: str = "<string>") -> Dict[str, Value]:
    out: Dict[str, Value] = {}
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        lineno = i + 1
        line = lines[i].strip()
        i += 1
        if not line or line.startswith("#"):
            continue

        m = _ASSIGN_RE.match(line)
        if not m:
            raise ConfigError(f"{source}:{lineno}: expected KEY=value, got {line!r}")
        key, op, rest = m.group(1), m.group(2), m.group(3).strip()
        where = f"{source}:{lineno}"

        if rest.startswith("("):
            body = rest[1:]
            close = _find_close(body)
            while close < 0:
                if i >= len(lines):
                    raise ConfigError(f"{where}: unterminated array for {key}")
                body += "\n" + lines[i]
                i += 1
                close = _find_close(body)
            if _split(body[close + 1 :], where=where):
                raise ConfigError(f"{where}: unexpected text after array {key}")
            items = _split(body[:close], where=where)
            if op == "+=":
                prev = out.get(key)
                if isinstance(prev, str):
                    prev = [prev] if prev else []
                out[key] = [*(prev or []), *items]
            else:
                out[key] = items
            continue

        if op == "+=":
            raise ConfigError(f"{where}: '+=' is only supported for arrays")
        tokens = _split(rest, where=where)
        if len(tokens) > 1:
            raise ConfigError(f"{where}: {key} has more than one value; use {key}=(...) for lists")
        out[key] = tokens[0] if tokens else ""

    return out


def load_conf(path: str) -> Dict[str, Value]:
    p = Path(path)
    return parse_conf(p.read_text(encoding="utf-8"), source=str(p))
