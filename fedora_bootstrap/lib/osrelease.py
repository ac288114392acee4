from __future__ import annotations

import shlex
from pathlib import Path
from typing import Dict, Optional

DEFAULT_OS_RELEASE = "/etc/os-release"


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release(5) content into a dict.

    Malformed lines are ignored, as the format allows.
    """

    out: Dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            tokens = shlex.split(value)
        except ValueError:
            continue
        out[key.strip()] = tokens[0] if tokens else ""
    return out


def read_os_release(path: str = DEFAULT_OS_RELEASE) -> Optional[Dict[str, str]]:
    p = Path(path)
    try:
        return parse_os_release(p.read_text(encoding="utf-8", errors="ignore"))
    except OSError:
        return None


def describe(info: Dict[str, str]) -> str:
    return info.get("PRETTY_NAME") or info.get("ID") or "unknown"
