from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable, Mapping, Optional

logger = logging.getLogger(__name__)


def _read_bytes(path: Path) -> Optional[bytes]:
    try:
        return path.read_bytes()
    except OSError:
        return None


def detect_container(
    *,
    root: str = "/",
    environ: Optional[Mapping[str, str]] = None,
    detect_virt: Optional[Callable[[], Optional[str]]] = None,
) -> Optional[str]:
    """Return a short reason if we appear to run inside a container, else None.

    Signals, in order: /.dockerenv, $container, container= in PID 1's
    environment, `systemd-detect-virt --container`.
    """

    env = os.environ if environ is None else environ
    base = Path(root)

    if (base / ".dockerenv").exists():
        return "/.dockerenv present"

    if env.get("container"):
        return f"container={env['container']}"

    pid1_env = _read_bytes(base / "proc/1/environ")
    if pid1_env:
        for entry in pid1_env.split(b"\0"):
            if entry.startswith(b"container="):
                return entry.decode("utf-8", "replace")

    if detect_virt is not None:
        kind = detect_virt()
        if kind and kind != "none":
            return f"systemd-detect-virt: {kind}"

    return None
