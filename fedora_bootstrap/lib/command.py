from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import List, Mapping, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def elevate(argv: Sequence[str]) -> List[str]:
    """Prefix argv with sudo unless we already run as root."""

    if os.geteuid() == 0:
        return list(argv)
    return ["sudo", *argv]


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    privileged: bool = False,
    env: Mapping[str, str] | None = None,
    cwd: str | None = None,
    input_text: str | None = None,
    capture: bool = True,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - privileged routes the command through elevate().
    - capture=False lets the command talk to the terminal (sudo prompts,
      installer progress); stdout/stderr are then empty in the result.
    """

    argv_list = elevate(argv) if privileged else list(argv)
    logger.debug("CMD %s", _fmt_argv(argv_list))

    try:
        p = subprocess.run(
            argv_list,
            input=input_text,
            text=True,
            stdout=subprocess.PIPE if capture else None,
            stderr=subprocess.PIPE if capture else None,
            cwd=cwd,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError:
        if check:
            raise CommandError(argv_list, 127, f"{argv_list[0]}: command not found")
        return CmdResult(argv=argv_list, returncode=127, stdout="", stderr="")

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        raise CommandError(argv_list, p.returncode, stderr)

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
