from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ..context import StepContext
from ..lib.paths import Paths
from ..lib.textfile import append_block, has_marker
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)

BROOT_URLS = {
    "x86_64": "https://dystroy.org/broot/download/x86_64-linux/broot",
    "aarch64": "https://dystroy.org/broot/download/aarch64-unknown-linux-gnu/broot",
    "arm64": "https://dystroy.org/broot/download/aarch64-unknown-linux-gnu/broot",
}

MARKER_BEGIN = "# >>> fedora-bootstrap broot integration >>>"
MARKER_END = "# <<< fedora-bootstrap broot integration <<<"


def integration_file(paths: Paths) -> Path:
    shell_post = paths.home / ".shell_post"
    if shell_post.is_file():
        return shell_post
    return paths.home / ".zshrc"


def _is_executable(p: Path) -> bool:
    return p.is_file() and os.access(p, os.X_OK)


class InstallBrootStep:
    step_id = "75_install_broot"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        binary = ctx.paths.local_bin / "broot"
        if _is_executable(binary) and has_marker(integration_file(ctx.paths), MARKER_BEGIN):
            return StepResult.satisfied(self.step_id, f"broot already present at {binary}")
        return None

    def _download(self, ctx: StepContext, binary: Path) -> None:
        arch = ctx.system.machine()
        url = BROOT_URLS.get(arch)
        if not url:
            raise RuntimeError(f"Unsupported architecture '{arch}' for broot install")

        logger.info("Installing broot to %s", binary)
        binary.parent.mkdir(parents=True, exist_ok=True)
        partial = binary.with_name(".broot.download")
        try:
            ctx.system.download(url, partial)
            os.chmod(partial, 0o755)
            os.replace(partial, binary)
        except Exception:
            partial.unlink(missing_ok=True)
            raise

    def apply(self, ctx: StepContext) -> StepResult:
        binary = ctx.paths.local_bin / "broot"
        if not _is_executable(binary):
            self._download(ctx, binary)

        broot = ctx.find_command("broot") or str(binary)
        target = integration_file(ctx.paths)
        if not has_marker(target, MARKER_BEGIN):
            shell_function = ctx.system.run([broot, "--print-shell-function", "zsh"]).stdout
            if not shell_function.strip():
                raise RuntimeError("Unable to retrieve broot shell function")
            logger.info("Adding broot shell function to %s", target)
            append_block(target, begin=MARKER_BEGIN, end=MARKER_END, body=shell_function)

        r = ctx.system.run([broot, "--set-install-state", "installed"], check=False)
        if not r.ok:
            logger.warning("Could not set broot install state")
        return StepResult.applied(self.step_id, str(binary))
