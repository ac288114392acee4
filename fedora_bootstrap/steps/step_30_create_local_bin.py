from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..lib.textfile import ensure_line, has_line
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)

PATH_EXPORT = 'export PATH="$HOME/.local/bin:$PATH"'
PROFILES = (".bash_profile", ".zprofile")


class CreateLocalBinStep:
    step_id = "30_create_local_bin"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        home = ctx.paths.home
        if ctx.paths.local_bin.is_dir() and all(has_line(home / p, PATH_EXPORT) for p in PROFILES):
            return StepResult.satisfied(self.step_id, "~/.local/bin exists and is on PATH")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        logger.info("Ensuring ~/.local/bin exists and is in PATH")
        ctx.paths.local_bin.mkdir(parents=True, exist_ok=True)
        changed = [p for p in PROFILES if ensure_line(ctx.paths.home / p, PATH_EXPORT)]
        return StepResult.applied(self.step_id, f"updated {', '.join(changed)}" if changed else None)
