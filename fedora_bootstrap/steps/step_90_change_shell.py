from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..pipeline import FailurePolicy, Outcome, StepResult
from .step_80_install_dotfiles import InstallDotfilesStep

logger = logging.getLogger(__name__)


class ChangeShellStep:
    """Switch the login shell to zsh, but only after dotfiles were installed."""

    step_id = "90_change_shell"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        prior = ctx.result_of(InstallDotfilesStep.step_id)
        if prior is None or prior.outcome == Outcome.SKIPPED:
            return StepResult.skipped(self.step_id, "Default shell left unchanged (dotfiles install skipped)")
        if prior.outcome != Outcome.APPLIED:
            logger.warning("Skipping default shell change because dotfiles install did not run")
            return StepResult.skipped(self.step_id, "dotfiles install did not run")

        current = ctx.system.login_shell(ctx.user) or ""
        if Path(current).name == "zsh":
            return StepResult.satisfied(self.step_id, "Default shell already zsh")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        zsh = ctx.system.which("zsh")
        if not zsh:
            raise MissingDependency("zsh not found; skipping chsh")

        logger.info("Changing default shell to %s", zsh)
        ctx.system.set_login_shell(ctx.user, zsh)
        return StepResult.applied(self.step_id, zsh)
