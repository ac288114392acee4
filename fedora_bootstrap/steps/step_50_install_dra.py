from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)

DRA_INSTALL_URL = "https://raw.githubusercontent.com/devmatteini/dra/refs/heads/main/install.sh"


class InstallDraStep:
    """dra (Download Release Assets) installs the GitHub release tools later on."""

    step_id = "50_install_dra"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        found = ctx.find_command("dra")
        if found:
            return StepResult.satisfied(self.step_id, found)
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        logger.info("Installing dra (Download Release Assets)")
        script = ctx.system.fetch_text(DRA_INSTALL_URL)
        ctx.paths.local_bin.mkdir(parents=True, exist_ok=True)
        ctx.system.run(
            ["bash", "-s", "--", "--to", str(ctx.paths.local_bin)], input_text=script, capture=False
        )

        found = ctx.find_command("dra")
        if not found:
            raise RuntimeError("dra installer finished but dra was not found")
        return StepResult.applied(self.step_id, found)
