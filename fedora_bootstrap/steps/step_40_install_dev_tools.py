from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)

GROUP_NAME = "development tools"
GROUP_ID = "development-tools"


class InstallDevToolsStep:
    step_id = "40_install_dev_tools"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if not ctx.system.which("dnf"):
            raise MissingDependency("dnf not found; cannot install the development-tools group")
        if ctx.system.group_installed(GROUP_NAME):
            return StepResult.satisfied(self.step_id, "development-tools already installed")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        ctx.system.group_install(GROUP_ID)
        return StepResult.applied(self.step_id, "development-tools group installed")
