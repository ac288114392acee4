from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..pipeline import DISABLED_BY_CONFIG, FailurePolicy, StepResult

logger = logging.getLogger(__name__)

FLATHUB_NAME = "flathub"
FLATHUB_URL = "https://dl.flathub.org/repo/flathub.flatpakrepo"


class EnableFlathubStep:
    step_id = "15_enable_flathub"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if not ctx.config.enable_app_store:
            return StepResult.skipped(self.step_id, DISABLED_BY_CONFIG)

        # Flatpak rarely works inside containers; the probe wins over the flag.
        reason = ctx.system.container_reason()
        if reason:
            return StepResult.skipped(self.step_id, f"container environment detected ({reason})")

        if ctx.system.which("flatpak") and FLATHUB_NAME in ctx.system.flatpak_remotes():
            return StepResult.satisfied(self.step_id, "Flathub already enabled")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        if not ctx.system.which("flatpak"):
            logger.info("Installing flatpak")
            ctx.system.install(["flatpak"])
            if not ctx.system.which("flatpak"):
                raise RuntimeError("flatpak not found after installing it")

        logger.info("Enabling Flathub")
        ctx.system.flatpak_remote_add(FLATHUB_NAME, FLATHUB_URL)
        return StepResult.applied(self.step_id, "Flathub enabled")
