from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)

RELEASE_PACKAGES = ("rpmfusion-free-release", "rpmfusion-nonfree-release")
RELEASE_URL = "https://mirrors.rpmfusion.org/{kind}/fedora/rpmfusion-{kind}-release-{version}.noarch.rpm"


class EnableRpmFusionStep:
    step_id = "10_enable_rpmfusion"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if all(ctx.system.is_installed(p) for p in RELEASE_PACKAGES):
            return StepResult.satisfied(self.step_id, "RPM Fusion already enabled")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        if not ctx.system.which("dnf"):
            raise MissingDependency("dnf not found; cannot enable RPM Fusion")

        version = ctx.system.fedora_release()
        if not version.isdigit():
            raise RuntimeError(f"Unexpected Fedora release {version!r}")

        logger.info("Enabling RPM Fusion (free + nonfree)")
        ctx.system.install(
            [RELEASE_URL.format(kind=kind, version=version) for kind in ("free", "nonfree")]
        )
        return StepResult.applied(self.step_id, f"RPM Fusion enabled for Fedora {version}")
