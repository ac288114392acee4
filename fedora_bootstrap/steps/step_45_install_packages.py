from __future__ import annotations

import logging
from typing import List, Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)


def wanted_packages(ctx: StepContext) -> List[str]:
    """Manifest packages followed by the user's extras, de-duplicated in order."""

    out: List[str] = []
    for p in [*ctx.manifest.packages, *ctx.config.extra_packages]:
        if p not in out:
            out.append(p)
    return out


def _missing(ctx: StepContext) -> List[str]:
    return [p for p in wanted_packages(ctx) if not ctx.system.is_installed(p)]


class InstallPackagesStep:
    step_id = "45_install_packages"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if not ctx.system.which("dnf"):
            raise MissingDependency("dnf not found; cannot install packages")
        if not wanted_packages(ctx):
            return StepResult.satisfied(self.step_id, "no packages listed")
        if not _missing(ctx):
            return StepResult.satisfied(self.step_id, "All packages already installed")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        missing = _missing(ctx)
        logger.info("Installing %d packages via dnf", len(missing))
        ctx.system.install(missing, skip_unavailable=True)

        unavailable = [p for p in missing if not ctx.system.is_installed(p)]
        if unavailable:
            logger.warning("Packages unavailable in the enabled repositories: %s", " ".join(unavailable))
        return StepResult.applied(self.step_id, f"installed {len(missing) - len(unavailable)} packages")
