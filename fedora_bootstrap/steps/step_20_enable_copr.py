from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)


class EnableCoprStep:
    step_id = "20_enable_copr"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        repos = ctx.manifest.copr_repos
        if not repos:
            return StepResult.satisfied(self.step_id, "no COPR repositories listed")
        if not ctx.system.which("dnf"):
            raise MissingDependency("dnf not found; skipping COPR setup")
        if all(ctx.system.copr_enabled(r) for r in repos):
            return StepResult.satisfied(self.step_id, f"{len(repos)} COPR repositories already enabled")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        if not ctx.system.copr_available():
            logger.info("Installing dnf-plugins-core for COPR support")
            ctx.system.install(["dnf-plugins-core"])

        enabled: list[str] = []
        failed: list[str] = []
        for repo in ctx.manifest.copr_repos:
            if ctx.system.copr_enabled(repo):
                continue
            logger.info("Enabling COPR repo: %s", repo)
            try:
                ctx.system.copr_enable(repo)
            except Exception as e:
                logger.warning("Could not enable COPR %s: %s", repo, e)
                failed.append(repo)
            else:
                enabled.append(repo)

        if failed:
            raise RuntimeError(f"Could not enable COPR repositories: {', '.join(failed)}")
        return StepResult.applied(self.step_id, f"enabled {', '.join(enabled)}")
