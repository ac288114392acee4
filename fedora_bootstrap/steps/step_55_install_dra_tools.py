from __future__ import annotations

import logging
from typing import List, Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)


def tool_name(repo: str) -> str:
    """owner/repo -> repo, the binary name dra installs."""
    return repo.rstrip("/").rsplit("/", 1)[-1]


def _require_dra(ctx: StepContext) -> str:
    dra = ctx.find_command("dra")
    if not dra:
        raise MissingDependency("dra not available; skipping dra-based tools installation")
    return dra


def _missing(ctx: StepContext) -> List[str]:
    return [repo for repo in ctx.manifest.dra_tools if not ctx.find_command(tool_name(repo))]


class InstallDraToolsStep:
    step_id = "55_install_dra_tools"
    policy = FailurePolicy.SILENT_SKIP

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        _require_dra(ctx)
        if not ctx.manifest.dra_tools:
            return StepResult.satisfied(self.step_id, "no release-asset tools listed")
        if not _missing(ctx):
            return StepResult.satisfied(self.step_id, f"{len(ctx.manifest.dra_tools)} tools present")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        dra = _require_dra(ctx)
        ctx.paths.local_bin.mkdir(parents=True, exist_ok=True)

        installed: list[str] = []
        failed: list[str] = []
        for repo in _missing(ctx):
            name = tool_name(repo)
            logger.info("Installing %s via dra", name)
            try:
                ctx.system.run(
                    [dra, "download", "--install", "--output", str(ctx.paths.local_bin), "-a", repo]
                )
            except Exception as e:
                logger.warning("Failed to install %s via dra: %s", name, e)
                failed.append(name)
            else:
                installed.append(name)

        if failed:
            raise RuntimeError(f"dra could not install: {', '.join(failed)}")
        return StepResult.applied(self.step_id, f"installed {', '.join(installed)}")
