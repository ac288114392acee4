from __future__ import annotations

import logging
import shutil
from typing import Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)

STARTER_URL = "https://github.com/LazyVim/starter"


class SetupLazyVimStep:
    step_id = "70_setup_lazyvim"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if (ctx.paths.config_home / "nvim" / "init.lua").is_file():
            return StepResult.satisfied(self.step_id, "Neovim config already present")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        nvconf = ctx.paths.config_home / "nvim"
        if nvconf.exists() and any(nvconf.iterdir()):
            raise RuntimeError(f"{nvconf} exists without init.lua; not overwriting it")
        if not ctx.system.which("git"):
            raise MissingDependency("git not found; skipping LazyVim setup")

        # Clone beside the target and move into place, so an interrupted
        # clone never looks like an existing config.
        staging = nvconf.with_name("nvim.bootstrap-tmp")
        if staging.exists():
            shutil.rmtree(staging)
        ctx.paths.config_home.mkdir(parents=True, exist_ok=True)

        logger.info("Setting up LazyVim starter")
        ctx.system.run(["git", "clone", "--depth", "1", STARTER_URL, str(staging)])
        shutil.rmtree(staging / ".git", ignore_errors=True)

        if nvconf.exists():
            nvconf.rmdir()
        staging.rename(nvconf)
        return StepResult.applied(self.step_id, str(nvconf))
