from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..errors import MissingDependency
from ..lib.textfile import write_atomic
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)


class SetupHelixConfigStep:
    step_id = "35_setup_helix_config"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if (ctx.paths.config_home / "helix" / "config.toml").exists():
            return StepResult.satisfied(self.step_id, "Helix config already exists; leaving as-is")
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        source = ctx.paths.files_dir / "helix" / "config.toml"
        if not source.is_file():
            raise MissingDependency(f"Source helix config not found at {source}; skipping")

        target = ctx.paths.config_home / "helix" / "config.toml"
        logger.info("Installing Helix config to %s", target)
        write_atomic(target, source.read_bytes())
        return StepResult.applied(self.step_id, str(target))
