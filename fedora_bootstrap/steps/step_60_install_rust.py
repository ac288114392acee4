from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..pipeline import DISABLED_BY_CONFIG, FailurePolicy, StepResult

logger = logging.getLogger(__name__)

RUSTUP_URL = "https://sh.rustup.rs"


class InstallRustStep:
    step_id = "60_install_rust"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if not ctx.config.enable_optional_toolchain:
            return StepResult.skipped(self.step_id, DISABLED_BY_CONFIG)
        found = ctx.find_command("cargo")
        if found:
            return StepResult.satisfied(self.step_id, found)
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        logger.info("Installing Rust toolchain via rustup")
        script = ctx.system.fetch_text(RUSTUP_URL)
        ctx.system.run(["sh", "-s", "--", "-y"], input_text=script, capture=False)

        if not ctx.paths.cargo_env.is_file():
            raise RuntimeError("Rust installed but environment file not found")
        return StepResult.applied(self.step_id, "rustup toolchain installed")
