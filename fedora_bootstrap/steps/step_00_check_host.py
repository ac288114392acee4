from __future__ import annotations

import logging
from typing import Optional

from ..context import StepContext
from ..errors import UnsupportedHost
from ..lib.osrelease import describe, read_os_release
from ..pipeline import FailurePolicy, StepResult

logger = logging.getLogger(__name__)

SUPPORTED_ID = "fedora"


class CheckHostStep:
    step_id = "00_check_host"
    policy = FailurePolicy.FATAL

    def _identify(self, ctx: StepContext) -> StepResult:
        info = read_os_release(ctx.paths.os_release)
        if info is None:
            raise UnsupportedHost(f"Cannot determine OS; {ctx.paths.os_release} missing.")
        if info.get("ID") != SUPPORTED_ID:
            raise UnsupportedHost(f"This script targets Fedora; detected {describe(info)}")
        return StepResult.satisfied(self.step_id, describe(info))

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        # Read-only, so it also runs in dry-run mode.
        return self._identify(ctx)

    def apply(self, ctx: StepContext) -> StepResult:
        return self._identify(ctx)
