from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Optional

from .config import BootstrapConfig, Manifest
from .lib.host import System
from .lib.paths import Paths

if TYPE_CHECKING:
    from .pipeline import StepResult


@dataclass
class StepContext:
    config: BootstrapConfig
    manifest: Manifest
    system: System
    paths: Paths
    user: str
    results: Dict[str, "StepResult"] = field(default_factory=dict)

    def result_of(self, step_id: str) -> Optional["StepResult"]:
        return self.results.get(step_id)

    def find_command(self, name: str) -> Optional[str]:
        """Locate a command on PATH or in the user-local bin dirs we install into.

        ~/.local/bin and ~/.cargo/bin may not be on PATH until the next login.
        """

        found = self.system.which(name)
        if found:
            return found
        for d in (self.paths.local_bin, self.paths.cargo_bin):
            candidate = d / name
            if candidate.is_file():
                return str(candidate)
        return None
