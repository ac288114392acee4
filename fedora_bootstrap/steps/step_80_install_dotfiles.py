from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..context import StepContext
from ..errors import BootstrapError, CommandError
from ..pipeline import DISABLED_BY_CONFIG, FailurePolicy, StepResult

logger = logging.getLogger(__name__)

INSTALL_SCRIPT = "install.sh"


class InstallDotfilesStep:
    """Run the user's own dotfiles installer.

    The installer is trusted to be re-runnable, so there is no state check
    beyond the configuration gate. A failure here is recorded as FAILED (not
    skipped) so the default-shell step can tell the two apart.
    """

    step_id = "80_install_dotfiles"
    policy = FailurePolicy.WARN_AND_CONTINUE

    def check(self, ctx: StepContext) -> Optional[StepResult]:
        if not ctx.config.install_dotfiles:
            return StepResult.skipped(self.step_id, DISABLED_BY_CONFIG)
        return None

    def apply(self, ctx: StepContext) -> StepResult:
        path = ctx.config.dotfiles_path
        if not path:
            raise BootstrapError("DOTFILES_INSTALL_PATH not set; skipping dotfiles install")

        root = Path(path)
        if not root.is_dir():
            raise BootstrapError(f"Dotfiles path '{root}' not found; skipping dotfiles install")

        script = root / INSTALL_SCRIPT
        if not script.is_file():
            raise BootstrapError(f"Dotfiles install script not found at {script}; skipping dotfiles install")

        logger.info("Running dotfiles installer from %s", root)
        try:
            # Attached to the terminal: the installer may prompt.
            ctx.system.run(["bash", f"./{INSTALL_SCRIPT}"], cwd=str(root), capture=False)
        except CommandError as e:
            raise BootstrapError(f"Dotfiles installer reported failure ({e.returncode})") from e
        return StepResult.applied(self.step_id, str(root))
