from __future__ import annotations

import argparse
import getpass
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from .config import load_config, load_manifest
from .context import StepContext
from .errors import PipelineAborted
from .lib.host import HostSystem, System
from .lib.osrelease import DEFAULT_OS_RELEASE
from .lib.paths import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_FILES_DIR,
    DEFAULT_LOG_PATH,
    DEFAULT_PACKAGES_PATH,
    Paths,
)
from .logging_utils import configure_logging
from .pipeline import PipelineResult, run_pipeline
from .report import build_report, save_report
from .steps import (
    ChangeShellStep,
    CheckHostStep,
    CreateLocalBinStep,
    EnableCoprStep,
    EnableFlathubStep,
    EnableRpmFusionStep,
    InstallBrootStep,
    InstallDevToolsStep,
    InstallDotfilesStep,
    InstallDraStep,
    InstallDraToolsStep,
    InstallPackagesStep,
    InstallRustStep,
    SetupHelixConfigStep,
    SetupLazyVimStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        CheckHostStep(),
        # repositories
        EnableRpmFusionStep(),
        EnableFlathubStep(),
        EnableCoprStep(),
        # local setup, no privileges needed
        CreateLocalBinStep(),
        SetupHelixConfigStep(),
        # packages
        InstallDevToolsStep(),
        InstallPackagesStep(),
        # release-asset tools
        InstallDraStep(),
        InstallDraToolsStep(),
        # optional toolchain
        InstallRustStep(),
        # editor / shell integration
        SetupLazyVimStep(),
        InstallBrootStep(),
        # dotfiles, then the shell change that depends on them
        InstallDotfilesStep(),
        ChangeShellStep(),
    ]


def _current_user() -> str:
    return os.environ.get("USER") or getpass.getuser()


def run(
    *,
    config_path: Optional[str] = DEFAULT_CONFIG_PATH,
    packages_path: Optional[str] = DEFAULT_PACKAGES_PATH,
    files_dir: str = DEFAULT_FILES_DIR,
    os_release: str = DEFAULT_OS_RELEASE,
    report_path: Optional[str] = None,
    dry_run: bool = False,
    system: Optional[System] = None,
    home: Optional[str] = None,
    user: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> PipelineResult:
    """Load config and manifest, then run the bootstrap pipeline once.

    Raises PipelineAborted when the host check fails. Every other failure,
    including a malformed config or manifest, is logged and recorded.
    """

    cfg = load_config(config_path, environ=environ)
    manifest = load_manifest(packages_path)

    ctx = StepContext(
        config=cfg,
        manifest=manifest,
        system=system if system is not None else HostSystem(),
        paths=Paths(
            home=Path(home) if home else Path.home(),
            files_dir=Path(files_dir),
            os_release=os_release,
        ),
        user=user or _current_user(),
    )

    try:
        result = run_pipeline(steps=build_steps(), ctx=ctx, dry_run=dry_run)
    except PipelineAborted as e:
        if report_path:
            save_report(report_path, build_report(PipelineResult(list(e.results)), aborted_at=e.step_id))
        raise

    if result.failed:
        logger.warning(
            "%d step(s) failed: %s",
            len(result.failed),
            ", ".join(r.step_id for r in result.failed),
        )
    logger.info("Bootstrap complete. You may need to log out/in for some changes to take effect.")

    if report_path:
        save_report(report_path, build_report(result))
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="fedora-bootstrap")
    p.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to bootstrap config (conf|yaml)")
    p.add_argument("--packages", default=DEFAULT_PACKAGES_PATH, help="Path to package manifest (conf|yaml)")
    p.add_argument("--files-dir", default=DEFAULT_FILES_DIR, help="Directory with bundled files (helix config)")
    p.add_argument("--os-release", default=DEFAULT_OS_RELEASE, help=argparse.SUPPRESS)
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to log file ('' disables it)")
    p.add_argument("--report", default=None, help="Write a per-step report (json|yaml)")
    p.add_argument("--dry-run", action="store_true", help="Only run the checks; change nothing")
    p.add_argument("--verbose", "-v", action="store_true", help="Show debug output on the console")

    args = p.parse_args(argv)

    configure_logging(log_path=args.log or None, level=logging.DEBUG if args.verbose else logging.INFO)

    try:
        run(
            config_path=args.config,
            packages_path=args.packages,
            files_dir=args.files_dir,
            os_release=args.os_release,
            report_path=args.report,
            dry_run=bool(args.dry_run),
        )
    except PipelineAborted:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
