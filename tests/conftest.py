"""Shared test fixtures."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pytest

from fedora_bootstrap.config import BootstrapConfig, Manifest
from fedora_bootstrap.context import StepContext
from fedora_bootstrap.errors import CommandError
from fedora_bootstrap.lib.command import CmdResult
from fedora_bootstrap.lib.paths import Paths

Handler = Callable[[Sequence[str], Optional[str], Optional[str]], CmdResult]

_RELEASE_RPM_RE = re.compile(r"(.+?)-\d+\.noarch\.rpm$")

FEDORA_OS_RELEASE = 'NAME="Fedora Linux"\nID=fedora\nVERSION_ID=41\nPRETTY_NAME="Fedora Linux 41 (Workstation Edition)"\n'


def ok(argv: Sequence[str], stdout: str = "") -> CmdResult:
    return CmdResult(argv=list(argv), returncode=0, stdout=stdout, stderr="")


class FakeSystem:
    """In-memory stand-in for HostSystem.

    Every state-changing call is appended to `mutations`, so tests can assert
    that a second run changes nothing.
    """

    def __init__(
        self,
        *,
        commands: Iterable[str] = (),
        packages: Iterable[str] = (),
        groups: Iterable[str] = (),
        container: Optional[str] = None,
        machine: str = "x86_64",
        release: str = "41",
        shells: Optional[Dict[str, str]] = None,
    ) -> None:
        self.commands: Dict[str, str] = {c: f"/usr/bin/{c}" for c in commands}
        self.packages = set(packages)
        self.groups = set(groups)
        self.container = container
        self.arch = machine
        self.release = release
        self.shells: Dict[str, str] = dict(shells or {})
        self.copr_plugin = True
        self.copr: set = set()
        self.remotes: List[str] = []
        self.unavailable: set = set()
        self.failing_copr: set = set()
        self.handlers: Dict[str, Handler] = {}
        self.mutations: List[Tuple] = []
        # argv of commands run attached to the terminal
        self.attached: List[Tuple] = []

    # queries

    def which(self, command: str) -> Optional[str]:
        return self.commands.get(command)

    def is_installed(self, package: str) -> bool:
        return package in self.packages

    def group_installed(self, name: str) -> bool:
        return name.lower() in {g.lower() for g in self.groups}

    def fedora_release(self) -> str:
        return self.release

    def copr_available(self) -> bool:
        return self.copr_plugin

    def copr_enabled(self, repo: str) -> bool:
        return repo in self.copr

    def flatpak_remotes(self) -> List[str]:
        return list(self.remotes)

    def container_reason(self) -> Optional[str]:
        return self.container

    def machine(self) -> str:
        return self.arch

    def login_shell(self, user: str) -> Optional[str]:
        return self.shells.get(user)

    def fetch_text(self, url: str) -> str:
        return f"# installer from {url}\n"

    # mutations

    def install(self, packages: Sequence[str], *, skip_unavailable: bool = False) -> None:
        self.mutations.append(("install", tuple(packages)))
        for p in packages:
            if "://" in p:
                m = _RELEASE_RPM_RE.match(p.rsplit("/", 1)[-1])
                name = m.group(1) if m else p
            else:
                name = p
            if name in self.unavailable:
                continue
            self.packages.add(name)
            if name == "dnf-plugins-core":
                self.copr_plugin = True
            elif "://" not in p:
                self.commands.setdefault(name, f"/usr/bin/{name}")

    def group_install(self, group_id: str) -> None:
        self.mutations.append(("group_install", group_id))
        self.groups.add(group_id.replace("-", " "))

    def copr_enable(self, repo: str) -> None:
        self.mutations.append(("copr_enable", repo))
        if repo in self.failing_copr:
            raise CommandError(["dnf", "-y", "copr", "enable", repo], 1, "no such project")
        self.copr.add(repo)

    def flatpak_remote_add(self, name: str, url: str) -> None:
        self.mutations.append(("flatpak_remote_add", name))
        self.remotes.append(name)

    def set_login_shell(self, user: str, shell: str) -> None:
        self.mutations.append(("chsh", user, shell))
        self.shells[user] = shell

    def download(self, url: str, dest: Path) -> None:
        self.mutations.append(("download", url))
        dest.write_bytes(b"#!/bin/sh\n")

    def run(
        self,
        argv: Sequence[str],
        *,
        cwd: Optional[str] = None,
        input_text: Optional[str] = None,
        privileged: bool = False,
        check: bool = True,
        capture: bool = True,
    ) -> CmdResult:
        self.mutations.append(("run", tuple(argv)))
        if not capture:
            self.attached.append(tuple(argv))
        handler = self.handlers.get(Path(argv[0]).name)
        result = handler(argv, cwd, input_text) if handler else ok(argv)
        if check and result.returncode != 0:
            raise CommandError(argv, result.returncode, result.stderr)
        return result


def _touch_exe(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\n", encoding="utf-8")
    path.chmod(0o755)


def install_fake_handlers(system: FakeSystem, home: Path) -> None:
    """Make the fake's external installers leave the files real ones would."""

    def bash(argv, cwd, input_text):
        if "--to" in argv:
            _touch_exe(Path(argv[argv.index("--to") + 1]) / "dra")
        return ok(argv)

    def sh(argv, cwd, input_text):
        _touch_exe(home / ".cargo" / "bin" / "cargo")
        (home / ".cargo" / "env").write_text("export PATH=\"$HOME/.cargo/bin:$PATH\"\n", encoding="utf-8")
        return ok(argv)

    def git(argv, cwd, input_text):
        dest = Path(argv[-1])
        (dest / ".git").mkdir(parents=True)
        (dest / "init.lua").write_text('require("config.lazy")\n', encoding="utf-8")
        return ok(argv)

    def dra(argv, cwd, input_text):
        out = Path(argv[argv.index("--output") + 1])
        _touch_exe(out / argv[-1].rsplit("/", 1)[-1])
        return ok(argv)

    def broot(argv, cwd, input_text):
        if "--print-shell-function" in argv:
            return ok(argv, "function br {\n  broot --outcmd \"$cmd_file\" \"$@\"\n}\n")
        return ok(argv)

    system.handlers.update({"bash": bash, "sh": sh, "git": git, "dra": dra, "broot": broot})


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def files_dir(tmp_path: Path) -> Path:
    d = tmp_path / "files"
    (d / "helix").mkdir(parents=True)
    (d / "helix" / "config.toml").write_text('theme = "onedark"\n', encoding="utf-8")
    return d


@pytest.fixture
def os_release(tmp_path: Path) -> Path:
    p = tmp_path / "os-release"
    p.write_text(FEDORA_OS_RELEASE, encoding="utf-8")
    return p


@pytest.fixture
def fake_system(home: Path) -> FakeSystem:
    """A fresh Fedora box: dnf, rpm and git present, nothing else installed."""
    system = FakeSystem(commands=["dnf", "rpm", "git", "curl"], shells={"alice": "/bin/bash"})
    install_fake_handlers(system, home)
    return system


@pytest.fixture
def make_ctx(fake_system: FakeSystem, home: Path, files_dir: Path, os_release: Path):
    def _make(
        config: Optional[BootstrapConfig] = None,
        manifest: Optional[Manifest] = None,
        system: Optional[FakeSystem] = None,
    ) -> StepContext:
        return StepContext(
            config=config or BootstrapConfig(),
            manifest=manifest or Manifest(),
            system=system or fake_system,
            paths=Paths(home=home, files_dir=files_dir, os_release=str(os_release)),
            user="alice",
        )

    return _make
