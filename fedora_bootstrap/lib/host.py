"""Access to the machine being provisioned.

Steps never shell out on their own for package-manager state; they go
through a System so the pipeline can run against an in-memory fake.
"""

from __future__ import annotations

import logging
import platform
import pwd
import shutil
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from .command import CmdResult, run_cmd
from .virt import detect_container

logger = logging.getLogger(__name__)

DEFAULT_REPOS_DIR = "/etc/yum.repos.d"


class System(Protocol):
    def which(self, command: str) -> Optional[str]:
        ...

    def is_installed(self, package: str) -> bool:
        ...

    def install(self, packages: Sequence[str], *, skip_unavailable: bool = False) -> None:
        ...

    def group_installed(self, name: str) -> bool:
        ...

    def group_install(self, group_id: str) -> None:
        ...

    def fedora_release(self) -> str:
        ...

    def copr_available(self) -> bool:
        ...

    def copr_enabled(self, repo: str) -> bool:
        ...

    def copr_enable(self, repo: str) -> None:
        ...

    def flatpak_remotes(self) -> List[str]:
        ...

    def flatpak_remote_add(self, name: str, url: str) -> None:
        ...

    def container_reason(self) -> Optional[str]:
        ...

    def machine(self) -> str:
        ...

    def login_shell(self, user: str) -> Optional[str]:
        ...

    def set_login_shell(self, user: str, shell: str) -> None:
        ...

    def fetch_text(self, url: str) -> str:
        ...

    def download(self, url: str, dest: Path) -> None:
        ...

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
        ...


def copr_repo_glob(repo: str) -> str:
    """Glob for the .repo file dnf writes when `dnf copr enable owner/project` succeeds.

    >>> copr_repo_glob("atim/starship")
    '_copr*:atim:starship.repo'
    >>> copr_repo_glob("@cosmic/nightly")
    '_copr*:group_cosmic:nightly.repo'
    """

    owner, _, project = repo.partition("/")
    if owner.startswith("@"):
        owner = "group_" + owner[1:]
    return f"_copr*:{owner}:{project}.repo"


class HostSystem:
    """The real machine: dnf/rpm, flatpak, curl and friends."""

    def __init__(self, *, repos_dir: str = DEFAULT_REPOS_DIR) -> None:
        self._repos_dir = Path(repos_dir)

    def which(self, command: str) -> Optional[str]:
        return shutil.which(command)

    def is_installed(self, package: str) -> bool:
        return run_cmd(["rpm", "-q", package], check=False).ok

    def install(self, packages: Sequence[str], *, skip_unavailable: bool = False) -> None:
        if not packages:
            return
        argv = ["dnf", "install", "-y"]
        if skip_unavailable:
            # Tolerates packages renamed or dropped between Fedora releases.
            argv.append("--skip-unavailable")
        run_cmd([*argv, *packages], privileged=True, capture=False)

    def group_installed(self, name: str) -> bool:
        r = run_cmd(["dnf", "group", "list", "--installed"], check=False)
        return r.ok and name.lower() in r.stdout.lower()

    def group_install(self, group_id: str) -> None:
        run_cmd(["dnf", "group", "install", "-y", group_id], privileged=True, capture=False)

    def fedora_release(self) -> str:
        return run_cmd(["rpm", "-E", "%fedora"]).stdout.strip()

    def copr_available(self) -> bool:
        return run_cmd(["dnf", "copr", "--help"], check=False).ok

    def copr_enabled(self, repo: str) -> bool:
        return any(self._repos_dir.glob(copr_repo_glob(repo)))

    def copr_enable(self, repo: str) -> None:
        run_cmd(["dnf", "-y", "copr", "enable", repo], privileged=True, capture=False)

    def flatpak_remotes(self) -> List[str]:
        r = run_cmd(["flatpak", "remote-list"], check=False)
        if not r.ok:
            return []
        return [line.split()[0] for line in r.stdout.splitlines() if line.strip()]

    def flatpak_remote_add(self, name: str, url: str) -> None:
        run_cmd(["flatpak", "remote-add", "--if-not-exists", name, url], capture=False)

    def _detect_virt(self) -> Optional[str]:
        if not self.which("systemd-detect-virt"):
            return None
        # Exits 1 and prints "none" outside containers.
        r = run_cmd(["systemd-detect-virt", "--container"], check=False)
        return r.stdout.strip() or None

    def container_reason(self) -> Optional[str]:
        return detect_container(detect_virt=self._detect_virt)

    def machine(self) -> str:
        return platform.machine()

    def login_shell(self, user: str) -> Optional[str]:
        try:
            return pwd.getpwnam(user).pw_shell
        except KeyError:
            return None

    def set_login_shell(self, user: str, shell: str) -> None:
        run_cmd(["chsh", "-s", shell, user], privileged=True, capture=False)

    def fetch_text(self, url: str) -> str:
        return run_cmd(["curl", "--proto", "=https", "--tlsv1.2", "-sSf", url]).stdout

    def download(self, url: str, dest: Path) -> None:
        run_cmd(["curl", "-L", "--fail", "-sS", url, "-o", str(dest)])

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
        return run_cmd(argv, cwd=cwd, input_text=input_text, privileged=privileged, check=check, capture=capture)
