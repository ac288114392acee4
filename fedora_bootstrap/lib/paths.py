from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .osrelease import DEFAULT_OS_RELEASE


def repo_root() -> Path:
    # fedora_bootstrap/lib/paths.py -> fedora_bootstrap -> repo root
    return Path(__file__).resolve().parents[2]


YAML_SUFFIXES = {".yaml", ".yml"}


def is_yaml(path: Path) -> bool:
    """Config, manifest and report files pick their format by suffix."""
    return path.suffix.lower() in YAML_SUFFIXES


DEFAULT_CONFIG_PATH = str(repo_root() / "config" / "bootstrap.conf")
DEFAULT_PACKAGES_PATH = str(repo_root() / "config" / "packages.conf")
DEFAULT_FILES_DIR = str(repo_root() / "files")
DEFAULT_LOG_PATH = str(Path.home() / ".local/state/fedora-bootstrap/bootstrap.log")


@dataclass(frozen=True)
class Paths:
    home: Path
    files_dir: Path
    os_release: str = DEFAULT_OS_RELEASE

    @property
    def local_bin(self) -> Path:
        return self.home / ".local" / "bin"

    @property
    def config_home(self) -> Path:
        return self.home / ".config"

    @property
    def cargo_bin(self) -> Path:
        return self.home / ".cargo" / "bin"

    @property
    def cargo_env(self) -> Path:
        return self.home / ".cargo" / "env"
