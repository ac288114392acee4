from __future__ import annotations

import logging
import os
import re
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError
from .lib.conffile import load_conf
from .lib.paths import is_yaml

logger = logging.getLogger(__name__)

_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0", ""}
_VAR_RE = re.compile(r"\$(?:(\w+)|\{(\w+)\})")

# Accepted spellings (lower-cased) -> field name. The upper-case shell names
# from older bootstrap.conf/packages.conf files keep working.
_CONFIG_KEYS = {
    "enable_optional_toolchain": "enable_optional_toolchain",
    "enable_rust": "enable_optional_toolchain",
    "enable_app_store": "enable_app_store",
    "enable_flatpak": "enable_app_store",
    "extra_packages": "extra_packages",
    "install_dotfiles": "install_dotfiles",
    "dotfiles_path": "dotfiles_path",
    "dotfiles_install_path": "dotfiles_path",
}

_MANIFEST_KEYS = {
    "packages": "packages",
    "dnf_all": "packages",
    "copr_repos": "copr_repos",
    "dra_tools": "dra_tools",
}


@dataclass(frozen=True)
class BootstrapConfig:
    enable_optional_toolchain: bool = False
    enable_app_store: bool = True
    extra_packages: Tuple[str, ...] = ()
    install_dotfiles: bool = False
    dotfiles_path: Optional[str] = None


@dataclass(frozen=True)
class Manifest:
    packages: Tuple[str, ...] = ()
    copr_repos: Tuple[str, ...] = ()
    dra_tools: Tuple[str, ...] = ()


def _load_raw(path: Path) -> Dict[str, Any]:
    if is_yaml(path):
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"{path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: must contain a mapping, got {type(data).__name__}")
        return data
    return dict(load_conf(str(path)))


def _to_bool(value: Any, *, key: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigError(f"{key}: expected a boolean, got {value!r}")


def _to_list(value: Any, *, key: str) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        items: Iterable[Any] = shlex.split(value)
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise ConfigError(f"{key}: expected a list, got {value!r}")

    # De-dup while preserving order
    dedup: list[str] = []
    for item in items:
        s = str(item).strip()
        if s and s not in dedup:
            dedup.append(s)
    return tuple(dedup)


def _to_path(value: Any, env: Mapping[str, str]) -> Optional[str]:
    """Expand $VAR/${VAR} and a leading ~ against env; unknown variables stay literal."""

    if value is None:
        return None
    s = str(value).strip()
    if not s:
        return None
    s = _VAR_RE.sub(lambda m: env.get(m.group(1) or m.group(2), m.group(0)), s)
    if s == "~" or s.startswith("~/"):
        s = env.get("HOME", os.path.expanduser("~")) + s[1:]
    return s


def _read_file(path: Path) -> Dict[str, Any]:
    try:
        return _load_raw(path)
    except ConfigError as e:
        logger.warning("%s; ignoring the file", e)
        return {}


def _field(values: Mapping[str, Any], key: str, default: Any, convert: Callable[..., Any]) -> Any:
    """Convert one value; an invalid one falls back to the default with a warning."""

    if key not in values:
        return default
    try:
        return convert(values[key], key=key)
    except ConfigError as e:
        logger.warning("%s; using default %r", e, default)
        return default


def _apply(values: Dict[str, Any], raw: Mapping[str, Any], keys: Mapping[str, str], *, source: str) -> None:
    for key, value in raw.items():
        field_name = keys.get(str(key).lower())
        if field_name is None:
            logger.warning("Ignoring unknown key %s in %s", key, source)
            continue
        values[field_name] = value


def _coerce_config(values: Mapping[str, Any], env: Mapping[str, str]) -> BootstrapConfig:
    defaults = BootstrapConfig()
    return BootstrapConfig(
        enable_optional_toolchain=_field(
            values, "enable_optional_toolchain", defaults.enable_optional_toolchain, _to_bool
        ),
        enable_app_store=_field(values, "enable_app_store", defaults.enable_app_store, _to_bool),
        extra_packages=_field(values, "extra_packages", defaults.extra_packages, _to_list),
        install_dotfiles=_field(values, "install_dotfiles", defaults.install_dotfiles, _to_bool),
        dotfiles_path=_to_path(values.get("dotfiles_path"), env),
    )


def load_config(path: Optional[str], *, environ: Optional[Mapping[str, str]] = None) -> BootstrapConfig:
    """Defaults, then environment (upper-case names), then the config file.

    A missing file is not an error: the defaults are safe on their own. A
    malformed file or an invalid value is logged and replaced by the default.
    """

    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    for name, field_name in _CONFIG_KEYS.items():
        env_value = env.get(name.upper())
        if env_value is not None:
            values[field_name] = env_value

    if path:
        p = Path(path)
        if p.is_file():
            _apply(values, _read_file(p), _CONFIG_KEYS, source=str(p))
            logger.debug("Loaded configuration from %s", p)
        else:
            logger.debug("No configuration file at %s; using defaults", p)

    return _coerce_config(values, env)


def load_manifest(path: Optional[str]) -> Manifest:
    if not path or not Path(path).is_file():
        logger.debug("No manifest at %s; nothing to install from lists", path)
        return Manifest()

    p = Path(path)
    values: Dict[str, Any] = {}
    _apply(values, _read_file(p), _MANIFEST_KEYS, source=str(p))
    return Manifest(
        packages=_field(values, "packages", (), _to_list),
        copr_repos=_field(values, "copr_repos", (), _to_list),
        dra_tools=_field(values, "dra_tools", (), _to_list),
    )
