from __future__ import annotations

import pytest

from fedora_bootstrap.errors import ConfigError
from fedora_bootstrap.lib.conffile import parse_conf


def test_scalars_comments_and_quoting() -> None:
    text = """
# a comment
ENABLE_RUST=true
export ENABLE_FLATPAK=false   # trailing comment
DOTFILES_INSTALL_PATH="/home/alice/my dotfiles"
EMPTY=
"""
    assert parse_conf(text) == {
        "ENABLE_RUST": "true",
        "ENABLE_FLATPAK": "false",
        "DOTFILES_INSTALL_PATH": "/home/alice/my dotfiles",
        "EMPTY": "",
    }


def test_arrays_single_and_multi_line() -> None:
    text = """
COPR_REPOS=(atim/starship "@cosmic/nightly")
DNF_ALL=(
  git      # version control
  "neovim"
  # whole-line comment with a ) paren
  zsh
)
EMPTY_LIST=()
"""
    parsed = parse_conf(text)

    assert parsed["COPR_REPOS"] == ["atim/starship", "@cosmic/nightly"]
    assert parsed["DNF_ALL"] == ["git", "neovim", "zsh"]
    assert parsed["EMPTY_LIST"] == []


def test_array_append() -> None:
    parsed = parse_conf("EXTRA_PACKAGES=(htop)\nEXTRA_PACKAGES+=(btop ncdu)\n")

    assert parsed["EXTRA_PACKAGES"] == ["htop", "btop", "ncdu"]


def test_values_are_never_expanded_or_executed() -> None:
    parsed = parse_conf('DOTFILES_INSTALL_PATH="$(rm -rf /)"\n')

    assert parsed["DOTFILES_INSTALL_PATH"] == "$(rm -rf /)"


@pytest.mark.parametrize(
    "text, message",
    [
        ("echo hello\n", "expected KEY=value"),
        ("DNF_ALL=(git\nzsh\n", "unterminated array"),
        ("A=one two\n", "more than one value"),
        ("A+=x\n", "only supported for arrays"),
        ('A="unclosed\n', "No closing quotation"),
        ("A=(x) y\n", "unexpected text"),
    ],
)
def test_malformed_input_reports_location(text: str, message: str) -> None:
    with pytest.raises(ConfigError) as excinfo:
        parse_conf(text, source="bootstrap.conf")

    assert message in str(excinfo.value)
    assert "bootstrap.conf:1" in str(excinfo.value)
