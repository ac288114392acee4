from __future__ import annotations

from pathlib import Path

from fedora_bootstrap.lib.textfile import append_block, ensure_line, has_line, has_marker, write_atomic

LINE = 'export PATH="$HOME/.local/bin:$PATH"'


def test_ensure_line_appends_once(tmp_path: Path) -> None:
    profile = tmp_path / ".bash_profile"
    profile.write_text("# existing, no trailing newline", encoding="utf-8")

    assert ensure_line(profile, LINE) is True
    assert ensure_line(profile, LINE) is False

    assert profile.read_text(encoding="utf-8") == f"# existing, no trailing newline\n{LINE}\n"
    assert has_line(profile, LINE)


def test_ensure_line_creates_missing_file(tmp_path: Path) -> None:
    profile = tmp_path / "nested" / ".zprofile"

    assert ensure_line(profile, LINE) is True
    assert profile.read_text(encoding="utf-8") == f"{LINE}\n"


def test_has_line_needs_a_whole_line(tmp_path: Path) -> None:
    profile = tmp_path / ".zprofile"
    profile.write_text(f"# {LINE}\n", encoding="utf-8")

    assert not has_line(profile, LINE)
    assert not has_line(tmp_path / "absent", LINE)


def test_append_block_is_guarded_by_begin_marker(tmp_path: Path) -> None:
    rc = tmp_path / ".zshrc"
    rc.write_text("alias ll='ls -l'\n", encoding="utf-8")

    assert append_block(rc, begin="# >>> x >>>", end="# <<< x <<<", body="function br {}\n\n") is True
    assert append_block(rc, begin="# >>> x >>>", end="# <<< x <<<", body="something else") is False

    text = rc.read_text(encoding="utf-8")
    assert text == "alias ll='ls -l'\n\n# >>> x >>>\nfunction br {}\n# <<< x <<<\n"
    assert has_marker(rc, "# <<< x <<<")


def test_write_atomic_replaces_and_leaves_no_temp(tmp_path: Path) -> None:
    target = tmp_path / "helix" / "config.toml"

    write_atomic(target, b'theme = "onedark"\n')
    write_atomic(target, b'theme = "nord"\n', mode=0o600)

    assert target.read_bytes() == b'theme = "nord"\n'
    assert (target.stat().st_mode & 0o777) == 0o600
    assert sorted(p.name for p in target.parent.iterdir()) == ["config.toml"]
