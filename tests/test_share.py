from __future__ import annotations

import subprocess

import pytest

from zec_staking import share
from zec_staking.config import ClipboardConfig

URL = "https://calc.example.org/?ps=50&dz=60"


def test_copy_link_uses_writer():
    written: list[str] = []
    result = share.copy_link(URL, writer=written.append)

    assert result.ok is True
    assert result.method == "clipboard"
    assert written == [URL]


def test_copy_link_falls_back_to_file(tmp_path):
    def broken(text: str) -> None:
        raise share.ClipboardUnavailable("no clipboard")

    result = share.copy_link(URL, writer=broken, fallback_dir=tmp_path)

    assert result.ok is False
    assert result.method == "file"
    assert result.fallback_path == tmp_path / "share_link.txt"
    assert result.fallback_path.read_text(encoding="utf-8").strip() == URL
    assert "saved" in result.message


def test_copy_link_reports_when_fallback_fails(tmp_path):
    def broken(text: str) -> None:
        raise OSError("denied")

    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x", encoding="utf-8")

    result = share.copy_link(URL, writer=broken, fallback_dir=blocker)

    assert result.ok is False
    assert result.method == "none"
    assert result.fallback_path is None


def test_copy_link_without_clipboard_commands_uses_fallback(monkeypatch, tmp_path):
    monkeypatch.setattr(share.shutil, "which", lambda name: None)

    result = share.copy_link(URL, fallback_dir=tmp_path)

    assert result.method == "file"


def test_system_writer_pipes_text_into_first_available_command(monkeypatch):
    calls = []

    def fake_which(name):
        return f"/usr/bin/{name}" if name == "xclip" else None

    def fake_run(command, **kwargs):
        calls.append((command, kwargs["input"]))
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    monkeypatch.setattr(share.shutil, "which", fake_which)
    monkeypatch.setattr(share.subprocess, "run", fake_run)

    writer = share.system_clipboard_writer(
        ClipboardConfig(commands=(("pbcopy",), ("xclip", "-selection", "clipboard")))
    )
    writer(URL)

    assert calls == [(["xclip", "-selection", "clipboard"], URL)]


def test_system_writer_skips_failing_commands(monkeypatch):
    monkeypatch.setattr(share.shutil, "which", lambda name: f"/usr/bin/{name}")

    def fake_run(command, **kwargs):
        if command[0] == "pbcopy":
            raise subprocess.TimeoutExpired(command, 2.0)
        return subprocess.CompletedProcess(command, 1, stdout="", stderr="no display")

    monkeypatch.setattr(share.subprocess, "run", fake_run)
    writer = share.system_clipboard_writer(ClipboardConfig(commands=(("pbcopy",), ("wl-copy",))))

    with pytest.raises(share.ClipboardUnavailable):
        writer(URL)
