"""Copy-link helper with a non-fatal status and a file fallback."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from . import config as cfg

LOGGER = logging.getLogger(__name__)

ClipboardWriter = Callable[[str], None]


class ClipboardUnavailable(RuntimeError):
    """Raised by a clipboard writer when no clipboard can be reached."""


@dataclass(frozen=True)
class CopyResult:
    ok: bool
    method: str
    message: str
    fallback_path: Path | None = None


def system_clipboard_writer(
    clipboard: cfg.ClipboardConfig = cfg.DEFAULT_CLIPBOARD_CONFIG,
) -> ClipboardWriter:
    """Return a writer that pipes text into the first available clipboard command."""

    def write(text: str) -> None:
        for command in clipboard.commands:
            if shutil.which(command[0]) is None:
                continue
            try:
                result = subprocess.run(
                    list(command),
                    input=text,
                    text=True,
                    capture_output=True,
                    timeout=clipboard.timeout_seconds,
                    check=False,
                )
            except (OSError, subprocess.TimeoutExpired) as exc:
                LOGGER.debug("Clipboard command %s failed: %s", command[0], exc)
                continue
            if result.returncode == 0:
                return
            LOGGER.debug(
                "Clipboard command %s exited with %s: %s",
                command[0],
                result.returncode,
                result.stderr.strip(),
            )
        raise ClipboardUnavailable("No working clipboard command found")

    return write


def _write_fallback(url: str, fallback_dir: Path, filename: str) -> Path:
    fallback_dir.mkdir(parents=True, exist_ok=True)
    path = fallback_dir / filename
    path.write_text(url + "\n", encoding="utf-8")
    return path


def copy_link(
    url: str,
    *,
    writer: ClipboardWriter | None = None,
    fallback_dir: Path | None = None,
    clipboard: cfg.ClipboardConfig = cfg.DEFAULT_CLIPBOARD_CONFIG,
) -> CopyResult:
    """Copy ``url`` to the clipboard, falling back to a text file on failure.

    Never raises for clipboard problems; the returned CopyResult carries the
    status message to show the user.
    """
    write = writer or system_clipboard_writer(clipboard)
    try:
        write(url)
    except (ClipboardUnavailable, OSError, subprocess.SubprocessError) as exc:
        LOGGER.warning("Clipboard write failed: %s", exc)
    else:
        return CopyResult(ok=True, method="clipboard", message="Link copied to clipboard.")

    target_dir = fallback_dir if fallback_dir is not None else cfg.CALCULATOR_OUT_DIR
    try:
        path = _write_fallback(url, target_dir, clipboard.fallback_filename)
    except OSError as exc:
        LOGGER.warning("Fallback link write failed: %s", exc)
        return CopyResult(
            ok=False,
            method="none",
            message="Could not copy link; copy it manually from the output above.",
        )
    return CopyResult(
        ok=False,
        method="file",
        message=f"Clipboard unavailable; link saved to {path}.",
        fallback_path=path,
    )
