"""Open files with the operating system's default application."""

import os
import platform
import subprocess
from collections.abc import Callable
from pathlib import Path

Launcher = Callable[[Path], None]


class LaunchError(OSError):
    """The default application could not be started."""


def default_open_command(path: Path, system: str | None = None) -> list[str] | None:
    """Command that opens ``path`` on ``system``, or ``None`` on Windows."""
    system = (system or platform.system()).lower()
    if system == "windows":
        return None
    if system == "darwin":
        return ["open", str(path)]
    return ["xdg-open", str(path)]


def open_with_default_app(path: Path) -> None:
    """Hand ``path`` to the platform's default handler without waiting for it.

    Raises:
        LaunchError: If the handler could not be started.
    """
    command = default_open_command(path)
    try:
        if command is None:
            os.startfile(path)  # type: ignore[attr-defined]
        else:
            subprocess.Popen(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
    except OSError as e:
        raise LaunchError(f"Could not open {path}: {e}") from e
