"""tmux session launcher.

Attaches to an existing session, or builds a new one with three windows
(editor, server, terminal) and attaches to it.
"""

import re
import shutil
import subprocess
from pathlib import Path
from typing import Optional

from repomux.errors import LaunchError, LaunchStepError
from repomux.logger import RepoMuxLogger

EDITOR_WINDOW = "nvim"
SERVER_WINDOW = "server"
TERMINAL_WINDOW = "terminal"


def sanitize_session_name(name: str) -> str:
    """Sanitize a string for use as a tmux session name.

    Replaces characters not allowed in tmux session names (dots, colons) with hyphens.

    Args:
        name: The raw name to sanitize.

    Returns:
        A sanitized name safe for use as a tmux session name.
    """
    return re.sub(r"[.:]", "-", name)


def check_tmux() -> bool:
    """Check if tmux is available."""
    return shutil.which("tmux") is not None


def _target(session: str, window: Optional[str] = None) -> str:
    """Build an exact-match tmux target ("=name" or "=name:window")."""
    if window is None:
        return f"={session}"
    return f"={session}:{window}"


def session_exists(session: str) -> bool:
    """Check if a tmux session exists."""
    result = subprocess.run(
        ["tmux", "has-session", "-t", _target(session)],
        capture_output=True,
    )
    return result.returncode == 0


def attach_session(session: str) -> int:
    """Attach to a tmux session, handing it this terminal.

    Blocks until the client detaches or the session ends.

    Returns:
        tmux's exit status.

    Raises:
        LaunchError: tmux could not be started.
    """
    try:
        result = subprocess.run(["tmux", "attach-session", "-t", _target(session)])
    except OSError as e:
        raise LaunchError(f"Could not start tmux attach: {e}") from e
    return result.returncode


def _run_step(step: str, args: list[str], logger: RepoMuxLogger) -> None:
    """Run one session-building tmux subcommand, raising on failure."""
    cmd = ["tmux", step, *args]
    logger.debug(" ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise LaunchStepError(step, str(e)) from e
    if result.returncode != 0:
        raise LaunchStepError(step, (result.stderr or "").strip())


def create_session(
    session: str,
    work_dir: Path,
    editor: str = "nvim",
    logger: Optional[RepoMuxLogger] = None,
) -> None:
    """Create a detached session with editor, server and terminal windows.

    Steps run in a fixed order and stop at the first failure. Windows already
    created are left in place.

    Raises:
        LaunchStepError: A tmux subcommand failed.
    """
    log = logger or RepoMuxLogger()
    directory = str(work_dir)

    _run_step(
        "new-session",
        ["-d", "-s", session, "-c", directory, "-n", EDITOR_WINDOW],
        log,
    )
    _run_step("send-keys", ["-t", _target(session, EDITOR_WINDOW), editor, "Enter"], log)
    _run_step(
        "new-window",
        ["-t", _target(session, ""), "-n", SERVER_WINDOW, "-c", directory],
        log,
    )
    _run_step(
        "new-window",
        ["-t", _target(session, ""), "-n", TERMINAL_WINDOW, "-c", directory],
        log,
    )
    _run_step("select-window", ["-t", _target(session, EDITOR_WINDOW)], log)


def launch(
    session: str,
    work_dir: Path,
    editor: str = "nvim",
    logger: Optional[RepoMuxLogger] = None,
) -> int:
    """Open the tmux workspace for a repository.

    Args:
        session: tmux session name.
        work_dir: Directory every window starts in.
        editor: Command typed into the editor window of a new session.
        logger: Logger for step-by-step debug output.

    Returns:
        Exit status of the final ``tmux attach-session``.

    Raises:
        LaunchError: tmux is missing or attach could not be started.
        LaunchStepError: Building a new session failed.
    """
    log = logger or RepoMuxLogger()

    if not check_tmux():
        raise LaunchError("tmux is not installed or not in PATH")

    if session_exists(session):
        log.debug(f"Attaching to existing session {session}")
        return attach_session(session)

    log.debug(f"Creating session {session} in {work_dir}")
    create_session(session, work_dir, editor=editor, logger=log)
    return attach_session(session)
