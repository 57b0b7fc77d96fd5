"""Error types raised by repomux.

Every fatal condition derives from RepoMuxError so the CLI can catch them in
one place. A user cancelling the menu is not an error and has no type here.
"""


class RepoMuxError(Exception):
    """Base class for fatal repomux errors."""


class PathResolutionError(RepoMuxError):
    """The search directory could not be resolved to an absolute path."""


class WalkError(RepoMuxError):
    """Directory traversal failed with something other than a permission error."""


class SelectorDriverError(RepoMuxError):
    """The terminal menu could not be started or crashed while running."""


class LaunchError(RepoMuxError):
    """tmux could not be used to open the session."""


class LaunchStepError(LaunchError):
    """A tmux subcommand failed while building a new session.

    Attributes:
        step: Name of the failed tmux subcommand (e.g. "new-window").
        stderr: What tmux printed on stderr, if anything.
    """

    def __init__(self, step: str, stderr: str = "") -> None:
        self.step = step
        self.stderr = stderr
        message = f"tmux {step} failed"
        if stderr:
            message = f"{message}: {stderr}"
        super().__init__(message)


class LogFileError(RepoMuxError):
    """The log directory could not be created."""
