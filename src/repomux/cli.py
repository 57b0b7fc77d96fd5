"""repomux CLI - open a tmux workspace for a git repository."""

import os
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from repomux import __version__
from repomux.config import load_config
from repomux.discovery import discover, names_of
from repomux.errors import PathResolutionError, RepoMuxError
from repomux.logger import RepoMuxLogger
from repomux.selector import select
from repomux.tmux import launch, sanitize_session_name


def resolve_root(directory: Optional[str]) -> Path:
    """Resolve the search directory to an absolute path.

    Args:
        directory: Path given on the command line, or None for the cwd.

    Raises:
        PathResolutionError: The cwd is gone, or the path is not a directory.
    """
    try:
        if directory is None:
            root = os.getcwd()
        else:
            root = os.path.abspath(os.path.expanduser(directory))
    except OSError as e:
        raise PathResolutionError(f"Cannot resolve search directory: {e}") from e

    if not os.path.isdir(root):
        raise PathResolutionError(f"Not a directory: {root}")

    return Path(root)


@click.command()
@click.version_option(version=__version__, prog_name="repomux")
@click.argument("directory", required=False)
@click.option(
    "--editor",
    "-e",
    default=None,
    envvar="REPOMUX_EDITOR",
    show_envvar=True,
    help="Editor command for the first window (default: nvim)",
)
@click.option(
    "--list",
    "list_only",
    is_flag=True,
    help="Print discovered repositories as YAML and exit",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show debug output on stderr",
)
@click.option(
    "--log-dir",
    default=None,
    type=click.Path(file_okay=False),
    help="Append JSON logs to this directory (default: $REPOMUX_LOG_DIR, off)",
)
def cli(
    directory: Optional[str],
    editor: Optional[str],
    list_only: bool,
    verbose: bool,
    log_dir: Optional[str],
) -> None:
    """Pick a git repository under DIRECTORY and open a tmux session for it.

    DIRECTORY defaults to the current directory. Repositories nested inside
    other repositories and anything under hidden directories are skipped.

    The session is named after the repository. If it already exists repomux
    attaches to it; otherwise it creates windows nvim, server and terminal,
    starts the editor in the first one and attaches.

    Examples:

      # Search the current directory
      repomux

      # Search ~/src and use helix
      repomux ~/src --editor hx

      # Only list what would be offered
      repomux ~/src --list
    """
    config = load_config()
    verbose = verbose or config["logging"]["verbose"]
    # console-only until the log directory is known to be usable
    logger = RepoMuxLogger(verbose=verbose)

    try:
        logger = RepoMuxLogger(
            log_dir=Path(log_dir) if log_dir else config["logging"]["dir"],
            verbose=verbose,
        )
        _run(
            directory,
            editor=editor or config["launch"]["editor"],
            marker=config["discovery"]["marker"],
            list_only=list_only,
            logger=logger,
        )
    except RepoMuxError as e:
        logger.error(str(e), error_type=type(e).__name__)
        sys.exit(1)


def _run(
    directory: Optional[str],
    editor: str,
    marker: str,
    list_only: bool,
    logger: RepoMuxLogger,
) -> None:
    root = resolve_root(directory)

    if not list_only:
        click.echo(f"Searching for git repositories in: {root}")

    repos = discover(root, logger=logger, marker=marker)
    if not repos:
        click.echo("No git repositories found.")
        return

    repo_map = names_of(repos)
    logger.debug(f"{len(repos)} repositories, {len(repo_map)} unique names")

    if list_only:
        listing = {name: str(path) for name, path in repo_map.items()}
        click.echo(yaml.safe_dump(listing, default_flow_style=False, sort_keys=False), nl=False)
        return

    selected = select(list(repo_map))
    if selected is None:
        click.echo("No repository selected.")
        return

    session = sanitize_session_name(selected)
    if session != selected:
        logger.debug(f"Session name for {selected} is {session}", repository=selected)
    status = launch(session, repo_map[selected], editor=editor, logger=logger)
    logger.debug(f"tmux attach exited with status {status}", session=session)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
