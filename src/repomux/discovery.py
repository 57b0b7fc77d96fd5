"""
Repository discovery.

Walks a directory tree and reports git repository roots. Hidden directories
and the insides of repositories are never entered, so nested repositories
(submodules, vendored checkouts) are not reported.
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from repomux.errors import WalkError
from repomux.logger import RepoMuxLogger

REPO_MARKER = ".git"


def is_repo_root(path: Path | str, marker: str = REPO_MARKER) -> bool:
    """Check whether ``path`` contains a ``marker`` directory.

    A ``.git`` file (worktrees, submodules) does not count.
    """
    return os.path.isdir(os.path.join(path, marker))


def discover(
    root: Path | str,
    logger: RepoMuxLogger | None = None,
    marker: str = REPO_MARKER,
) -> list[Path]:
    """Find repository roots below ``root``.

    Directory entries are visited in lexical order, so the result order is
    deterministic for a given tree.

    Args:
        root: Absolute path to search from.
        logger: Where permission diagnostics go (default: a console logger).
        marker: Directory name identifying a repository root.

    Returns:
        Repository root paths in walk order. If ``root`` is itself a
        repository the result is exactly ``[root]``.

    Raises:
        WalkError: Traversal failed for a reason other than permissions.
    """
    root = Path(root)
    log = logger or RepoMuxLogger()

    if is_repo_root(root, marker):
        log.debug(f"Found repository: {root}")
        return [root]

    def _on_error(err: OSError) -> None:
        # os.walk skips the directory after calling us
        if isinstance(err, PermissionError):
            log.warning(f"Permission denied: {err.filename}")
            return
        raise WalkError(f"Cannot read {err.filename or root}: {err.strerror or err}") from err

    repos: list[Path] = []
    for dirpath, dirnames, _ in os.walk(root, onerror=_on_error):
        current = Path(dirpath)
        descend = []
        for name in sorted(dirnames):
            if name.startswith("."):
                continue
            child = current / name
            if os.path.islink(child):
                continue
            if is_repo_root(child, marker):
                log.debug(f"Found repository: {child}")
                repos.append(child)
                continue
            descend.append(name)
        dirnames[:] = descend

    return repos


def names_of(paths: Iterable[Path | str]) -> dict[str, Path]:
    """Map each repository's directory name to its path.

    Two repositories sharing a base name collide; the one seen last wins.
    Keys keep the order in which each name first appeared.
    """
    mapping: dict[str, Path] = {}
    for path in paths:
        path = Path(path)
        mapping[path.name] = path
    return mapping
