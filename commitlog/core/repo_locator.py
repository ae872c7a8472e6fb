import logging
from pathlib import Path
from typing import Optional, Union

from commitlog.core.config import Config
from commitlog.core.errors import NotARepository

logger = logging.getLogger("commitlog.core.repo_locator")

GIT_MARKER = ".git"


def find_repo_root(
    start_dir: Union[str, Path],
    max_depth: int = Config.REPO_SEARCH_DEPTH,
) -> Optional[Path]:
    """Walk up from start_dir looking for a .git entry.

    At most max_depth directories are inspected, start_dir included.
    Returns the directory holding the marker, or None.
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be >= 1, got {max_depth}")

    current = Path(start_dir).resolve()
    for _ in range(max_depth):
        # .git is a file inside linked worktrees and submodules
        if (current / GIT_MARKER).exists():
            logger.debug(f"Found {GIT_MARKER} in {current}")
            return current
        if current.parent == current:
            break
        current = current.parent

    return None


def is_git_repository(
    start_dir: Union[str, Path],
    max_depth: int = Config.REPO_SEARCH_DEPTH,
) -> bool:
    return find_repo_root(start_dir, max_depth) is not None


def require_repository(
    start_dir: Union[str, Path],
    max_depth: int = Config.REPO_SEARCH_DEPTH,
) -> Path:
    """Like find_repo_root, but raises NotARepository when nothing is found."""
    root = find_repo_root(start_dir, max_depth)
    if root is None:
        raise NotARepository(
            f"Not a git repository (no {GIT_MARKER} within {max_depth} levels of {start_dir})"
        )
    return root
