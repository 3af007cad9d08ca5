"""Directory traversal: find every regular file under a root."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from dupescan.errors import PathNotFoundError, RootNotADirectoryError

import fnmatch
import logging
import pathlib

logger = logging.getLogger(__name__)


def _matches_any(name: str, patterns: Iterable[str]) -> bool:
    """Check if name matches any of the glob patterns (case-insensitive)."""
    name_lower = name.lower()
    return any(fnmatch.fnmatch(name_lower, p.lower()) for p in patterns)


def validate_root(root: pathlib.Path) -> None:
    """Raise PathNotFoundError or RootNotADirectoryError for an unusable root."""
    if not root.exists():
        raise PathNotFoundError(root)
    if not root.is_dir():
        raise RootNotADirectoryError(root)


def walk(
    root: pathlib.Path,
    *,
    exclude: Iterable[str] = (),
    exclude_dir: Iterable[str] = (),
    skip_hidden: bool = False,
) -> Iterator[pathlib.Path]:
    """Yield every regular file under *root*, recursing into subdirectories.

    Symlinks are neither yielded nor followed, and neither are special files.
    Files whose name matches an *exclude* glob and directories matching an
    *exclude_dir* glob are skipped, as are dot-files and dot-directories when
    *skip_hidden* is set. Directories that cannot be listed are logged and
    skipped.
    """
    validate_root(root)
    exclude = list(exclude)
    exclude_dir = list(exclude_dir)

    stack = [root]
    while stack:
        directory = stack.pop()
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning(f"Cannot list {directory}: {exc}")
            continue

        subdirs: list[pathlib.Path] = []
        for path in entries:
            if skip_hidden and path.name.startswith("."):
                continue
            if path.is_symlink():
                logger.debug(f"skipping symlink {path}")
                continue
            if path.is_dir():
                if exclude_dir and _matches_any(path.name, exclude_dir):
                    continue
                subdirs.append(path)
            elif path.is_file():
                if exclude and _matches_any(path.name, exclude):
                    continue
                yield path

        # Reversed so subdirectories are popped in sorted order
        stack.extend(reversed(subdirs))
