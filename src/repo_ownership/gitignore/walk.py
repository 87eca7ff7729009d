from __future__ import annotations

import logging
from pathlib import Path

from ..errors import UsageError
from ..paths import display_path, project_relative
from .file_set import DEFAULT_MAX_DEPTH, IgnoreFileSet

LOG = logging.getLogger(__name__)


def query_path(file_set: IgnoreFileSet, path: Path, *, is_dir: bool) -> str:
    """Project relative query form of ``path``; directories end with ``/``."""
    rel = project_relative(path.as_posix(), file_set.project_base_dir.as_posix())
    if rel is None:
        raise UsageError(f"{path} is outside the project base directory {file_set.project_base_dir}")
    return display_path(rel, is_dir=is_dir)


def find_all_non_ignored(
    file_set: IgnoreFileSet,
    start: str | Path | None = None,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[Path]:
    """List every directory and file below ``start`` that is not ignored.

    Ignored directories are not descended into. ``start`` defaults to the
    project base directory of ``file_set``.
    """
    root = Path(start) if start is not None else file_set.project_base_dir
    found: list[Path] = []
    _scan(file_set, root, max_depth, found)
    return sorted(found)


def _scan(file_set: IgnoreFileSet, current: Path, depth_left: int, found: list[Path]) -> None:
    if not current.is_dir():
        LOG.debug("walk: not a directory %s", current)
        return
    if file_set.ignored(query_path(file_set, current, is_dir=True), project_relative_query=True):
        LOG.debug("walk: ignored %s", current)
        return

    LOG.debug("walk: scan %s", current)
    found.append(current)
    if depth_left <= 0:
        LOG.warning("walk: maximum depth reached at %s", current)
        return

    for entry in sorted(current.iterdir()):
        if entry.is_dir():
            _scan(file_set, entry, depth_left - 1, found)
        elif file_set.kept(query_path(file_set, entry, is_dir=False), project_relative_query=True):
            found.append(entry)
