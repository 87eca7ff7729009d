from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from enum import StrEnum
from pathlib import Path

from ..errors import UsageError
from ..paths import GITIGNORE_FILENAME, normalize_path, project_relative
from .ignore_file import IgnoreFile
from .rules import Verdict

LOG = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 128


class QueryMode(StrEnum):
    relative = "relative"
    absolute = "absolute"


class IgnoreFileSet:
    """Every ignore file of one project, keyed by the directory it lives in.

    Files are consulted from the shallowest to the deepest base directory and
    the last file with an opinion decides, so a nested file overrides its
    parents.
    """

    def __init__(self, project_base_dir: str | Path, *, autoload: bool = True) -> None:
        self.project_base_dir = Path(project_base_dir).absolute()
        self.query_mode = QueryMode.absolute
        self._files: dict[str, list[IgnoreFile]] = {}
        self._ordered: list[IgnoreFile] = []
        if autoload:
            self.add_all_ignore_files()

    def assume_queries_are_project_relative(self) -> IgnoreFileSet:
        self.query_mode = QueryMode.relative
        return self

    def assume_queries_include_project_base_dir(self) -> IgnoreFileSet:
        self.query_mode = QueryMode.absolute
        return self

    def add(self, ignore_file: IgnoreFile) -> IgnoreFileSet:
        self._files.setdefault(ignore_file.base_dir, []).append(ignore_file)
        self._reorder()
        return self

    def add_builtin_rules(self, rules: Iterable[str]) -> IgnoreFileSet:
        """Register rules at the project root ahead of any file found on disk."""
        builtin = IgnoreFile.from_lines(rules, base_dir="/")
        self._files.setdefault(builtin.base_dir, []).insert(0, builtin)
        self._reorder()
        return self

    def add_ignore_file(self, path: str | Path) -> IgnoreFile | None:
        p = Path(path).absolute()
        base_dir = project_relative(p.parent.as_posix(), self.project_base_dir.as_posix())
        if base_dir is None:
            raise UsageError(f"{p} is not inside {self.project_base_dir}")
        try:
            ignore_file = IgnoreFile.from_file(p, base_dir=base_dir)
        except (OSError, UnicodeDecodeError) as exc:
            LOG.error("Cannot read %s due to %s. Will skip this file.", p, exc)
            return None
        LOG.debug("loaded %d rules from %s (base dir %s)", len(ignore_file.rules), p, ignore_file.base_dir)
        self.add(ignore_file)
        return ignore_file

    def add_all_ignore_files(self, *, max_depth: int = DEFAULT_MAX_DEPTH) -> list[Path]:
        loaded: list[Path] = []
        root_depth = len(self.project_base_dir.parts)
        for dirpath, dirnames, filenames in os.walk(self.project_base_dir, onerror=self._log_walk_error):
            dirnames.sort()
            if len(Path(dirpath).parts) - root_depth >= max_depth:
                dirnames.clear()
            if GITIGNORE_FILENAME not in filenames:
                continue
            candidate = Path(dirpath) / GITIGNORE_FILENAME
            if candidate.is_file() and self.add_ignore_file(candidate) is not None:
                loaded.append(candidate)
        return loaded

    def _log_walk_error(self, exc: OSError) -> None:
        LOG.error("Unable to find %s files in %s due to %s", GITIGNORE_FILENAME, self.project_base_dir, exc)

    def is_empty(self) -> bool:
        return not self._files

    def _reorder(self) -> None:
        self._ordered = [f for base in sorted(self._files) for f in self._files[base]]

    def files(self) -> list[IgnoreFile]:
        return list(self._ordered)

    def to_query_path(self, path: str | Path, project_relative_query: bool | None = None) -> str:
        """Turn a query into the ``/`` rooted project relative form."""
        if project_relative_query is None:
            project_relative_query = self.query_mode is QueryMode.relative
        if project_relative_query:
            return normalize_path(path)
        rebased = project_relative(path, self.project_base_dir.as_posix())
        if rebased is None:
            raise UsageError(f"{path} is outside the project base directory {self.project_base_dir}")
        return rebased

    def verdict(self, path: str | Path, project_relative_query: bool | None = None) -> Verdict:
        target = self.to_query_path(path, project_relative_query)
        result = Verdict.abstain
        for ignore_file in self._ordered:
            v = ignore_file.verdict(target)
            if v is not Verdict.abstain:
                result = v
        return result

    def ignored(self, path: str | Path, project_relative_query: bool | None = None) -> bool:
        return self.verdict(path, project_relative_query) is Verdict.ignored

    def kept(self, path: str | Path, project_relative_query: bool | None = None) -> bool:
        return not self.ignored(path, project_relative_query)

    def base_dirs(self) -> list[str]:
        return sorted(self._files)

    def to_text(self, *, verbose: bool = False) -> str:
        lines = ["# IgnoreFileSet"]
        for ignore_file in self.files():
            lines.append(ignore_file.to_text(verbose=verbose).rstrip("\n"))
            lines.append("# =========================")
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_text()
