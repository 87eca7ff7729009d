from __future__ import annotations

import re
from pathlib import Path, PurePath

# Separator dictated by both the CODEOWNERS and the gitignore documentation.
PATH_SEPARATOR = "/"

CODEOWNERS_PATH_CANDIDATES: tuple[str, ...] = (
    "CODEOWNERS",
    ".github/CODEOWNERS",
    ".gitlab/CODEOWNERS",
    "docs/CODEOWNERS",
)

GITIGNORE_FILENAME = ".gitignore"

_REPEATED_SEPARATORS_RE = re.compile(r"/{2,}")


def separators_to_unix(path: str | PurePath) -> str:
    return str(path).replace("\\", PATH_SEPARATOR)


def normalize_path(path: str | PurePath) -> str:
    """Return ``path`` as a root anchored, ``/`` separated string.

    A trailing separator is kept because it marks the path as a directory.
    """
    raw = separators_to_unix(path).strip("\r\n")
    return _REPEATED_SEPARATORS_RE.sub(PATH_SEPARATOR, PATH_SEPARATOR + raw)


def normalize_base_dir(base_dir: str | PurePath | None) -> str:
    """Return ``base_dir`` starting and ending with exactly one separator."""
    if base_dir is None:
        return PATH_SEPARATOR
    raw = normalize_path(base_dir)
    if not raw.endswith(PATH_SEPARATOR):
        raw += PATH_SEPARATOR
    return raw


def project_relative(path: str | PurePath, project_base_dir: str | PurePath) -> str | None:
    """Rebase an absolute ``path`` onto ``project_base_dir``.

    Returns the root anchored project relative form, or ``None`` when the
    path does not lie under the project base directory.
    """
    base = normalize_path(project_base_dir).rstrip(PATH_SEPARATOR)
    candidate = normalize_path(path)
    if not base:
        return candidate
    if candidate == base:
        return PATH_SEPARATOR
    if candidate.startswith(base + PATH_SEPARATOR):
        return candidate[len(base):]
    return None


def display_path(relative: str | PurePath, *, is_dir: bool = False) -> str:
    """Project relative display form: ``/src/app.py``, ``/src/`` for directories."""
    out = normalize_path(relative)
    if is_dir and not out.endswith(PATH_SEPARATOR):
        out += PATH_SEPARATOR
    return out


def read_text(path: str | Path) -> str:
    return Path(path).read_text(encoding="utf-8")
