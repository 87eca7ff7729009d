from __future__ import annotations

import logging
from pathlib import Path

from ..codeowners import OwnershipDocument
from ..config import AnalysisConfig
from ..errors import UsageError
from ..gitignore import IgnoreFileSet, find_all_non_ignored, query_path
from .models import DirectoryOwners, FileKind, FileOwners

LOG = logging.getLogger(__name__)

# A file name nobody will ever commit; stands in for a file added later.
NEWLY_CREATED_PROBE = "NewlyCreated_wHaTeVeRiSaDdEdNeXt"


def build_ignore_file_set(config: AnalysisConfig) -> tuple[IgnoreFileSet, list[Path]]:
    file_set = IgnoreFileSet(config.base_dir, autoload=False)
    file_set.add_builtin_rules(config.builtin_ignore_rules)
    loaded = file_set.add_all_ignore_files(max_depth=config.max_depth)
    for p in loaded:
        LOG.info("Using ignore file: %s", p.relative_to(file_set.project_base_dir).as_posix())
    return file_set.assume_queries_are_project_relative(), loaded


def _owners(document: OwnershipDocument, path: str, kind: FileKind, key: str | None = None) -> FileOwners:
    return FileOwners(
        path=key or path,
        kind=kind,
        approvers=document.all_approvers(path),
        mandatory_approvers=document.mandatory_approvers(path),
    )


def analyze_directory(config: AnalysisConfig) -> DirectoryOwners:
    """Resolve the owners of every non-ignored file and directory of a project.

    Every directory in which a new file would not be ignored also gets a
    ``<dir>/*`` entry describing who would own such a file.
    """
    base_dir = config.base_dir.absolute()
    if not base_dir.is_dir():
        raise UsageError(f"The provided base_dir is invalid: {base_dir}")

    file_set, loaded = build_ignore_file_set(config)
    codeowners_file = config.resolve_codeowners_file()
    LOG.info("Using CODEOWNERS: %s", codeowners_file)
    document = OwnershipDocument.from_file(codeowners_file)
    LOG.debug("All configured ignore rules:\n%s", file_set)
    LOG.debug("All configured CODEOWNERS rules:\n%s", document)

    entries: list[FileOwners] = []
    for path in find_all_non_ignored(file_set, max_depth=config.max_depth):
        if path.is_file():
            entries.append(_owners(document, query_path(file_set, path, is_dir=False), FileKind.file))
            continue

        directory = query_path(file_set, path, is_dir=True)
        entries.append(_owners(document, directory, FileKind.directory))
        probe = directory + NEWLY_CREATED_PROBE
        if file_set.kept(probe):
            entries.append(_owners(document, probe, FileKind.newly_created_file, key=directory + "*"))

    entries.sort(key=lambda e: e.path)
    return DirectoryOwners(
        base_dir=str(base_dir),
        codeowners_file=str(codeowners_file),
        ignore_files=[p.relative_to(file_set.project_base_dir).as_posix() for p in loaded],
        entries=entries,
    )
