from __future__ import annotations

import json
from enum import StrEnum

from pydantic import BaseModel, Field
from rich.table import Table

from ..config import CheckPolicy


class FileKind(StrEnum):
    file = "file"
    directory = "directory"
    newly_created_file = "newly_created_file"


class FileOwners(BaseModel):
    path: str
    kind: FileKind
    approvers: list[str] = Field(default_factory=list)
    mandatory_approvers: list[str] = Field(default_factory=list)


class DirectoryOwners(BaseModel):
    base_dir: str
    codeowners_file: str
    ignore_files: list[str] = Field(default_factory=list)
    entries: list[FileOwners] = Field(default_factory=list)

    def _of_kind(self, *kinds: FileKind) -> list[FileOwners]:
        return [e for e in self.entries if e.kind in kinds]

    def entry(self, path: str) -> FileOwners | None:
        for e in self.entries:
            if e.path == path:
                return e
        return None

    def all_existing_files_have_mandatory_owner(self) -> bool:
        return all(e.mandatory_approvers for e in self._of_kind(FileKind.file, FileKind.newly_created_file))

    def all_existing_files_have_any_owner(self) -> bool:
        return all(e.approvers for e in self._of_kind(FileKind.file, FileKind.newly_created_file))

    def all_newly_created_files_have_mandatory_owner(self) -> bool:
        return all(e.mandatory_approvers for e in self._of_kind(FileKind.newly_created_file))

    def all_newly_created_files_have_any_owner(self) -> bool:
        return all(e.approvers for e in self._of_kind(FileKind.newly_created_file))

    def failures(self, policy: CheckPolicy) -> list[str]:
        """Names of the enabled checks that do not hold."""
        return [name for name in policy.enabled() if not getattr(self, name)()]

    def to_json(self) -> str:
        """``[{"<path>": [<mandatory approvers>]}, ...]`` in path order."""
        return json.dumps([{e.path: e.mandatory_approvers} for e in self.entries])

    def to_table(self) -> Table:
        table = Table("Path", "Kind", "Mandatory Approvers", "All Approvers", "")
        for e in self.entries:
            table.add_row(
                e.path,
                e.kind.value,
                ", ".join(e.mandatory_approvers),
                ", ".join(e.approvers),
                "[red]<-- NO APPROVERS![/red]" if not e.mandatory_approvers else "",
            )
        return table
