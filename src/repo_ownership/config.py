from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .errors import UsageError
from .gitignore import DEFAULT_MAX_DEPTH
from .paths import CODEOWNERS_PATH_CANDIDATES

# Version control metadata directories that are never part of the tree.
BUILTIN_IGNORE_RULES: tuple[str, ...] = ("/.git/", "/.hg/", ".svn/")


class CheckPolicy(BaseModel):
    model_config = ConfigDict(extra="forbid")

    all_existing_files_have_mandatory_owner: bool = False
    all_existing_files_have_any_owner: bool = False
    all_newly_created_files_have_mandatory_owner: bool = False
    all_newly_created_files_have_any_owner: bool = False

    def enabled(self) -> list[str]:
        return [name for name, on in self.model_dump().items() if on]


class AnalysisConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_dir: Path = Path(".")
    codeowners_file: Path | None = None
    codeowners_candidates: list[str] = Field(default_factory=lambda: list(CODEOWNERS_PATH_CANDIDATES))
    builtin_ignore_rules: list[str] = Field(default_factory=lambda: list(BUILTIN_IGNORE_RULES))
    max_depth: int = DEFAULT_MAX_DEPTH
    policy: CheckPolicy = Field(default_factory=CheckPolicy)

    @field_validator("max_depth")
    @classmethod
    def _positive_max_depth(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("max_depth must be > 0")
        return value

    @field_validator("codeowners_candidates")
    @classmethod
    def _relative_candidates(cls, value: list[str]) -> list[str]:
        out = [v.strip().lstrip("/") for v in value if v.strip()]
        if not out:
            raise ValueError("codeowners_candidates must not be empty")
        return out

    def resolve_codeowners_file(self) -> Path:
        """The explicit CODEOWNERS file, else the first existing candidate."""
        if self.codeowners_file is not None:
            path = self.codeowners_file
            if not path.is_absolute():
                path = self.base_dir / path
            if not path.is_file():
                raise UsageError(f"CODEOWNERS file {path} does not exist")
            return path
        for candidate in self.codeowners_candidates:
            path = self.base_dir / candidate
            if path.is_file():
                return path
        raise UsageError(f"{self.base_dir} does not have a CODEOWNERS file")


def load_analysis_config(path: str | Path) -> AnalysisConfig:
    p = Path(path)
    data = json.loads(p.read_text(encoding="utf-8"))
    return AnalysisConfig.model_validate(data)
