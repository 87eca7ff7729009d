"""repo-ownership: CODEOWNERS approvers and gitignore verdicts for repository paths."""

from .codeowners import OwnershipDocument, OwnershipDocumentBuilder, OwnershipRule, Section
from .errors import PatternSyntaxError, RepoOwnershipError, UsageError
from .gitignore import IgnoreFile, IgnoreFileSet, IgnoreRule, QueryMode, Verdict, find_all_non_ignored
from .patterns import CompiledPattern, Dialect, compile_pattern

__all__ = [
    "CompiledPattern",
    "Dialect",
    "IgnoreFile",
    "IgnoreFileSet",
    "IgnoreRule",
    "OwnershipDocument",
    "OwnershipDocumentBuilder",
    "OwnershipRule",
    "PatternSyntaxError",
    "QueryMode",
    "RepoOwnershipError",
    "Section",
    "UsageError",
    "Verdict",
    "compile_pattern",
    "find_all_non_ignored",
]
