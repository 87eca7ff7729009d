from .file_set import DEFAULT_MAX_DEPTH, IgnoreFileSet, QueryMode
from .ignore_file import IgnoreFile
from .parser import ParsedIgnoreRule, parse_gitignore
from .rules import IgnoreRule, Verdict
from .walk import find_all_non_ignored, query_path

__all__ = [
    "DEFAULT_MAX_DEPTH",
    "IgnoreFile",
    "IgnoreFileSet",
    "IgnoreRule",
    "ParsedIgnoreRule",
    "QueryMode",
    "Verdict",
    "find_all_non_ignored",
    "parse_gitignore",
    "query_path",
]
