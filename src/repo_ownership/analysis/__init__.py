from .directory import analyze_directory, build_ignore_file_set
from .models import DirectoryOwners, FileKind, FileOwners

__all__ = ["DirectoryOwners", "FileKind", "FileOwners", "analyze_directory", "build_ignore_file_set"]
