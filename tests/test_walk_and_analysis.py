import json
from pathlib import Path

import pytest

from repo_ownership.analysis import FileKind, analyze_directory
from repo_ownership.config import AnalysisConfig, CheckPolicy
from repo_ownership.errors import UsageError
from repo_ownership.gitignore import IgnoreFileSet, find_all_non_ignored


def _write(path: Path, text: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _make_repo(root: Path, codeowners: str) -> Path:
    _write(root / ".gitignore", "build/\n*.log\n")
    _write(root / ".git" / "HEAD", "ref: refs/heads/main\n")
    _write(root / "README.md", "# demo\n")
    _write(root / "src" / "app.py", "print('hi')\n")
    _write(root / "src" / "debug.log", "noise\n")
    _write(root / "build" / "out.bin", "")
    _write(root / "docs" / "guide.md", "guide\n")
    _write(root / ".github" / "CODEOWNERS", codeowners)
    return root


def test_find_all_non_ignored(tmp_path: Path) -> None:
    _make_repo(tmp_path, "* @default\n")
    file_set = IgnoreFileSet(tmp_path)
    file_set.add_builtin_rules(["/.git/"])
    found = [p.relative_to(tmp_path).as_posix() for p in find_all_non_ignored(file_set)]
    assert found == [
        ".",
        ".github",
        ".github/CODEOWNERS",
        ".gitignore",
        "README.md",
        "docs",
        "docs/guide.md",
        "src",
        "src/app.py",
    ]


def test_find_all_non_ignored_respects_max_depth(tmp_path: Path) -> None:
    _write(tmp_path / "a" / "b" / "c.txt")
    file_set = IgnoreFileSet(tmp_path, autoload=False)
    found = [p.relative_to(tmp_path).as_posix() for p in find_all_non_ignored(file_set, max_depth=1)]
    assert found == [".", "a"]


def test_analyze_directory(tmp_path: Path) -> None:
    _make_repo(
        tmp_path,
        "* @default\n/src/ @src-team\n*.md @docs\n\n^[Review]\ndocs/ @reviewers\n",
    )
    result = analyze_directory(AnalysisConfig(base_dir=tmp_path))
    assert result.codeowners_file.endswith(".github/CODEOWNERS")
    assert result.ignore_files == [".gitignore"]

    paths = [e.path for e in result.entries]
    assert paths == sorted(paths)
    assert "/build/" not in paths
    assert "/src/debug.log" not in paths

    app = result.entry("/src/app.py")
    assert app is not None
    assert app.kind is FileKind.file
    assert app.approvers == ["@src-team"]

    guide = result.entry("/docs/guide.md")
    assert guide is not None
    assert guide.approvers == ["@docs", "@reviewers"]
    assert guide.mandatory_approvers == ["@docs"]

    src_dir = result.entry("/src/")
    assert src_dir is not None
    assert src_dir.kind is FileKind.directory

    new_in_src = result.entry("/src/*")
    assert new_in_src is not None
    assert new_in_src.kind is FileKind.newly_created_file
    assert new_in_src.mandatory_approvers == ["@src-team"]

    assert result.all_existing_files_have_any_owner()
    assert result.all_existing_files_have_mandatory_owner()
    assert result.all_newly_created_files_have_mandatory_owner()
    assert result.failures(CheckPolicy(all_existing_files_have_any_owner=True)) == []

    exported = json.loads(result.to_json())
    assert {"/src/app.py": ["@src-team"]} in exported
    assert len(exported) == len(result.entries)


def test_analyze_directory_reports_missing_owners(tmp_path: Path) -> None:
    _make_repo(tmp_path, "/src/ @src-team\n^[Optional]\n*.md @readers\n")
    result = analyze_directory(AnalysisConfig(base_dir=tmp_path))

    assert not result.all_existing_files_have_any_owner()
    assert not result.all_existing_files_have_mandatory_owner()
    assert not result.all_newly_created_files_have_any_owner()

    readme = result.entry("/README.md")
    assert readme is not None
    assert readme.approvers == ["@readers"]
    assert readme.mandatory_approvers == []

    policy = CheckPolicy(
        all_existing_files_have_mandatory_owner=True,
        all_newly_created_files_have_any_owner=True,
    )
    assert result.failures(policy) == [
        "all_existing_files_have_mandatory_owner",
        "all_newly_created_files_have_any_owner",
    ]


def test_analyze_directory_without_codeowners(tmp_path: Path) -> None:
    _write(tmp_path / "README.md")
    with pytest.raises(UsageError):
        analyze_directory(AnalysisConfig(base_dir=tmp_path))


def test_analyze_directory_requires_directory(tmp_path: Path) -> None:
    with pytest.raises(UsageError):
        analyze_directory(AnalysisConfig(base_dir=tmp_path / "nope"))
