from __future__ import annotations

import json
from pathlib import Path

from repo_ownership.cli.app import app
from typer.testing import CliRunner


def _seed_repo(root: Path, codeowners: str) -> Path:
    (root / "src").mkdir(parents=True)
    (root / "src" / "app.py").write_text("print('hi')\n", encoding="utf-8")
    (root / "src" / "debug.log").write_text("noise\n", encoding="utf-8")
    (root / "README.md").write_text("# demo\n", encoding="utf-8")
    (root / ".gitignore").write_text("*.log\n", encoding="utf-8")
    (root / "CODEOWNERS").write_text(codeowners, encoding="utf-8")
    return root


def test_owners_command(tmp_path: Path) -> None:
    _seed_repo(tmp_path, "* @default\n/src/ @src-team\n^[Docs]\n*.md @writers\n")
    runner = CliRunner()

    res = runner.invoke(app, ["owners", "--base-dir", str(tmp_path), "src/app.py", "README.md"])
    assert res.exit_code == 0, res.output
    assert res.output.splitlines() == ["src/app.py\t@src-team", "README.md\t@default @writers"]

    res = runner.invoke(
        app, ["owners", "--base-dir", str(tmp_path), "--mandatory-only", "README.md"]
    )
    assert res.exit_code == 0, res.output
    assert res.output.splitlines() == ["README.md\t@default"]


def test_owners_command_without_codeowners(tmp_path: Path) -> None:
    res = CliRunner().invoke(app, ["owners", "--base-dir", str(tmp_path), "README.md"])
    assert res.exit_code != 0


def test_ignored_command(tmp_path: Path) -> None:
    _seed_repo(tmp_path, "* @default\n")
    res = CliRunner().invoke(
        app, ["ignored", "--base-dir", str(tmp_path), "src/debug.log", "src/app.py", ".git/config"]
    )
    assert res.exit_code == 0, res.output
    assert res.output.splitlines() == [
        "src/debug.log\tignored",
        "src/app.py\tabstain",
        ".git/config\tignored",
    ]


def test_show_command(tmp_path: Path) -> None:
    _seed_repo(tmp_path, "*.py @py\n[Docs][2] @writers\ndocs/\n")
    runner = CliRunner()

    res = runner.invoke(app, ["show", "--base-dir", str(tmp_path)])
    assert res.exit_code == 0, res.output
    assert res.output.startswith("# CODEOWNERS file:\n*.py @py\n\n[Docs][2] @writers\ndocs/\n")

    res = runner.invoke(app, ["show", "--base-dir", str(tmp_path), "--verbose"])
    assert res.exit_code == 0, res.output
    assert "# Regex used for the next rule:" in res.output


def test_check_command_json(tmp_path: Path) -> None:
    _seed_repo(tmp_path, "* @default\n/src/ @src-team\n")
    res = CliRunner().invoke(
        app, ["check", "--base-dir", str(tmp_path), "--existing-mandatory", "--json"]
    )
    assert res.exit_code == 0, res.output
    rows = json.loads(next(line for line in res.output.splitlines() if line.startswith("[")))
    assert {"/src/app.py": ["@src-team"]} in rows
    assert {"/README.md": ["@default"]} in rows
    assert all("/src/debug.log" not in row for row in rows)


def test_check_command_fails_policy(tmp_path: Path) -> None:
    _seed_repo(tmp_path, "/src/ @src-team\n")
    res = CliRunner().invoke(app, ["check", "--base-dir", str(tmp_path), "--existing-any"])
    assert res.exit_code == 1
    assert "all_existing_files_have_any_owner" in res.output


def test_check_command_with_config(tmp_path: Path) -> None:
    repo = _seed_repo(tmp_path / "repo", "/src/ @src-team\n")
    cfg = tmp_path / "ownership.json"
    cfg.write_text(
        json.dumps(
            {
                "base_dir": str(repo),
                "policy": {"all_newly_created_files_have_any_owner": True},
            }
        ),
        encoding="utf-8",
    )
    res = CliRunner().invoke(app, ["check", "--config", str(cfg), "--json"])
    assert res.exit_code == 1
    assert "all_newly_created_files_have_any_owner" in res.output

    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({"max_depth": 0}), encoding="utf-8")
    res = CliRunner().invoke(app, ["check", "--config", str(bad)])
    assert res.exit_code != 0


def test_check_command_config_without_base_dir(tmp_path: Path) -> None:
    repo = _seed_repo(tmp_path / "repo", "* @default\n")
    cfg = tmp_path / "ownership.json"
    cfg.write_text(
        json.dumps({"policy": {"all_existing_files_have_mandatory_owner": True}}),
        encoding="utf-8",
    )
    res = CliRunner().invoke(app, ["check", "--config", str(cfg), "--base-dir", str(repo), "--json"])
    assert res.exit_code == 0, res.output
    rows = json.loads(next(line for line in res.output.splitlines() if line.startswith("[")))
    assert {"/README.md": ["@default"]} in rows
