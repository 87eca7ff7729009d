from repo_ownership.paths import (
    display_path,
    normalize_base_dir,
    normalize_path,
    project_relative,
)


def test_normalize_path() -> None:
    assert normalize_path("src/app.py") == "/src/app.py"
    assert normalize_path("/src//app.py") == "/src/app.py"
    assert normalize_path("src\\main\\app.py") == "/src/main/app.py"
    assert normalize_path("docs/") == "/docs/"
    assert normalize_path("") == "/"
    assert normalize_path("foo ") == "/foo "
    assert normalize_path(" lead/x") == "/ lead/x"
    assert normalize_path("src/app.py\n") == "/src/app.py"


def test_normalize_base_dir() -> None:
    for raw in ("src/test", "/src/test", "src/test/", "/src/test/"):
        assert normalize_base_dir(raw) == "/src/test/"
    assert normalize_base_dir("") == "/"
    assert normalize_base_dir(None) == "/"


def test_project_relative() -> None:
    assert project_relative("/foo/foo.md", "/foo") == "/foo.md"
    assert project_relative("/foo", "/foo") == "/"
    assert project_relative("/foobar/x.md", "/foo") is None
    assert project_relative("/other/x.md", "/foo") is None


def test_display_path() -> None:
    assert display_path("src", is_dir=True) == "/src/"
    assert display_path("src/app.py") == "/src/app.py"
