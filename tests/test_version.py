from pathlib import Path

import hskdeck


def _project_version() -> str:
    pyproject = Path(__file__).resolve().parents[1] / "pyproject.toml"
    in_project = False
    for line in pyproject.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if stripped.startswith("[") and stripped.endswith("]"):
            in_project = stripped == "[project]"
            continue
        if in_project and stripped.startswith('version = "'):
            return stripped.split('"', 2)[1]
    raise AssertionError("No [project].version in pyproject.toml")


def test_version_matches_pyproject() -> None:
    assert hskdeck.__version__ == _project_version()


def _write_project(root: Path, name: str, version: str) -> None:
    root.mkdir(parents=True, exist_ok=True)
    (root / "pyproject.toml").write_text(
        f'[project]\nname = "{name}"\nversion = "{version}"\n', encoding="utf-8"
    )


def test_version_ignores_enclosing_project(tmp_path: Path) -> None:
    _write_project(tmp_path, "someapp", "9.9.9")
    package_dir = tmp_path / ".venv" / "lib" / "python3.12" / "site-packages" / "hskdeck"
    package_dir.mkdir(parents=True)
    assert hskdeck._version_from_pyproject(package_dir) is None


def test_version_ignores_other_src_project(tmp_path: Path) -> None:
    _write_project(tmp_path, "someapp", "9.9.9")
    package_dir = tmp_path / "src" / "hskdeck"
    package_dir.mkdir(parents=True)
    assert hskdeck._version_from_pyproject(package_dir) is None


def test_version_read_from_own_checkout(tmp_path: Path) -> None:
    _write_project(tmp_path, "hskdeck", "1.2.3")
    package_dir = tmp_path / "src" / "hskdeck"
    package_dir.mkdir(parents=True)
    assert hskdeck._version_from_pyproject(package_dir) == "1.2.3"
