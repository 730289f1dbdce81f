from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer
from typer.testing import CliRunner

from pkgmap import __version__
from pkgmap.cli.app import app
from pkgmap.cli.context import CLIContext
from pkgmap.core.config import Settings
from pkgmap.core.errors import ErrorCode
from pkgmap.output.console import MockConsole

EXAMPLE = {
    "default": {"a": "pkg-a"},
    "family": {"redhat": {"a": "pkg-a-rh"}},
    "distro": {"fedora": {"b": ""}},
}

runner = CliRunner()


@pytest.fixture
def release_map(tmp_path: Path) -> Path:
    path = tmp_path / "release.json"
    document = dict(EXAMPLE, release={"fedora": {"40": {"a": "pkg-a-f40"}}})
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


@pytest.fixture
def map_dir(tmp_path: Path) -> Path:
    maps = tmp_path / "pkg-map"
    maps.mkdir()
    (maps / "example").write_text(json.dumps(EXAMPLE), encoding="utf-8")
    return maps


def _install_context(
    monkeypatch: pytest.MonkeyPatch, settings: Settings
) -> MockConsole:
    import pkgmap.cli.app as app_module

    console = MockConsole()
    monkeypatch.setattr(app_module, "build_console", lambda: console)
    monkeypatch.setattr(
        app_module,
        "build_context",
        lambda console: CLIContext(settings=settings, console=console),
    )
    return console


def _invoke(names: list[str] | None, **options: object) -> None:
    import pkgmap.cli.app as app_module

    params: dict[str, object] = {
        "element": None,
        "pkg_map_path": None,
        "distro": None,
        "release": None,
        "map_dir": None,
        "missing_ok": False,
        "show_map": False,
        "debug": False,
        "version": False,
    }
    params.update(options)
    app_module.pkg_map(names, **params)  # type: ignore[arg-type]


class TestCommandFunction:
    def test_example_resolution(
        self,
        map_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        console = _install_context(monkeypatch, Settings(distro="fedora", map_dir=map_dir))

        _invoke(["a", "b"], element="example")

        assert capsys.readouterr().out == "pkg-a-rh\n"
        assert console.outputs == []

    def test_missing_name_fails_and_reports_every_name(
        self,
        map_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        console = _install_context(monkeypatch, Settings(distro="fedora", map_dir=map_dir))

        with pytest.raises(typer.Exit) as exc:
            _invoke(["c", "d"], element="example")

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert capsys.readouterr().out == ""
        assert console.text.count("package c") == 1
        assert console.text.count("package d") == 1

    def test_resolved_names_still_printed_on_failure(
        self,
        map_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _install_context(monkeypatch, Settings(distro="fedora", map_dir=map_dir))

        with pytest.raises(typer.Exit):
            _invoke(["a", "c"], element="example")

        assert capsys.readouterr().out == "pkg-a-rh\n"

    def test_missing_ok(
        self,
        map_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _install_context(monkeypatch, Settings(distro="fedora", map_dir=map_dir))

        _invoke(["c"], element="example", missing_ok=True)

        assert capsys.readouterr().out == "c\n"

    def test_options_override_settings(
        self,
        map_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _install_context(monkeypatch, Settings(distro="fedora"))

        _invoke(["a"], element="example", distro="ubuntu", map_dir=map_dir)

        assert capsys.readouterr().out == "pkg-a\n"

    def test_no_distro_is_invalid_invocation(
        self, map_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        console = _install_context(monkeypatch, Settings(map_dir=map_dir))

        with pytest.raises(typer.Exit) as exc:
            _invoke(["a"], element="example")

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert "Distro not set" in console.text

    def test_exclusivity_checked_before_settings_are_loaded(
        self, map_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import pkgmap.cli.app as app_module

        console = MockConsole()
        monkeypatch.setattr(app_module, "build_console", lambda: console)

        def fail_build_context(_console: object) -> CLIContext:
            pytest.fail("settings must not be read for an invalid invocation")

        monkeypatch.setattr(app_module, "build_context", fail_build_context)

        with pytest.raises(typer.Exit) as exc:
            _invoke(["a"], element="example", pkg_map_path=map_dir / "example")

        assert exc.value.exit_code == int(ErrorCode.USER_ERROR)
        assert "not both" in console.text

    def test_show_map(
        self,
        map_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        _install_context(monkeypatch, Settings(distro="fedora", map_dir=map_dir))

        _invoke(None, element="example", show_map=True)

        assert json.loads(capsys.readouterr().out) == {"a": "pkg-a-rh", "b": ""}


class TestCli:
    def test_example_with_explicit_map(self, map_dir: Path) -> None:
        result = runner.invoke(
            app, ["--pkg-map", str(map_dir / "example"), "--distro", "fedora", "a", "b"]
        )
        assert result.exit_code == 0
        assert result.stdout == "pkg-a-rh\n"

    def test_environment_defaults(self, map_dir: Path) -> None:
        result = runner.invoke(
            app,
            ["--element", "example", "a"],
            env={"DISTRO_NAME": "ubuntu", "PKG_MAP_DIR": str(map_dir)},
        )
        assert result.exit_code == 0
        assert result.stdout == "pkg-a\n"

    def test_unmapped_name_exit_code(self, map_dir: Path) -> None:
        result = runner.invoke(
            app, ["--pkg-map", str(map_dir / "example"), "--distro", "fedora", "c"]
        )
        assert result.exit_code == 1
        assert "c" in result.output

    def test_missing_document_exit_code(self, map_dir: Path) -> None:
        result = runner.invoke(
            app,
            ["--element", "absent", "--map-dir", str(map_dir), "--distro", "fedora", "a"],
        )
        assert result.exit_code == 2

    def test_missing_document_missing_ok_echoes_names(self, map_dir: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--element",
                "absent",
                "--map-dir",
                str(map_dir),
                "--distro",
                "fedora",
                "--missing-ok",
                "z",
                "y",
                "x",
            ],
        )
        assert result.exit_code == 0
        assert result.stdout == "z\ny\nx\n"

    def test_malformed_document(self, tmp_path: Path) -> None:
        broken = tmp_path / "broken"
        broken.write_text("{", encoding="utf-8")
        result = runner.invoke(
            app, ["--pkg-map", str(broken), "--distro", "fedora", "--missing-ok", "a"]
        )
        assert result.exit_code == 1

    def test_element_and_pkg_map_are_exclusive(self, map_dir: Path) -> None:
        result = runner.invoke(
            app,
            [
                "--element",
                "example",
                "--pkg-map",
                str(map_dir / "example"),
                "--distro",
                "fedora",
                "a",
            ],
        )
        assert result.exit_code == 1

    def test_broken_settings_do_not_mask_invalid_invocation(
        self, map_dir: Path, tmp_path: Path
    ) -> None:
        broken = tmp_path / "config.toml"
        broken.write_text("[pkg-map\n", encoding="utf-8")
        result = runner.invoke(
            app,
            ["--element", "example", "--pkg-map", str(map_dir / "example"), "a"],
            env={"PKG_MAP_CONFIG": str(broken), "DISTRO_NAME": "fedora"},
        )
        assert result.exit_code == 1
        assert "not both" in result.output
        assert "TOML" not in result.output

    def test_release_option(self, release_map: Path) -> None:
        result = runner.invoke(
            app, ["--pkg-map", str(release_map), "--distro", "fedora", "--release", "40", "a"]
        )
        assert result.exit_code == 0
        assert result.stdout == "pkg-a-f40\n"

    def test_release_from_environment(self, release_map: Path) -> None:
        result = runner.invoke(
            app,
            ["--pkg-map", str(release_map), "a"],
            env={"DISTRO_NAME": "fedora", "DIB_RELEASE": "40"},
        )
        assert result.exit_code == 0
        assert result.stdout == "pkg-a-f40\n"

    def test_other_release_falls_back_to_family(self, release_map: Path) -> None:
        result = runner.invoke(
            app, ["--pkg-map", str(release_map), "--distro", "fedora", "--release", "39", "a"]
        )
        assert result.exit_code == 0
        assert result.stdout == "pkg-a-rh\n"

    def test_debug_keeps_behaviour(self, map_dir: Path) -> None:
        result = runner.invoke(
            app,
            ["--pkg-map", str(map_dir / "example"), "--distro", "fedora", "--debug", "a"],
        )
        assert result.exit_code == 0
        assert "pkg-a-rh" in result.stdout

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert result.stdout.strip() == __version__
