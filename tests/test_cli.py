"""Smoke tests for the CLI.

These tests verify CLI behavior without running the native build tool.
"""

import sys
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from cvbuild import __version__
from cvbuild.cli import USAGE, app

runner = CliRunner()

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX link flags")


@pytest.fixture
def system_opencv(monkeypatch, lib_dir, tmp_path):
    """Point the build at a system OpenCV with core and imgproc."""
    project = tmp_path / "project"
    project.mkdir()
    (project / "_binding.gyp").write_text("{}")
    monkeypatch.setenv("OPENCV_LIB_DIR", str(lib_dir))
    monkeypatch.setenv("OPENCV_INCLUDE_DIR", str(tmp_path / "include"))
    monkeypatch.setenv("CVBUILD_PROJECT_DIR", str(project))
    monkeypatch.setenv("OPENCV4NODEJS_DISABLE_AUTOBUILD", "1")
    return project


class TestCLIUsage:
    """Test usage, help and version output."""

    def test_no_args_prints_usage(self) -> None:
        """Without the build command usage should be printed, exit 0."""
        with patch("cvbuild.cli.get_settings") as mock_settings:
            result = runner.invoke(app, [])
        assert result.exit_code == 0
        assert USAGE in result.stdout
        mock_settings.assert_not_called()

    @pytest.mark.parametrize(
        "args",
        [["--dry-run"], ["install"], ["--jobs", "4", "--cuda"], ["bulid", "-j", "2"]],
    )
    def test_without_build_prints_usage(self, args, tmp_path) -> None:
        """Any argument list without the build command should print usage."""
        with patch("cvbuild.cli.get_settings") as mock_settings:
            result = runner.invoke(app, args)
        assert result.exit_code == 0
        assert USAGE in result.stdout
        mock_settings.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    def test_help_returns_zero(self) -> None:
        """--help should return exit code 0."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "build" in result.stdout

    def test_build_short_help(self, tmp_path) -> None:
        """build -h should print help without touching anything."""
        with patch("cvbuild.cli.get_settings") as mock_settings:
            result = runner.invoke(app, ["build", "-h"])
        assert result.exit_code == 0
        assert "--dry-run" in result.stdout
        mock_settings.assert_not_called()
        assert list(tmp_path.iterdir()) == []

    def test_version_flag(self) -> None:
        """--version should print the tool version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCLIBuild:
    """Test the build command."""

    @posix_only
    def test_dry_run(self, system_opencv, lib_dir, tmp_path) -> None:
        """Dry run should print exports and the command, without spawning."""
        with patch("cvbuild.builds.runner.subprocess.run") as mock_run:
            result = runner.invoke(app, ["build", "--dry-run", "--jobs", "4"])

        assert result.exit_code == 0, result.output
        mock_run.assert_not_called()
        lines = result.stdout.splitlines()
        assert (
            'export OPENCV4NODEJS_DEFINES="OPENCV4NODEJS_FOUND_LIBRARY_CORE;'
            'OPENCV4NODEJS_FOUND_LIBRARY_IMGPROC"'
        ) in lines
        assert f'export OPENCV4NODEJS_INCLUDES="{tmp_path / "include"}"' in lines
        assert (
            f'export OPENCV4NODEJS_LIBRARIES="-L{lib_dir};-lopencv_core;'
            f'-lopencv_imgproc;-Wl,-rpath,{lib_dir}"'
        ) in lines
        assert "node-gyp rebuild --jobs 4" in lines
        assert lines.index("node-gyp rebuild --jobs 4") > max(
            i for i, line in enumerate(lines) if line.startswith("export ")
        )
        assert (system_opencv / "binding.gyp").exists()

    @posix_only
    def test_dryrun_alias_and_short_jobs(self, system_opencv) -> None:
        """--dryrun and -j should be accepted."""
        result = runner.invoke(app, ["build", "--dryrun", "-j", "2", "--nobuild"])
        assert result.exit_code == 0, result.output
        assert "node-gyp rebuild --jobs 2" in result.stdout

    @posix_only
    def test_options_before_build(self, system_opencv) -> None:
        """Options may precede the build command."""
        result = runner.invoke(app, ["--dry-run", "-j", "3", "build"])
        assert result.exit_code == 0, result.output
        assert "node-gyp rebuild --jobs 3" in result.stdout

    def test_invalid_jobs(self) -> None:
        """--jobs should only accept max or a positive integer."""
        result = runner.invoke(app, ["build", "--jobs", "lots"])
        assert result.exit_code != 0

    @posix_only
    def test_build_runs_tool(self, system_opencv) -> None:
        """A real build should run the build tool and clean up."""
        with patch("cvbuild.builds.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=0)
            result = runner.invoke(app, ["build", "--nobuild"])

        assert result.exit_code == 0, result.output
        assert "Build completed" in result.stdout
        args, _ = mock_run.call_args
        assert args[0] == ["node-gyp", "rebuild", "--jobs", "max"]
        assert not (system_opencv / "binding.gyp").exists()

    @posix_only
    def test_build_failure_exits_nonzero(self, system_opencv) -> None:
        """A failing build tool should be reported with exit code 1."""
        with patch("cvbuild.builds.runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=2)
            result = runner.invoke(app, ["build", "--nobuild"])

        assert result.exit_code == 1
        assert "subprocess_error" in result.stdout
        assert not (system_opencv / "binding.gyp").exists()

    def test_missing_libraries(self, monkeypatch, tmp_path) -> None:
        """An empty lib dir should be reported with exit code 1."""
        empty = tmp_path / "empty"
        empty.mkdir()
        monkeypatch.setenv("OPENCV_LIB_DIR", str(empty))
        monkeypatch.setenv("OPENCV_INCLUDE_DIR", str(tmp_path))
        result = runner.invoke(app, ["build", "--nobuild", "--dry-run"])
        assert result.exit_code == 1
        assert "no_libraries_found" in result.stdout


class TestCLIConfig:
    """Test the config command."""

    def test_config_command(self) -> None:
        """config should show the effective configuration."""
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "OpenCV:" in result.stdout
        assert "Build command" in result.stdout
        assert "Log level" in result.stdout

    def test_config_json(self, monkeypatch) -> None:
        """config --json should output JSON."""
        import json

        monkeypatch.setenv("OPENCV_LIB_DIR", "/opt/opencv/lib")
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        parsed = json.loads(result.stdout)
        assert parsed["opencv_lib_dir"] == "/opt/opencv/lib"
        assert parsed["build_command"] == "node-gyp rebuild"
