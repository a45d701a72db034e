"""Tests for configuration module."""

import json
from pathlib import Path

from cvbuild.config import Settings, get_settings, print_settings_json


class TestSettings:
    """Test Settings class."""

    def test_default_settings(self) -> None:
        """Settings should have sensible defaults."""
        settings = Settings()

        assert settings.opencv_lib_dir is None
        assert settings.opencv_include_dir is None
        assert settings.opencv_build_root == Path.home() / ".cache" / "cvbuild"
        assert settings.project_dir == Path.cwd()
        assert settings.build_command == "node-gyp rebuild"
        assert settings.hidden_descriptor == "_binding.gyp"
        assert settings.active_descriptor == "binding.gyp"
        assert settings.log_level == "INFO"
        assert settings.autobuild_disabled is False
        assert settings.debug_build is False

    def test_opencv_variables(self, monkeypatch) -> None:
        """OpenCV variables should be read under their own names."""
        monkeypatch.setenv("OPENCV_LIB_DIR", "/opt/opencv/lib")
        monkeypatch.setenv("OPENCV_INCLUDE_DIR", "/opt/opencv/include")
        monkeypatch.setenv("OPENCV_BUILD_ROOT", "/tmp/opencv-build")
        monkeypatch.setenv("OPENCV4NODEJS_AUTOBUILD_OPENCV_VERSION", "4.5.5")

        settings = Settings()
        assert settings.opencv_lib_dir == "/opt/opencv/lib"
        assert settings.opencv_include_dir == "/opt/opencv/include"
        assert settings.opencv_build_root == Path("/tmp/opencv-build")
        assert settings.opencv_version == "4.5.5"

    def test_any_value_enables_switches(self, monkeypatch) -> None:
        """Non-empty values should enable the switch variables."""
        monkeypatch.setenv("OPENCV4NODEJS_DISABLE_AUTOBUILD", "yes please")
        monkeypatch.setenv("BINDINGS_DEBUG", "on")
        settings = Settings()
        assert settings.autobuild_disabled is True
        assert settings.debug_build is True

    def test_empty_value_disables_switches(self, monkeypatch) -> None:
        """Empty values should leave the switches off."""
        monkeypatch.setenv("BINDINGS_DEBUG", "")
        assert Settings().debug_build is False

    def test_prefixed_settings(self, monkeypatch) -> None:
        """Tool settings should use the CVBUILD_ prefix."""
        monkeypatch.setenv("CVBUILD_BUILD_COMMAND", "cmake-js rebuild")
        monkeypatch.setenv("CVBUILD_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("CVBUILD_PROJECT_DIR", "/srv/bindings")
        settings = Settings()
        assert settings.build_command == "cmake-js rebuild"
        assert settings.log_level == "DEBUG"
        assert settings.project_dir == Path("/srv/bindings")

    def test_env_file(self, tmp_path) -> None:
        """Settings should be read from a .env file in the working directory."""
        (tmp_path / ".env").write_text("CVBUILD_INSTALL_COMMAND=make opencv\n")
        assert Settings().install_command == "make opencv"


class TestGetSettings:
    """Test get_settings function."""

    def test_get_settings_returns_settings(self) -> None:
        """get_settings should return a Settings instance."""
        assert isinstance(get_settings(), Settings)


class TestPrintSettingsJson:
    """Test print_settings_json function."""

    def test_print_settings_json(self) -> None:
        """print_settings_json should return valid JSON."""
        parsed = json.loads(print_settings_json(Settings()))
        assert "opencv_lib_dir" in parsed
        assert "build_command" in parsed
        assert "project_dir" in parsed

    def test_print_settings_json_default(self) -> None:
        """print_settings_json without args should use default settings."""
        parsed = json.loads(print_settings_json())
        assert "log_level" in parsed
