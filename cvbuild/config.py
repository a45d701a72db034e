"""Configuration settings for cvbuild.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.

The OpenCV-related variables keep their conventional names
(OPENCV_LIB_DIR, OPENCV_INCLUDE_DIR, ...) so existing build setups keep
working; cvbuild's own settings use the CVBUILD_ prefix.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENCV_VERSION = "4.6.0"


def _default_build_root() -> Path:
    """Return the default root for auto-built OpenCV trees."""
    return Path.home() / ".cache" / "cvbuild"


def _default_project_dir() -> Path:
    """Return the default project directory (the working directory)."""
    return Path.cwd()


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the CVBUILD_ prefix,
    except for the OpenCV variables which use their own names.
    """

    model_config = SettingsConfigDict(
        env_prefix="CVBUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # OpenCV location overrides
    opencv_lib_dir: str | None = Field(
        default=None,
        validation_alias="OPENCV_LIB_DIR",
        description="OpenCV library directory when auto build is disabled",
    )
    opencv_include_dir: str | None = Field(
        default=None,
        validation_alias="OPENCV_INCLUDE_DIR",
        description="OpenCV include directory when auto build is disabled",
    )
    opencv_build_root: Path = Field(
        default_factory=_default_build_root,
        validation_alias="OPENCV_BUILD_ROOT",
        description="Root directory for auto-built OpenCV trees",
    )
    opencv_version: str | None = Field(
        default=None,
        validation_alias="OPENCV4NODEJS_AUTOBUILD_OPENCV_VERSION",
        description=f"OpenCV version to auto-build (default {DEFAULT_OPENCV_VERSION})",
    )
    disable_autobuild: str | None = Field(
        default=None,
        validation_alias="OPENCV4NODEJS_DISABLE_AUTOBUILD",
        description="Any non-empty value disables the OpenCV auto-build",
    )
    bindings_debug: str | None = Field(
        default=None,
        validation_alias="BINDINGS_DEBUG",
        description="Any non-empty value builds the extension in debug mode",
    )

    # Native build tool
    project_dir: Path = Field(
        default_factory=_default_project_dir,
        description="Directory of the native extension project",
    )
    build_command: str = Field(
        default="node-gyp rebuild",
        description="Native build tool command",
    )
    install_command: str | None = Field(
        default=None,
        description="Command that builds and installs OpenCV into the build root",
    )
    hidden_descriptor: str = Field(
        default="_binding.gyp",
        description="Build descriptor file kept under a hidden name",
    )
    active_descriptor: str = Field(
        default="binding.gyp",
        description="Build descriptor file name read by the build tool",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    @property
    def autobuild_disabled(self) -> bool:
        """Whether the environment disables the OpenCV auto-build."""
        return bool(self.disable_autobuild)

    @property
    def debug_build(self) -> bool:
        """Whether the extension should be built in debug mode."""
        return bool(self.bindings_debug)


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = [
    "DEFAULT_OPENCV_VERSION",
    "Settings",
    "get_settings",
    "print_settings_json",
]
