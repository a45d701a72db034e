"""Locating the OpenCV library directory and the libraries inside it."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from cvbuild.errors import (
    ConfigurationError,
    MissingDirectoryError,
    NoLibrariesFoundError,
)
from cvbuild.paths import resolve_path

if TYPE_CHECKING:
    from cvbuild.opencv.builder import Builder
    from cvbuild.platform import PlatformDefaults
    from cvbuild.types import BuildEnvironment, NativeModule

logger = logging.getLogger(__name__)


def locate_lib_dir(env: BuildEnvironment, platform: PlatformDefaults) -> str:
    """Decide which library directory the build links against.

    Args:
        env: Resolved build environment.
        platform: Platform variant supplying the system default.

    Returns:
        Absolute library directory path.

    Raises:
        ConfigurationError: If no directory can be determined.
    """
    if env.auto_build_disabled:
        if env.explicit_lib_dir:
            logger.info("Auto build disabled, using OPENCV_LIB_DIR")
            return env.explicit_lib_dir
        logger.info("Auto build disabled, using system lib dir")
        return platform.default_lib_dir()

    lib_dir = resolve_path(env.lib_dir)
    if not lib_dir:
        raise ConfigurationError("failed to resolve opencv lib dir path")
    logger.info("Using auto build lib dir")
    return lib_dir


def ensure_lib_dir(builder: Builder, lib_dir: str) -> None:
    """Make sure the library directory exists, installing OpenCV if needed.

    Raises:
        MissingDirectoryError: If the directory is still missing after install.
    """
    if os.path.isdir(lib_dir):
        return
    logger.info("Lib dir %s does not exist, running install", lib_dir)
    builder.install()
    if not os.path.isdir(lib_dir):
        raise MissingDirectoryError(lib_dir)


def enumerate_modules(builder: Builder, lib_dir: str) -> list[NativeModule]:
    """Return the modules whose library file was found in lib_dir.

    The builder's order is kept.

    Raises:
        NoLibrariesFoundError: If no module library was found.
    """
    found = [m for m in builder.list_modules(lib_dir) if m.library_path]
    if not found:
        raise NoLibrariesFoundError(lib_dir)
    logger.info("Found the following libs:")
    for module in found:
        logger.info("  %s: %s", module.name, module.library_path)
    return found


__all__ = ["ensure_lib_dir", "enumerate_modules", "locate_lib_dir"]
