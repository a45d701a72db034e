"""Platform-specific defaults for locating and linking OpenCV.

All Windows vs. POSIX branching lives here. ``get_platform_defaults()`` picks
the variant once; the rest of the package only talks to the returned object.
"""

from __future__ import annotations

import logging
import re
import shutil
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

from cvbuild.errors import ConfigurationError
from cvbuild.paths import resolve_path

if TYPE_CHECKING:
    from cvbuild.types import NativeModule

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "/usr/local"
DEFAULT_LIB_DIR = f"{DEFAULT_PREFIX}/lib"
DEFAULT_INCLUDE_DIR = f"{DEFAULT_PREFIX}/include"
DEFAULT_INCLUDE_DIR_OPENCV4 = f"{DEFAULT_INCLUDE_DIR}/opencv4"


class PlatformDefaults:
    """Common interface of the platform variants."""

    name = "unknown"
    is_windows = False

    def default_include_dirs(self) -> list[str]:
        """Return the system include directories for OpenCV."""
        raise NotImplementedError

    def default_lib_dir(self) -> str:
        """Return the system library directory for OpenCV."""
        raise NotImplementedError

    def library_pattern(self, module_name: str) -> re.Pattern[str]:
        """Return the pattern matching a module's library file name."""
        raise NotImplementedError

    def link_arguments(
        self, lib_dir: str, modules: Sequence[NativeModule]
    ) -> list[str]:
        """Return the linker arguments for the given modules."""
        raise NotImplementedError

    def resolve_command(self, cmd: list[str]) -> list[str]:
        """Return the command as it should be handed to subprocess."""
        return list(cmd)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class PosixDefaults(PlatformDefaults):
    """Linux, macOS and other POSIX systems."""

    name = "posix"

    def default_include_dirs(self) -> list[str]:
        logger.info("OPENCV_INCLUDE_DIR is not set, using default include dirs")
        return [DEFAULT_INCLUDE_DIR, DEFAULT_INCLUDE_DIR_OPENCV4]

    def default_lib_dir(self) -> str:
        logger.info("OPENCV_LIB_DIR is not set, using default lib dir")
        return DEFAULT_LIB_DIR

    def library_pattern(self, module_name: str) -> re.Pattern[str]:
        # libopencv_core.so, libopencv_core.so.4.6.0, libopencv_core.4.6.0.dylib
        return re.compile(
            rf"^libopencv_{re.escape(module_name)}(\.\d+)*\.(so|dylib|a)(\.\d+)*$"
        )

    def link_arguments(
        self, lib_dir: str, modules: Sequence[NativeModule]
    ) -> list[str]:
        # Search path first, then the libraries, then the runtime path.
        args = [f"-L{lib_dir}"]
        args.extend(f"-lopencv_{module.name}" for module in modules)
        args.append(f"-Wl,-rpath,{lib_dir}")
        return args


class WindowsDefaults(PlatformDefaults):
    """Windows, where OpenCV has no conventional system location."""

    name = "windows"
    is_windows = True

    def default_include_dirs(self) -> list[str]:
        raise ConfigurationError(
            "missing required include dir on Windows: OPENCV_INCLUDE_DIR has "
            "to be defined when auto build is disabled"
        )

    def default_lib_dir(self) -> str:
        raise ConfigurationError(
            "missing required lib dir on Windows: OPENCV_LIB_DIR has "
            "to be defined when auto build is disabled"
        )

    def library_pattern(self, module_name: str) -> re.Pattern[str]:
        # opencv_core460.lib, opencv_core460d.lib
        return re.compile(
            rf"^opencv_{re.escape(module_name)}\d*d?\.lib$", re.IGNORECASE
        )

    def link_arguments(
        self, lib_dir: str, modules: Sequence[NativeModule]
    ) -> list[str]:
        args: list[str] = []
        for module in modules:
            path = resolve_path(module.library_path)
            if path is None:
                raise ConfigurationError(
                    f"no library file for OpenCV module {module.name} in {lib_dir}"
                )
            args.append(path)
        return args

    def resolve_command(self, cmd: list[str]) -> list[str]:
        # npm installs tools as .cmd shims, which CreateProcess only finds
        # by full path.
        if not cmd:
            return []
        executable = shutil.which(cmd[0]) or cmd[0]
        return [executable, *cmd[1:]]


def get_platform_defaults(platform_name: str | None = None) -> PlatformDefaults:
    """Select the platform variant.

    Args:
        platform_name: A ``sys.platform`` value; the running platform if None.

    Returns:
        WindowsDefaults on Windows, PosixDefaults everywhere else.
    """
    platform_name = platform_name or sys.platform
    if platform_name in ("win32", "cygwin"):
        return WindowsDefaults()
    return PosixDefaults()


__all__ = [
    "DEFAULT_INCLUDE_DIR",
    "DEFAULT_INCLUDE_DIR_OPENCV4",
    "DEFAULT_LIB_DIR",
    "PlatformDefaults",
    "PosixDefaults",
    "WindowsDefaults",
    "get_platform_defaults",
]
