"""Discovery of OpenCV module libraries on disk."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from cvbuild.types import NativeModule

if TYPE_CHECKING:
    from cvbuild.platform import PlatformDefaults

logger = logging.getLogger(__name__)

# Order is significant: flags are derived in this order.
OPENCV_MODULES: tuple[str, ...] = (
    "world",
    "core",
    "highgui",
    "imgcodecs",
    "imgproc",
    "features2d",
    "calib3d",
    "photo",
    "objdetect",
    "ml",
    "video",
    "videoio",
    "videostab",
    "dnn",
    "face",
    "text",
    "tracking",
    "xfeatures2d",
    "ximgproc",
    "img_hash",
)


def find_library(
    lib_dir: Path, module_name: str, platform: PlatformDefaults
) -> str | None:
    """Find the library file for one module.

    Args:
        lib_dir: Directory to search (not recursive).
        module_name: OpenCV module name, e.g. 'core'.
        platform: Platform variant providing the file name pattern.

    Returns:
        Absolute path of the first matching file (sorted by name), or None.
    """
    pattern = platform.library_pattern(module_name)
    try:
        names = sorted(os.listdir(lib_dir))
    except OSError as e:
        logger.debug("Cannot list %s: %s", lib_dir, e)
        return None
    for name in names:
        if pattern.match(name):
            return str((lib_dir / name).absolute())
    return None


def find_modules(
    lib_dir: str | Path,
    platform: PlatformDefaults,
    module_names: tuple[str, ...] = OPENCV_MODULES,
) -> list[NativeModule]:
    """List every known module with the library file found for it.

    Modules without a library file are included with ``library_path=None``.

    Args:
        lib_dir: OpenCV library directory.
        platform: Platform variant providing the file name pattern.
        module_names: Module names to look for, in order.

    Returns:
        One NativeModule per name, in the given order.
    """
    lib_dir = Path(lib_dir)
    modules = [
        NativeModule(name=name, library_path=find_library(lib_dir, name, platform))
        for name in module_names
    ]
    logger.debug(
        "Found %d of %d OpenCV modules in %s",
        sum(1 for m in modules if m.library_path),
        len(modules),
        lib_dir,
    )
    return modules


__all__ = ["OPENCV_MODULES", "find_library", "find_modules"]
