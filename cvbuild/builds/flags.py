"""Derivation of compiler defines, include paths and link arguments.

All derivations keep the module order they are given.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from cvbuild.errors import ConfigurationError
from cvbuild.paths import resolve_path
from cvbuild.types import DerivedFlags

if TYPE_CHECKING:
    from cvbuild.platform import PlatformDefaults
    from cvbuild.types import BuildEnvironment, NativeModule

logger = logging.getLogger(__name__)

DEFINE_PREFIX = "OPENCV4NODEJS_FOUND_LIBRARY_"


def derive_defines(modules: Sequence[NativeModule]) -> list[str]:
    """Return one OPENCV4NODEJS_FOUND_LIBRARY_<NAME> define per module."""
    defines = [f"{DEFINE_PREFIX}{module.name.upper()}" for module in modules]
    logger.info("Setting the following defines:")
    for define in defines:
        logger.info("  %s", define)
    return defines


def derive_includes(env: BuildEnvironment, platform: PlatformDefaults) -> list[str]:
    """Return the include directories for the build.

    Args:
        env: Resolved build environment.
        platform: Platform variant supplying the system defaults.

    Returns:
        The explicit include dir, the system include dirs, or the two
        auto-build include dirs.

    Raises:
        ConfigurationError: If an auto-build include dir cannot be resolved.
    """
    if env.auto_build_disabled:
        if env.explicit_include_dir:
            includes = [env.explicit_include_dir]
        else:
            includes = platform.default_include_dirs()
    else:
        includes = []
        for raw in (env.include_dir, env.include_dir_opencv4):
            path = resolve_path(raw)
            if path is None:
                raise ConfigurationError("failed to resolve opencv include dir path")
            includes.append(path)
    logger.info("Setting the following includes:")
    for include in includes:
        logger.info("  %s", include)
    return includes


def derive_link_args(
    platform: PlatformDefaults,
    lib_dir: str,
    modules: Sequence[NativeModule],
) -> list[str]:
    """Return the linker arguments for the platform's link strategy."""
    libs = platform.link_arguments(lib_dir, modules)
    logger.info("Setting the following libs:")
    for lib in libs:
        logger.info("  %s", lib)
    return libs


def derive_flags(
    env: BuildEnvironment,
    platform: PlatformDefaults,
    lib_dir: str,
    modules: Sequence[NativeModule],
) -> DerivedFlags:
    """Derive all three flag sequences for the found modules."""
    return DerivedFlags(
        defines=tuple(derive_defines(modules)),
        includes=tuple(derive_includes(env, platform)),
        libraries=tuple(derive_link_args(platform, lib_dir, modules)),
    )


__all__ = [
    "DEFINE_PREFIX",
    "derive_defines",
    "derive_flags",
    "derive_includes",
    "derive_link_args",
]
