"""OpenCV builder: environment resolution, install step and module listing.

The orchestrator only depends on the ``Builder`` protocol, so tests and
other front ends can substitute their own builder.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from cvbuild.config import DEFAULT_OPENCV_VERSION
from cvbuild.errors import ConfigurationError, SubprocessError
from cvbuild.opencv.modules import find_modules
from cvbuild.paths import resolve_path
from cvbuild.types import BuildEnvironment, BuildOptions, NativeModule

if TYPE_CHECKING:
    from cvbuild.config import Settings
    from cvbuild.platform import PlatformDefaults

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+$")


class Builder(Protocol):
    """What the build orchestrator needs from an OpenCV builder."""

    env: BuildEnvironment

    def install(self) -> None:
        """Build and install OpenCV so that its library directory exists."""
        ...

    def list_modules(self, lib_dir: str) -> list[NativeModule]:
        """List all known modules, with library paths where found."""
        ...


def opencv_tree_name(version: str, cuda: bool = False, contrib: bool = True) -> str:
    """Return the directory name of an auto-built OpenCV tree.

    Args:
        version: OpenCV version.
        cuda: Whether the tree is built with CUDA.
        contrib: Whether the tree includes the contrib modules.

    Returns:
        Directory name such as 'opencv-4.6.0-cuda'.
    """
    name = f"opencv-{version}"
    if cuda:
        name += "-cuda"
    if not contrib:
        name += "-nocontrib"
    return name


def resolve_environment(
    options: BuildOptions,
    settings: Settings,
    platform: PlatformDefaults,
) -> BuildEnvironment:
    """Resolve where OpenCV is (or will be) for this build.

    Args:
        options: Command-line build options.
        settings: Application settings.
        platform: Platform variant.

    Returns:
        BuildEnvironment for the build.

    Raises:
        ConfigurationError: If the OpenCV version or build root is invalid.
    """
    auto_build_disabled = options.no_build or settings.autobuild_disabled
    version = options.version or settings.opencv_version or DEFAULT_OPENCV_VERSION
    version = version.strip()
    explicit_lib_dir = resolve_path(settings.opencv_lib_dir)
    explicit_include_dir = resolve_path(settings.opencv_include_dir)

    if auto_build_disabled:
        return BuildEnvironment(
            auto_build_disabled=True,
            opencv_version=version,
            explicit_lib_dir=explicit_lib_dir,
            explicit_include_dir=explicit_include_dir,
        )

    if not VERSION_PATTERN.match(version):
        raise ConfigurationError(
            f"invalid OpenCV version '{version}', expected MAJOR.MINOR.PATCH"
        )

    build_root = resolve_path(settings.opencv_build_root)
    if build_root is None:
        raise ConfigurationError("failed to resolve OPENCV_BUILD_ROOT path")

    contrib = not options.no_contrib
    tree = opencv_tree_name(version, options.cuda, contrib)
    build_dir = Path(build_root) / tree / "build"
    lib_dir = build_dir / "lib"
    if platform.is_windows:
        lib_dir = lib_dir / "Release"
    include_dir = build_dir / "include"

    return BuildEnvironment(
        auto_build_disabled=False,
        opencv_version=version,
        build_root=build_root,
        lib_dir=str(lib_dir),
        include_dir=str(include_dir),
        include_dir_opencv4=str(include_dir / "opencv4"),
        explicit_lib_dir=explicit_lib_dir,
        explicit_include_dir=explicit_include_dir,
        build_cuda=options.cuda,
        build_contrib=contrib,
        build_flags=options.flags,
    )


class OpenCVBuilder:
    """Default builder backed by the local filesystem and an install command.

    Attributes:
        env: Resolved build environment.
        settings: Application settings.
        platform: Platform variant.
    """

    def __init__(
        self,
        options: BuildOptions,
        settings: Settings,
        platform: PlatformDefaults,
    ) -> None:
        self.settings = settings
        self.platform = platform
        self.env = resolve_environment(options, settings, platform)

    def install_env(self) -> dict[str, str]:
        """Return the variables describing the requested OpenCV build."""
        extra = {
            "OPENCV_BUILD_ROOT": self.env.build_root or "",
            "OPENCV4NODEJS_AUTOBUILD_OPENCV_VERSION": self.env.opencv_version,
        }
        if self.env.build_cuda:
            extra["OPENCV4NODEJS_BUILD_CUDA"] = "1"
        if not self.env.build_contrib:
            extra["OPENCV4NODEJS_AUTOBUILD_WITHOUT_CONTRIB"] = "1"
        if self.env.build_flags:
            extra["OPENCV4NODEJS_AUTOBUILD_FLAGS"] = self.env.build_flags
        return extra

    def install(self) -> None:
        """Run the configured install command for the requested OpenCV build.

        Raises:
            SubprocessError: If the install command fails or cannot start.
        """
        if self.env.auto_build_disabled:
            logger.info("Auto build is disabled, skipping OpenCV install")
            return
        if not self.settings.install_command:
            logger.warning(
                "No install command configured (CVBUILD_INSTALL_COMMAND), "
                "cannot build OpenCV %s",
                self.env.opencv_version,
            )
            return

        cmd = self.platform.resolve_command(
            shlex.split(self.settings.install_command)
        )
        build_root = Path(self.env.build_root or self.settings.opencv_build_root)
        build_root.mkdir(parents=True, exist_ok=True)
        env = dict(os.environ)
        env.update(self.install_env())

        logger.info(
            "Installing OpenCV %s: %s", self.env.opencv_version, shlex.join(cmd)
        )
        try:
            result = subprocess.run(cmd, cwd=build_root, env=env, check=False)
        except OSError as e:
            raise SubprocessError(
                f"Failed to run install command: {e}",
                name=type(e).__name__,
            ) from e
        if result.returncode != 0:
            raise SubprocessError(
                f"Install command failed with exit code {result.returncode}",
                exit_code=result.returncode,
            )

    def list_modules(self, lib_dir: str) -> list[NativeModule]:
        """List all known OpenCV modules with their library files in lib_dir."""
        return find_modules(lib_dir, self.platform)


__all__ = [
    "Builder",
    "OpenCVBuilder",
    "VERSION_PATTERN",
    "opencv_tree_name",
    "resolve_environment",
]
