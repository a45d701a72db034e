"""Shared type definitions for cvbuild.

This module contains the dataclasses shared across subpackages to avoid
circular imports.
"""

from dataclasses import dataclass, field

# Variables handed to the native build tool
DEFINES_VAR = "OPENCV4NODEJS_DEFINES"
INCLUDES_VAR = "OPENCV4NODEJS_INCLUDES"
LIBRARIES_VAR = "OPENCV4NODEJS_LIBRARIES"

FLAG_DELIMITER = ";"


@dataclass(frozen=True)
class BuildOptions:
    """Options for one build invocation, as given on the command line.

    Attributes:
        version: OpenCV version to auto-build.
        flags: Raw extra flags for the OpenCV auto-build.
        cuda: Build OpenCV with CUDA support.
        no_contrib: Build OpenCV without the contrib modules.
        no_build: Disable auto-build and use a system installation.
        jobs: Parallel jobs for the native build tool ("max" or a count).
        dry_run: Print the build configuration instead of building.
        help: Usage was requested. The Typer CLI answers -h/--help itself
            before any options are built, so it never sets this.
    """

    version: str | None = None
    flags: str | None = None
    cuda: bool = False
    no_contrib: bool = False
    no_build: bool = False
    jobs: str | int = "max"
    dry_run: bool = False
    help: bool = False


@dataclass(frozen=True)
class BuildEnvironment:
    """Resolved OpenCV location for a build.

    When auto-build is disabled only the explicit directories matter; when it
    is enabled the builder-computed directories are used.
    """

    auto_build_disabled: bool
    opencv_version: str
    build_root: str | None = None
    lib_dir: str | None = None
    include_dir: str | None = None
    include_dir_opencv4: str | None = None
    explicit_lib_dir: str | None = None
    explicit_include_dir: str | None = None
    build_cuda: bool = False
    build_contrib: bool = True
    build_flags: str | None = None


@dataclass(frozen=True)
class NativeModule:
    """One OpenCV module and the library file found for it, if any."""

    name: str
    library_path: str | None = None


@dataclass(frozen=True)
class DerivedFlags:
    """Compiler defines, include paths and link arguments for the extension."""

    defines: tuple[str, ...] = ()
    includes: tuple[str, ...] = ()
    libraries: tuple[str, ...] = ()

    def as_env(self) -> dict[str, str]:
        """Return the flags as delimiter-joined environment variables."""
        return {
            DEFINES_VAR: FLAG_DELIMITER.join(self.defines),
            INCLUDES_VAR: FLAG_DELIMITER.join(self.includes),
            LIBRARIES_VAR: FLAG_DELIMITER.join(self.libraries),
        }

    def export_lines(self) -> list[str]:
        """Return shell ``export`` lines for the flag variables."""
        return [f'export {name}="{value}"' for name, value in self.as_env().items()]


@dataclass
class BuildOutcome:
    """Result of a build orchestration run.

    Attributes:
        command: The native build command (as argv).
        cwd: Directory the build tool runs (or would run) in.
        flags: Derived flags handed to the build tool.
        dry_run: True if the build tool was not spawned.
        exit_code: Build tool exit code (None for dry runs).
        descriptor: Path of the staged build descriptor, if one was staged.
        modules: OpenCV modules found in the library directory.
    """

    command: list[str]
    cwd: str
    flags: DerivedFlags
    dry_run: bool = False
    exit_code: int | None = None
    descriptor: str | None = None
    modules: list[NativeModule] = field(default_factory=list)


__all__ = [
    "DEFINES_VAR",
    "FLAG_DELIMITER",
    "INCLUDES_VAR",
    "LIBRARIES_VAR",
    "BuildEnvironment",
    "BuildOptions",
    "BuildOutcome",
    "DerivedFlags",
    "NativeModule",
]
