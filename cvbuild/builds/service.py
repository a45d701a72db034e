"""Build service: the end-to-end OpenCV bindings build.

compile_lib() resolves where OpenCV is, makes sure it is installed,
derives the build flags from the libraries found, and runs the native
build tool with them (or only reports what it would run, in dry-run mode).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cvbuild.builds.flags import derive_flags
from cvbuild.builds.libraries import ensure_lib_dir, enumerate_modules, locate_lib_dir
from cvbuild.builds.runner import (
    compose_build_command,
    run_build_tool,
    stage_descriptor,
    staged_descriptor,
)
from cvbuild.config import get_settings
from cvbuild.opencv.builder import OpenCVBuilder
from cvbuild.platform import get_platform_defaults
from cvbuild.types import BuildOutcome

if TYPE_CHECKING:
    from cvbuild.config import Settings
    from cvbuild.opencv.builder import Builder
    from cvbuild.platform import PlatformDefaults
    from cvbuild.types import BuildOptions

logger = logging.getLogger(__name__)


def compile_lib(
    options: BuildOptions,
    settings: Settings | None = None,
    builder: Builder | None = None,
    platform: PlatformDefaults | None = None,
) -> BuildOutcome:
    """Build the native OpenCV bindings.

    Args:
        options: Command-line build options.
        settings: Application settings; loaded from the environment if None.
        builder: OpenCV builder; an OpenCVBuilder if None.
        platform: Platform variant; the running platform if None.

    Returns:
        BuildOutcome describing the build (or the dry run).

    Raises:
        ConfigurationError: If a required path or value cannot be resolved.
        MissingDirectoryError: If the library dir is missing after install.
        NoLibrariesFoundError: If no OpenCV library is found.
        SubprocessError: If the build tool fails.
    """
    if settings is None:
        settings = get_settings()
    if platform is None:
        platform = get_platform_defaults()
    if builder is None:
        builder = OpenCVBuilder(options, settings, platform)

    env = builder.env
    if env.build_flags:
        logger.info("Using auto build flags: %s", env.build_flags)
    logger.info("Using OpenCV %s", env.opencv_version)

    lib_dir = locate_lib_dir(env, platform)
    logger.info("Using lib dir: %s", lib_dir)
    ensure_lib_dir(builder, lib_dir)

    modules = enumerate_modules(builder, lib_dir)
    flags = derive_flags(env, platform, lib_dir, modules)

    cmd = compose_build_command(
        settings.build_command,
        jobs=options.jobs,
        debug=settings.debug_build,
    )
    project_dir = settings.project_dir

    if options.dry_run:
        staged = stage_descriptor(
            project_dir, settings.hidden_descriptor, settings.active_descriptor
        )
        return BuildOutcome(
            command=cmd,
            cwd=str(project_dir),
            flags=flags,
            dry_run=True,
            descriptor=str(staged) if staged else None,
            modules=modules,
        )

    with staged_descriptor(
        project_dir, settings.hidden_descriptor, settings.active_descriptor
    ) as staged:
        exit_code = run_build_tool(
            platform.resolve_command(cmd), project_dir, flags
        )

    return BuildOutcome(
        command=cmd,
        cwd=str(project_dir),
        flags=flags,
        exit_code=exit_code,
        descriptor=str(staged) if staged else None,
        modules=modules,
    )


__all__ = ["compile_lib"]
