"""Build runner for executing the native build tool.

This module handles:
- Composing the build tool command line
- Staging the build descriptor under the name the build tool reads
- Executing the build with the derived flags in its environment
- Removing the staged descriptor once the build is over
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from cvbuild.errors import SubprocessError

if TYPE_CHECKING:
    from cvbuild.types import DerivedFlags

logger = logging.getLogger(__name__)


def compose_build_command(
    build_command: str,
    jobs: str | int = "max",
    debug: bool = False,
) -> list[str]:
    """Compose the native build tool command.

    Args:
        build_command: Base command, e.g. 'node-gyp rebuild'.
        jobs: Parallel jobs ("max" or a count).
        debug: Add the debug build flag.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    cmd = shlex.split(build_command)
    if debug:
        cmd.append("--debug")
    cmd.extend(["--jobs", str(jobs)])
    return cmd


def stage_descriptor(
    project_dir: Path,
    hidden_name: str = "_binding.gyp",
    active_name: str = "binding.gyp",
) -> Path | None:
    """Copy the hidden build descriptor to its active name.

    Args:
        project_dir: Directory of the native extension project.
        hidden_name: File name of the hidden descriptor.
        active_name: File name the build tool reads.

    Returns:
        Path of the active descriptor, or None if there is no hidden one.
    """
    hidden = project_dir / hidden_name
    if not hidden.is_file():
        logger.debug("No hidden descriptor at %s", hidden)
        return None
    active = project_dir / active_name
    shutil.copyfile(hidden, active)
    logger.debug("Staged %s -> %s", hidden, active)
    return active


def remove_descriptor(path: Path) -> None:
    """Remove the active build descriptor.

    Failures are logged, not raised.
    """
    try:
        path.unlink()
        logger.debug("Removed %s", path)
    except OSError as e:
        logger.warning("Failed to remove build descriptor %s: %s", path, e)


@contextmanager
def staged_descriptor(
    project_dir: Path,
    hidden_name: str = "_binding.gyp",
    active_name: str = "binding.gyp",
) -> Iterator[Path | None]:
    """Stage the build descriptor for the duration of a build.

    A staged descriptor is removed on every exit path, including
    interruption. An active descriptor the project ships itself is left
    alone.

    Yields:
        Path of the staged descriptor, or None if nothing was staged.
    """
    staged = stage_descriptor(project_dir, hidden_name, active_name)
    try:
        yield staged
    finally:
        # Only a descriptor we copied is ours to remove.
        if staged is not None:
            remove_descriptor(staged)


def build_env(flags: DerivedFlags) -> dict[str, str]:
    """Return the build tool environment: ours plus the derived flags."""
    env = dict(os.environ)
    env.update(flags.as_env())
    return env


def run_build_tool(cmd: list[str], cwd: Path, flags: DerivedFlags) -> int:
    """Execute the native build tool.

    The child inherits stdout and stderr, so its output is streamed as it
    is produced.

    Args:
        cmd: Build tool command.
        cwd: Project directory.
        flags: Derived flags exported to the child.

    Returns:
        The build tool exit code (always 0; failures raise).

    Raises:
        SubprocessError: If the build tool fails or cannot be started.
    """
    cmd_str = shlex.join(cmd)
    logger.info("Spawning in %s: %s", cwd, cmd_str)

    try:
        result = subprocess.run(cmd, cwd=cwd, env=build_env(flags), check=False)
    except OSError as e:
        logger.error("Failed to execute build: %s", e)
        raise SubprocessError(
            f"Failed to execute {cmd_str}: {e}",
            name=type(e).__name__,
        ) from e

    if result.returncode != 0:
        message = f"Build failed with exit code {result.returncode}"
        logger.error("%s: %s", message, cmd_str)
        raise SubprocessError(
            message,
            exit_code=result.returncode,
            name="BuildError",
        )

    logger.info("Build completed with no error")
    return result.returncode


__all__ = [
    "build_env",
    "compose_build_command",
    "remove_descriptor",
    "run_build_tool",
    "stage_descriptor",
    "staged_descriptor",
]
