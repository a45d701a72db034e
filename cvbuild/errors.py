"""Error definitions for cvbuild.

Every error carries a stable ``code`` so callers (the CLI, outer build
pipelines) can tell the failure kinds apart without parsing messages.
"""

# Error code constants
CONFIGURATION_ERROR = "configuration_error"
MISSING_DIRECTORY = "missing_directory"
NO_LIBRARIES_FOUND = "no_libraries_found"
SUBPROCESS_ERROR = "subprocess_error"


class CvBuildError(Exception):
    """Base class for all fatal cvbuild errors."""

    def __init__(self, message: str, code: str = "cvbuild_error") -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(CvBuildError):
    """Raised when a required path or value cannot be resolved."""

    def __init__(self, message: str, code: str = CONFIGURATION_ERROR) -> None:
        super().__init__(message, code)


class MissingDirectoryError(CvBuildError):
    """Raised when the library directory is absent even after install."""

    def __init__(self, path: str, code: str = MISSING_DIRECTORY) -> None:
        """Initialize MissingDirectoryError.

        Args:
            path: The library directory that does not exist.
            code: Error code for structured error handling.
        """
        super().__init__(f"library dir does not exist: {path}", code)
        self.path = path


class NoLibrariesFoundError(CvBuildError):
    """Raised when no OpenCV library is found in the library directory."""

    def __init__(self, lib_dir: str, code: str = NO_LIBRARIES_FOUND) -> None:
        """Initialize NoLibrariesFoundError.

        Args:
            lib_dir: The library directory that was searched.
            code: Error code for structured error handling.
        """
        super().__init__(f"no OpenCV libraries found in lib dir: {lib_dir}", code)
        self.lib_dir = lib_dir


class SubprocessError(CvBuildError):
    """Raised when a child process fails or cannot be spawned."""

    def __init__(
        self,
        message: str,
        exit_code: int | None = None,
        name: str = "SubprocessError",
        code: str = SUBPROCESS_ERROR,
    ) -> None:
        """Initialize SubprocessError.

        Args:
            message: Human-readable description of the failure.
            exit_code: Child exit code, None if it never started.
            name: Short name of the failure (e.g. the OS error class).
            code: Error code for structured error handling.
        """
        super().__init__(message, code)
        self.exit_code = exit_code
        self.name = name


__all__ = [
    "CONFIGURATION_ERROR",
    "MISSING_DIRECTORY",
    "NO_LIBRARIES_FOUND",
    "SUBPROCESS_ERROR",
    "ConfigurationError",
    "CvBuildError",
    "MissingDirectoryError",
    "NoLibrariesFoundError",
    "SubprocessError",
]
