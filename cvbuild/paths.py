"""Path normalization for values coming from the environment or config."""

import os


def resolve_path(path_like: str | os.PathLike[str] | None) -> str | None:
    """Normalize a path string to an absolute path.

    The path does not have to exist.

    Args:
        path_like: Path from an environment variable, setting or builder.

    Returns:
        Normalized absolute path, or None if the input is absent or blank.
    """
    if path_like is None:
        return None
    raw = os.fspath(path_like).strip()
    if not raw:
        return None
    return os.path.abspath(os.path.expanduser(raw))


__all__ = ["resolve_path"]
