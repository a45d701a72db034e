"""Shared fixtures for cvbuild tests."""

import pytest

# Variables read by Settings that must not leak in from the host.
_ENV_VARS = [
    "OPENCV_LIB_DIR",
    "OPENCV_INCLUDE_DIR",
    "OPENCV_BUILD_ROOT",
    "OPENCV4NODEJS_AUTOBUILD_OPENCV_VERSION",
    "OPENCV4NODEJS_DISABLE_AUTOBUILD",
    "BINDINGS_DEBUG",
    "CVBUILD_LOG_LEVEL",
    "CVBUILD_PROJECT_DIR",
    "CVBUILD_BUILD_COMMAND",
    "CVBUILD_INSTALL_COMMAND",
    "CVBUILD_HIDDEN_DESCRIPTOR",
    "CVBUILD_ACTIVE_DESCRIPTOR",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate tests from the host environment and any .env file."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def lib_dir(tmp_path):
    """Create a library directory holding core and imgproc."""
    path = tmp_path / "lib"
    path.mkdir()
    (path / "libopencv_core.so.4.6.0").touch()
    (path / "libopencv_imgproc.so").touch()
    return path
