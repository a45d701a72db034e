"""OpenCV builder collaborator.

This module handles:
- Resolving where OpenCV lives (auto-build tree or system installation)
- Running the OpenCV install step when the library directory is missing
- Listing the OpenCV modules found in a library directory
"""

from cvbuild.opencv.builder import Builder, OpenCVBuilder, resolve_environment
from cvbuild.opencv.modules import OPENCV_MODULES, find_modules

__all__ = [
    "OPENCV_MODULES",
    "Builder",
    "OpenCVBuilder",
    "find_modules",
    "resolve_environment",
]
