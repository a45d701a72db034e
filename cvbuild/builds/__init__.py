"""Build orchestration module.

This module handles:
- Locating the OpenCV library directory
- Enumerating the OpenCV libraries found there
- Deriving defines, includes and link arguments
- Staging the build descriptor and running the native build tool
"""

from cvbuild.builds.service import compile_lib

__all__ = ["compile_lib"]
