"""cvbuild - Native build configuration for OpenCV bindings.

This package resolves OpenCV include/library locations, derives the
compiler defines, include paths and link arguments for the native
extension, and drives the external native build tool with them.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
