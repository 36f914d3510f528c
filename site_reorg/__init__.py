"""
Site reorganization tools.

Moves the journal club static site from its legacy flat layout into a
hostable publish root, keeping every legacy URL alive through redirect stubs.
"""

from .version import __version__

__all__ = ["__version__"]
