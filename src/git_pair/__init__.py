"""git-pair - record commits authored by a group of collaborators."""

from ._version import __version__

__all__ = ["__version__"]
