"""Version information for git-pair."""

__version__ = "0.1.0"
