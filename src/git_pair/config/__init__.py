"""Configuration for git-pair: environment settings, alias directory, team config."""

from .aliases import AliasDirectory, load_alias_directory
from .settings import Settings, SettingsLoader, default_email_template
from .team import Author, TeamConfig

__all__ = [
    "AliasDirectory",
    "Author",
    "Settings",
    "SettingsLoader",
    "TeamConfig",
    "default_email_template",
    "load_alias_directory",
]
