"""Alias directory: short usernames mapped to full names.

The directory is a YAML mapping, ``~/.pairs`` by default::

    ---
    lb: Lindsay Bluth
    mb: Michael Bluth
"""

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import IO, Optional, Union

import yaml

from ..errors import AliasDirectoryError
from .team import TeamConfig

logger = logging.getLogger(__name__)


class AliasDirectory(Mapping[str, str]):
    """Read-only alias to full name mapping for one invocation."""

    def __init__(self, entries: Optional[Mapping[str, str]] = None, source: Optional[Path] = None):
        self._entries = dict(entries or {})
        self.source = source

    def __getitem__(self, alias: str) -> str:
        return self._entries[alias]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"AliasDirectory({self._entries!r}, source={self.source!r})"

    @classmethod
    def parse(cls, stream: Union[str, IO[str]], source: Optional[Path] = None) -> "AliasDirectory":
        """Parse YAML alias entries from a string or text stream.

        Raises:
            AliasDirectoryError: If the content is not a mapping of strings.
        """
        where = f" in {source}" if source else ""
        try:
            # Scalars stay strings: "no" and "007" are valid usernames
            data = yaml.load(stream, Loader=yaml.BaseLoader)
        except yaml.YAMLError as e:
            raise AliasDirectoryError(f"invalid YAML{where}: {e}") from e

        if data is None:
            return cls(source=source)
        if not isinstance(data, dict):
            raise AliasDirectoryError(
                f"expected a mapping of usernames to names{where}, got {type(data).__name__}"
            )

        entries = {}
        for alias, name in data.items():
            if not isinstance(name, str) or not name:
                raise AliasDirectoryError(
                    f"name for {alias!r} must be a non-empty string{where}"
                )
            entries[str(alias)] = name
        return cls(entries, source=source)

    @classmethod
    def load(cls, path: Path) -> "AliasDirectory":
        """Load the alias directory file at ``path``.

        Raises:
            AliasDirectoryError: If the file is missing, unreadable or malformed.
        """
        try:
            with open(path, encoding="utf-8") as f:
                directory = cls.parse(f, source=path)
        except OSError as e:
            raise AliasDirectoryError(f"unable to read authors from file ({path}): {e}") from e

        logger.debug(f"Loaded {len(directory)} aliases from {path}")
        return directory

    def merged_with(self, other: Mapping[str, str]) -> "AliasDirectory":
        """Return a new directory where entries of ``other`` take precedence."""
        return AliasDirectory({**self._entries, **other}, source=self.source)


def load_alias_directory(path: Path, team: Optional[TeamConfig] = None) -> AliasDirectory:
    """Load the alias directory, overlaid with the team configuration's people.

    The file may be missing when the team configuration names at least one
    teammate or author with an alias.

    Raises:
        AliasDirectoryError: If the file is missing with nothing to fall back
            on, or if it is malformed.
    """
    team_aliases = team.aliases() if team else {}

    if not path.exists() and team_aliases:
        logger.debug(f"{path} not found, using aliases from {team.path}")
        return AliasDirectory(team_aliases, source=team.path)

    return AliasDirectory.load(path).merged_with(team_aliases)
