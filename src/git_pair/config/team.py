"""Per-repository team configuration.

A small YAML file, ``.pair.yml`` by default, kept at the repository root::

    vcs: git
    primary_branch: main
    author:
      name: Michael Bluth
      alias: mb
      email: mb@example.com
    teammates:
      - name: Lindsay Bluth
        alias: lb
      - name: George Bluth
        alias: gb

Unknown keys are ignored and an empty file is an empty configuration.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import TeamConfigError

logger = logging.getLogger(__name__)

DEFAULT_TEAM_CONFIG_NAME = ".pair.yml"
SUPPORTED_VCS = ("git",)


@dataclass
class Author:
    """A project collaborator."""

    name: str = ""
    alias: str = ""
    email: str = ""

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "Author":
        if not isinstance(data, dict):
            raise TeamConfigError(f"{where} must be a mapping with name, alias and email")
        return cls(
            name=str(data.get("name") or ""),
            alias=str(data.get("alias") or ""),
            email=str(data.get("email") or ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {key: value for key, value in vars(self).items() if value}

    def sort_key(self) -> str:
        return self.name + self.alias


@dataclass
class TeamConfig:
    """Pairing configuration for one repository."""

    path: Path
    vcs: str = ""
    author: Optional[Author] = None
    teammates: list[Author] = field(default_factory=list)
    primary_branch: str = ""

    @classmethod
    def load(cls, path: Path) -> "TeamConfig":
        """Load a team configuration from ``path``.

        Raises:
            TeamConfigError: If the file cannot be read or has the wrong shape.
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                # Keep "alias: no" a string
                data = yaml.load(f, Loader=yaml.BaseLoader)
        except yaml.YAMLError as e:
            raise TeamConfigError(f"invalid YAML in team config {path}: {e}") from e
        except OSError as e:
            raise TeamConfigError(f"unable to read team config {path}: {e}") from e

        if data is None:
            return cls(path=path)
        if not isinstance(data, dict):
            raise TeamConfigError(
                f"team config must contain a YAML mapping, got {type(data).__name__}: {path}"
            )

        author_data = data.get("author")
        teammates_data = data.get("teammates") or []
        if not isinstance(teammates_data, list):
            raise TeamConfigError(f"'teammates' must be a list: {path}")

        return cls(
            path=path,
            vcs=str(data.get("vcs") or ""),
            author=Author.from_dict(author_data, "'author'") if author_data else None,
            teammates=[
                Author.from_dict(entry, f"teammate {i + 1}")
                for i, entry in enumerate(teammates_data)
            ],
            primary_branch=str(data.get("primary_branch") or ""),
        )

    def reload(self) -> None:
        """Re-read the configuration from :attr:`path`."""
        updated = self.load(self.path)
        self.vcs = updated.vcs
        self.author = updated.author
        self.teammates = updated.teammates
        self.primary_branch = updated.primary_branch

    def save(self) -> None:
        """Write the configuration to :attr:`path`."""
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            raise TeamConfigError(f"unable to write team config {self.path}: {e}") from e
        logger.debug(f"Saved team config to {self.path}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.vcs:
            data["vcs"] = self.vcs
        if self.primary_branch:
            data["primary_branch"] = self.primary_branch
        if self.author:
            data["author"] = self.author.to_dict()
        if self.teammates:
            data["teammates"] = [mate.to_dict() for mate in self.teammates]
        return data

    def validate(self) -> None:
        """Check that the configuration can be used.

        Raises:
            TeamConfigError: Naming the first problem found.
        """
        if not self.vcs:
            raise TeamConfigError("vcs can't be empty")
        if self.vcs not in SUPPORTED_VCS:
            raise TeamConfigError(f"unsupported vcs: {self.vcs}")
        if self.author is None:
            raise TeamConfigError("author can't be empty")
        if not self.author.email:
            raise TeamConfigError("author.email is required")

    def aliases(self) -> dict[str, str]:
        """Alias to name mapping of the author and teammates that have both set."""
        people = ([self.author] if self.author else []) + self.teammates
        return {person.alias: person.name for person in people if person.alias and person.name}

    def __eq__(self, other: object) -> bool:
        # Teammate order is not significant
        if not isinstance(other, TeamConfig):
            return NotImplemented
        return (
            self.path == other.path
            and self.vcs == other.vcs
            and self.author == other.author
            and self.primary_branch == other.primary_branch
            and sorted(self.teammates, key=Author.sort_key)
            == sorted(other.teammates, key=Author.sort_key)
        )
