"""Exception hierarchy for git-pair.

Every error the tool reports derives from :class:`PairError`. Components raise
these; only the CLI turns them into an ``error: ...`` line and exit status 1.
"""

from pathlib import Path
from typing import Optional


class PairError(Exception):
    """Base class for all errors reported by git-pair."""


class MalformedAddressError(PairError, ValueError):
    """An email address does not contain exactly one "@"."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"invalid email address: {address}")


class UnknownAliasError(PairError, KeyError):
    """An alias has no entry in the alias directory."""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(alias)

    def __str__(self) -> str:
        return f"no such username: {self.alias}"


class NotConfiguredError(PairError):
    """The identity store has no value for a required key."""

    def __init__(self, key: str, source: Optional[Path] = None):
        self.key = key
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(f"{key} is not set{where}")


class StoreReadFailedError(PairError):
    """The identity store could not be read."""


class StoreWriteFailedError(PairError):
    """The identity store could not be written."""


class VcsOperationFailedError(PairError):
    """A branch lookup, checkout or creation failed."""


class AliasDirectoryError(PairError):
    """The alias directory file is missing or malformed."""


class TeamConfigError(PairError):
    """The per-repository team configuration is unreadable or invalid."""


class EmailTemplateError(PairError):
    """No email template could be determined."""
