"""Setting and reporting the composite pairing identity."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from ..errors import NotConfiguredError, StoreWriteFailedError, UnknownAliasError
from .codec import encode_email
from .identity import AUTHOR_EMAIL, AUTHOR_NAME, IdentityStore

logger = logging.getLogger(__name__)

NAME_SEPARATOR = " and "


@dataclass(frozen=True)
class CompositeIdentity:
    """Author name and email shared by a pairing group."""

    name: str
    email: str

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


def canonical_aliases(aliases: Iterable[str]) -> list[str]:
    """Return the aliases deduplicated and sorted, the order used for encoding."""
    return sorted(set(aliases))


def resolve_names(aliases: Sequence[str], directory: Mapping[str, str]) -> str:
    """Join the full names of ``aliases`` with " and ".

    For example ``["lb", "mb"]`` gives ``"Lindsay Bluth and Michael Bluth"``.

    Args:
        aliases: Aliases in the order their names should appear.
        directory: Alias to full name mapping.

    Returns:
        The joined names, or an empty string for no aliases.

    Raises:
        UnknownAliasError: For the first alias missing from ``directory``.
    """
    names = []
    for alias in aliases:
        if alias not in directory:
            raise UnknownAliasError(alias)
        names.append(directory[alias])
    return NAME_SEPARATOR.join(names)


class PairingSynchronizer:
    """Write the identity for a set of aliases and read back what is configured."""

    def __init__(self, store: IdentityStore):
        self.store = store

    def sync(
        self, directory: Mapping[str, str], template: str, aliases: Iterable[str]
    ) -> CompositeIdentity:
        """Configure the identity for ``aliases`` and return the stored identity.

        Aliases are sorted first so the same group always yields the same
        identity, whatever order it was typed in. Names and email are computed
        before anything is written, so an unknown alias never leaves a partial
        identity behind. With no aliases nothing is written and the current
        identity is reported.

        Args:
            directory: Alias to full name mapping.
            template: Template email address.
            aliases: Aliases of the collaborators.

        Returns:
            The identity read back from the store after writing.

        Raises:
            UnknownAliasError: If an alias is not in ``directory``.
            MalformedAddressError: If ``template`` is not a valid address.
            StoreWriteFailedError: If writing either key fails.
            StoreReadFailedError: If reading back fails.
            NotConfiguredError: If nothing is configured after the operation.
        """
        ordered = canonical_aliases(aliases)
        name = resolve_names(ordered, directory)
        email = encode_email(template, ordered)

        if ordered:
            logger.info(f"Pairing {', '.join(ordered)} as {name} <{email}>")
            self._write(AUTHOR_NAME, name)
            self._write(AUTHOR_EMAIL, email)
        else:
            logger.debug("No aliases given, reporting current identity only")

        return self.current()

    def current(self) -> CompositeIdentity:
        """Read the configured identity.

        Raises:
            NotConfiguredError: If either the name or the email is unset.
            StoreReadFailedError: If the store cannot be read.
        """
        name = self.store.get(AUTHOR_NAME)
        if name is None:
            raise NotConfiguredError("user.name", self.store.location)

        email = self.store.get(AUTHOR_EMAIL)
        if email is None:
            raise NotConfiguredError("user.email", self.store.location)

        return CompositeIdentity(name=name, email=email)

    def _write(self, key: str, value: str) -> None:
        try:
            self.store.set(key, value)
        except StoreWriteFailedError:
            raise
        except OSError as e:
            raise StoreWriteFailedError(f"unable to set {key}: {e}") from e
