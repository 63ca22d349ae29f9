"""Identity store: get/set of the author name and email.

The store is a plain key-value interface over two logical keys,
``author.name`` and ``author.email``. The git implementation keeps them as
``user.name`` / ``user.email`` in a single git config file, which is meant to
be included from the user's main ``~/.gitconfig``::

    [include]
        path = ~/.gitconfig_local

The two keys are written by two independent calls. A failure between them
leaves the name updated and the email untouched; that is reported, not rolled
back.
"""

import configparser
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from git import GitConfigParser

from ..errors import StoreReadFailedError, StoreWriteFailedError

logger = logging.getLogger(__name__)

AUTHOR_NAME = "author.name"
AUTHOR_EMAIL = "author.email"

# Logical key -> (section, option) in a git config file
GIT_CONFIG_KEYS = {
    AUTHOR_NAME: ("user", "name"),
    AUTHOR_EMAIL: ("user", "email"),
}


class IdentityStore(ABC):
    """Persistent key-value store holding the active author identity."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None when it is not set.

        Raises:
            StoreReadFailedError: If the backing store cannot be read.
        """

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``.

        Raises:
            StoreWriteFailedError: If the backing store cannot be written.
        """

    @property
    def location(self) -> Optional[Path]:
        """Where the store lives, for error messages. None if not file backed."""
        return None


class MemoryIdentityStore(IdentityStore):
    """Identity store kept in a dictionary."""

    def __init__(self, values: Optional[dict[str, str]] = None):
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        _check_key(key)
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        _check_key(key)
        self.values[key] = value


class GitConfigIdentityStore(IdentityStore):
    """Identity store backed by a git config file, read and written with GitPython."""

    def __init__(self, config_file: Union[str, Path]):
        self.config_file = Path(config_file).expanduser()

    @property
    def location(self) -> Path:
        return self.config_file

    def get(self, key: str) -> Optional[str]:
        section, option = _check_key(key)
        try:
            with GitConfigParser(str(self.config_file), read_only=True) as reader:
                if not reader.has_option(section, option):
                    logger.debug(f"{section}.{option} not set in {self.config_file}")
                    return None
                return reader.get(section, option)
        except (OSError, configparser.Error) as e:
            raise StoreReadFailedError(
                f"unable to read {section}.{option} from {self.config_file}: {e}"
            ) from e

    def set(self, key: str, value: str) -> None:
        section, option = _check_key(key)
        logger.debug(f"Setting {section}.{option}={value!r} in {self.config_file}")
        try:
            with GitConfigParser(str(self.config_file), read_only=False) as writer:
                writer.set_value(section, option, value)
        except (OSError, configparser.Error) as e:
            raise StoreWriteFailedError(
                f"unable to set {section}.{option} in {self.config_file}: {e}"
            ) from e


def _check_key(key: str) -> tuple[str, str]:
    try:
        return GIT_CONFIG_KEYS[key]
    except KeyError:
        raise KeyError(f"unsupported identity key: {key}") from None
