"""Switching to branches scoped to the active pairing group.

The branch prefix comes from the configured email, e.g. with the template
``git@example.com`` and the stored email ``git+lb+mb@example.com`` the topic
``ONCALL-843`` becomes the branch ``lb+mb/ONCALL-843``.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

import git
from git import Repo
from git.exc import InvalidGitRepositoryError, NoSuchPathError

from ..errors import NotConfiguredError, VcsOperationFailedError
from .codec import decode_alias_prefix
from .identity import AUTHOR_EMAIL, IdentityStore

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_BRANCH = "master"
PRIMARY_BRANCH_CANDIDATES = ["main", "master", "develop", "trunk"]


class SwitchState(Enum):
    """Steps of a single branch switch."""

    IDLE = "idle"
    IDENTITY_READ = "identity_read"
    ADDRESS_DECODED = "address_decoded"
    BRANCH_RESOLVED = "branch_resolved"
    CHECKOUT = "checkout"
    CREATE_AND_CHECKOUT = "create_and_checkout"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class BranchDescriptor:
    """A branch name split into the pairing prefix and the user's topic."""

    prefix: str
    topic: str

    @property
    def full_name(self) -> str:
        return f"{self.prefix}/{self.topic}"


@dataclass(frozen=True)
class BranchSwitch:
    """Outcome of a branch switch."""

    branch: str
    created: bool
    base: Optional[str] = None

    def describe(self) -> str:
        if self.created:
            return f"Switched to a new branch '{self.branch}'"
        return f"Switched to branch '{self.branch}'"


class BranchOperations(ABC):
    """Branch commands of a version control system."""

    @abstractmethod
    def branch_exists(self, name: str) -> bool:
        """Return True if ``name`` resolves to an existing branch."""

    @abstractmethod
    def checkout(self, name: str) -> None:
        """Switch to the existing branch ``name``."""

    @abstractmethod
    def create_and_checkout(self, name: str, from_ref: str) -> None:
        """Create ``name`` at ``from_ref`` and switch to it."""

    def detect_primary_branch(self) -> Optional[str]:
        """Guess the primary branch, or None if it cannot be determined."""
        return None


class GitBranchOperations(BranchOperations):
    """Branch operations on a git working tree through GitPython."""

    def __init__(self, repo: Repo):
        self.repo = repo

    @classmethod
    def discover(cls, path: Union[str, Path] = ".") -> "GitBranchOperations":
        """Open the repository containing ``path``.

        Raises:
            VcsOperationFailedError: If ``path`` is not inside a git repository.
        """
        try:
            return cls(Repo(path, search_parent_directories=True))
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise VcsOperationFailedError(f"not a git repository: {e}") from e

    def branch_exists(self, name: str) -> bool:
        try:
            self.repo.git.rev_parse("--verify", "--quiet", name)
        except git.GitCommandError:
            return False
        return True

    def checkout(self, name: str) -> None:
        self._checkout(name, name)

    def create_and_checkout(self, name: str, from_ref: str) -> None:
        self._checkout(name, "-b", name, from_ref)

    def detect_primary_branch(self) -> Optional[str]:
        head_names = {head.name for head in self.repo.heads}
        for candidate in PRIMARY_BRANCH_CANDIDATES:
            if candidate in head_names:
                return candidate
        return None

    def _checkout(self, branch: str, *args: str) -> None:
        try:
            self.repo.git.checkout(*args)
        except git.GitCommandError as e:
            detail = (e.stderr or "").strip() or str(e)
            raise VcsOperationFailedError(
                f"unable to check out git branch: {branch}\n{detail}"
            ) from e


class BranchNameDeriver:
    """Derive the pairing branch name and switch to it."""

    def __init__(
        self,
        store: IdentityStore,
        operations: BranchOperations,
        primary_branch: Optional[str] = None,
    ):
        self.store = store
        self.operations = operations
        self.primary_branch = primary_branch
        self.state = SwitchState.IDLE

    def derive(self, template: str, topic: str) -> BranchDescriptor:
        """Build the branch name for ``topic`` from the configured email.

        Raises:
            NotConfiguredError: If no author email is configured.
            MalformedAddressError: If the template or the stored email is malformed.
        """
        email = self.store.get(AUTHOR_EMAIL)
        if email is None:
            raise NotConfiguredError("user.email", self.store.location)
        self._advance(SwitchState.IDENTITY_READ)

        prefix = decode_alias_prefix(template, email)
        self._advance(SwitchState.ADDRESS_DECODED)

        return BranchDescriptor(prefix=prefix, topic=topic)

    def derive_and_switch(self, template: str, topic: str) -> BranchSwitch:
        """Switch to the pairing branch for ``topic``, creating it if needed.

        A new branch starts from the primary branch.

        Raises:
            NotConfiguredError: If no author email is configured.
            MalformedAddressError: If the template or the stored email is malformed.
            VcsOperationFailedError: If git fails to check out or create the branch.
        """
        self.state = SwitchState.IDLE
        try:
            branch = self.derive(template, topic).full_name
            exists = self.operations.branch_exists(branch)
            self._advance(SwitchState.BRANCH_RESOLVED)

            if exists:
                self._advance(SwitchState.CHECKOUT)
                self.operations.checkout(branch)
                result = BranchSwitch(branch=branch, created=False)
            else:
                base = self.resolve_primary_branch()
                self._advance(SwitchState.CREATE_AND_CHECKOUT)
                self.operations.create_and_checkout(branch, base)
                result = BranchSwitch(branch=branch, created=True, base=base)
        except Exception:
            self._advance(SwitchState.FAILED)
            raise

        self._advance(SwitchState.DONE)
        return result

    def resolve_primary_branch(self) -> str:
        """Return the configured primary branch, else the detected one, else "master"."""
        if self.primary_branch:
            return self.primary_branch
        return self.operations.detect_primary_branch() or DEFAULT_PRIMARY_BRANCH

    def _advance(self, state: SwitchState) -> None:
        logger.debug(f"Branch switch: {self.state.value} -> {state.value}")
        self.state = state
