"""Tests for name resolution and the pairing synchronizer."""

from unittest.mock import Mock

import pytest

from git_pair.core.identity import AUTHOR_EMAIL, AUTHOR_NAME, MemoryIdentityStore
from git_pair.core.pairing import (
    CompositeIdentity,
    PairingSynchronizer,
    canonical_aliases,
    resolve_names,
)
from git_pair.errors import (
    MalformedAddressError,
    NotConfiguredError,
    StoreWriteFailedError,
    UnknownAliasError,
)

BLUTHS = {"lb": "Lindsay Bluth", "mb": "Michael Bluth", "gob": "George Oscar Bluth"}


class TestResolveNames:
    """Tests for resolve_names."""

    def test_no_aliases(self):
        assert resolve_names([], {}) == ""

    def test_single_alias(self):
        assert resolve_names(["mb"], {"mb": "Michael Bluth"}) == "Michael Bluth"

    def test_two_aliases(self):
        directory = {"lb": "Lindsay Bluth", "mb": "Michael Bluth"}
        assert resolve_names(["lb", "mb"], directory) == "Lindsay Bluth and Michael Bluth"

    def test_unknown_alias(self):
        with pytest.raises(UnknownAliasError) as exc_info:
            resolve_names(["lb"], {"mb": "Michael Bluth"})
        assert exc_info.value.alias == "lb"
        assert str(exc_info.value) == "no such username: lb"


class TestCanonicalAliases:
    """Tests for canonical_aliases."""

    def test_sorted(self):
        assert canonical_aliases(["mb", "lb"]) == ["lb", "mb"]

    def test_duplicates_collapse(self):
        assert canonical_aliases(["mb", "lb", "mb"]) == ["lb", "mb"]

    def test_case_sensitive(self):
        assert canonical_aliases(["mb", "MB"]) == ["MB", "mb"]


class TestCompositeIdentity:
    """Tests for CompositeIdentity."""

    def test_str(self):
        identity = CompositeIdentity(name="Michael Bluth", email="mb@example.com")
        assert str(identity) == "Michael Bluth <mb@example.com>"


class TestPairingSynchronizer:
    """Tests for PairingSynchronizer."""

    def test_single_alias(self):
        store = MemoryIdentityStore()
        identity = PairingSynchronizer(store).sync(
            {"mb": "Michael Bluth"}, "git@example.com", ["mb"]
        )

        assert identity == CompositeIdentity("Michael Bluth", "mb@example.com")
        assert store.values == {
            AUTHOR_NAME: "Michael Bluth",
            AUTHOR_EMAIL: "mb@example.com",
        }

    def test_aliases_sorted_before_encoding(self):
        store = MemoryIdentityStore()
        identity = PairingSynchronizer(store).sync(BLUTHS, "git@example.com", ["mb", "lb"])

        assert identity.name == "Lindsay Bluth and Michael Bluth"
        assert identity.email == "git+lb+mb@example.com"

    def test_input_order_does_not_matter(self):
        first = PairingSynchronizer(MemoryIdentityStore()).sync(
            BLUTHS, "git@example.com", ["mb", "gob", "lb"]
        )
        second = PairingSynchronizer(MemoryIdentityStore()).sync(
            BLUTHS, "git@example.com", ["lb", "mb", "gob"]
        )
        assert first == second

    def test_unknown_alias_writes_nothing(self):
        store = MemoryIdentityStore(
            {AUTHOR_NAME: "Michael Bluth", AUTHOR_EMAIL: "mb@example.com"}
        )

        with pytest.raises(UnknownAliasError):
            PairingSynchronizer(store).sync(BLUTHS, "git@example.com", ["mb", "tobias"])

        assert store.values == {AUTHOR_NAME: "Michael Bluth", AUTHOR_EMAIL: "mb@example.com"}

    def test_malformed_template_writes_nothing(self):
        store = MemoryIdentityStore()

        with pytest.raises(MalformedAddressError):
            PairingSynchronizer(store).sync(BLUTHS, "example.com", ["mb"])

        assert store.values == {}

    def test_no_aliases_reports_current_identity(self):
        store = MemoryIdentityStore(
            {AUTHOR_NAME: "Lindsay Bluth", AUTHOR_EMAIL: "lb@example.com"}
        )
        identity = PairingSynchronizer(store).sync(BLUTHS, "git@example.com", [])

        assert identity == CompositeIdentity("Lindsay Bluth", "lb@example.com")

    def test_no_aliases_on_empty_store(self):
        with pytest.raises(NotConfiguredError):
            PairingSynchronizer(MemoryIdentityStore()).sync({}, "git@example.com", [])

    def test_idempotent(self):
        store = MemoryIdentityStore()
        synchronizer = PairingSynchronizer(store)

        first = synchronizer.sync(BLUTHS, "git@example.com", ["lb", "mb"])
        snapshot = dict(store.values)
        second = synchronizer.sync(BLUTHS, "git@example.com", ["mb", "lb"])

        assert first == second
        assert store.values == snapshot

    def test_reports_read_back_not_intended_value(self):
        """The returned identity is whatever the store holds after writing."""
        store = Mock()
        store.location = None
        store.get.side_effect = {
            AUTHOR_NAME: "Someone Else",
            AUTHOR_EMAIL: "else@example.com",
        }.get

        identity = PairingSynchronizer(store).sync(BLUTHS, "git@example.com", ["mb"])

        assert identity == CompositeIdentity("Someone Else", "else@example.com")
        store.set.assert_any_call(AUTHOR_NAME, "Michael Bluth")
        store.set.assert_any_call(AUTHOR_EMAIL, "mb@example.com")

    def test_partial_write_is_surfaced(self):
        """A failed email write is raised after the name has been written."""
        store = Mock()
        store.set.side_effect = [None, StoreWriteFailedError("disk full")]

        with pytest.raises(StoreWriteFailedError, match="disk full"):
            PairingSynchronizer(store).sync(BLUTHS, "git@example.com", ["mb"])

        assert store.set.call_count == 2
        store.get.assert_not_called()

    def test_os_error_from_store_becomes_write_failure(self):
        store = Mock()
        store.set.side_effect = PermissionError("read-only file system")

        with pytest.raises(StoreWriteFailedError):
            PairingSynchronizer(store).sync(BLUTHS, "git@example.com", ["mb"])

    def test_current_missing_email(self):
        store = MemoryIdentityStore({AUTHOR_NAME: "Michael Bluth"})

        with pytest.raises(NotConfiguredError) as exc_info:
            PairingSynchronizer(store).current()
        assert exc_info.value.key == "user.email"
