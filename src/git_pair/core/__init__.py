"""Pairing identity and branch synchronization."""

from .branch import (
    BranchDescriptor,
    BranchNameDeriver,
    BranchOperations,
    BranchSwitch,
    GitBranchOperations,
)
from .codec import decode_alias_prefix, encode_email, split_email
from .identity import (
    AUTHOR_EMAIL,
    AUTHOR_NAME,
    GitConfigIdentityStore,
    IdentityStore,
    MemoryIdentityStore,
)
from .pairing import CompositeIdentity, PairingSynchronizer, canonical_aliases, resolve_names

__all__ = [
    "AUTHOR_EMAIL",
    "AUTHOR_NAME",
    "BranchDescriptor",
    "BranchNameDeriver",
    "BranchOperations",
    "BranchSwitch",
    "CompositeIdentity",
    "GitBranchOperations",
    "GitConfigIdentityStore",
    "IdentityStore",
    "MemoryIdentityStore",
    "PairingSynchronizer",
    "canonical_aliases",
    "decode_alias_prefix",
    "encode_email",
    "resolve_names",
    "split_email",
]
