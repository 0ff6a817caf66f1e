"""Commit-reveal registry for verification keys and proofs."""

from .events import Committed, Registered, Revealed
from .registry import Commitment, Registry, RegistryEntry, normalize_address

__all__ = [
    "Registry",
    "RegistryEntry",
    "Commitment",
    "Registered",
    "Committed",
    "Revealed",
    "normalize_address",
]
