"""Public API for the ZeneKa encoding, key parsing and identity hashing."""

from __future__ import annotations

from .commitment import digest
from .encoding import circuit_inputs, decode, encode
from .exceptions import (
    ConfigurationError,
    DuplicateCommitmentError,
    InputOverflowError,
    MalformedKeyError,
    MalformedProofError,
    ProverError,
    UnverifiedQueryError,
    ZenekaError,
)
from .factory import get_verifier
from .identity import hash_values, identify, to_uint, to_uint_tree
from .interfaces import ProofVerifier
from .keys import format_verification_key, parse_verification_key
from .types import CommitmentDigest, EncodedInput, Proof, ProvingScheme, VerificationKey

__all__ = [
    "encode",
    "decode",
    "circuit_inputs",
    "digest",
    "parse_verification_key",
    "format_verification_key",
    "identify",
    "hash_values",
    "to_uint",
    "to_uint_tree",
    "get_verifier",
    "ProofVerifier",
    "ProvingScheme",
    "EncodedInput",
    "CommitmentDigest",
    "VerificationKey",
    "Proof",
    "ZenekaError",
    "InputOverflowError",
    "MalformedKeyError",
    "MalformedProofError",
    "ProverError",
    "ConfigurationError",
    "DuplicateCommitmentError",
    "UnverifiedQueryError",
]
