"""
Content-addressed identifiers for verification keys and proofs.

An identifier is the Keccak-256 hash of the tightly packed ABI encoding of a
value's flattened scalars, each packed as one `uint256` word. This is the
same digest Solidity computes with
`keccak256(abi.encodePacked(uint256 v0, uint256 v1, ...))`, so the registry
contract and the off-chain tooling agree on identities.

Scalars are normalised to integers before packing, so formatting noise in
the upstream text (leading zeros, hex vs decimal) never changes an
identifier.
"""

from __future__ import annotations

import re
from typing import Any, List, Sequence, Union

from eth_abi.packed import encode_packed
from eth_utils import keccak

from .config import (
    IDENTITY_WORD_MAX,
    IDENTITY_WORD_TYPE,
    PROOF_FLATTEN_DEPTH,
    UINT_TREE_DEPTH,
)
from .types import Proof, VerificationKey

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")
_DECIMAL_DIGITS = re.compile(r"[0-9]+")

Identifier = str
Scalar = Union[int, str, bytes, bytearray]


def to_uint(value: Scalar) -> int:
    """
    Reinterpret a scalar leaf as an unsigned integer.

    Accepts ints, big-endian bytes, `0x` hex strings and decimal strings.
    """
    if isinstance(value, bool):
        raise TypeError("bool is not a numeric scalar")
    if isinstance(value, int):
        result = value
    elif isinstance(value, (bytes, bytearray)):
        result = int.from_bytes(bytes(value), "big")
    elif isinstance(value, str):
        text = value.strip()
        if text[:2].lower() == "0x":
            digits, pattern, base = text[2:], _HEX_DIGITS, 16
        else:
            digits, pattern, base = text, _DECIMAL_DIGITS, 10
        if not pattern.fullmatch(digits):
            raise ValueError(f"not a numeric scalar: {value!r}")
        result = int(digits, base)
    else:
        raise TypeError(f"unsupported scalar type: {type(value).__name__}")

    if result < 0 or result > IDENTITY_WORD_MAX:
        raise ValueError(f"scalar out of uint256 range: {value!r}")
    return result


def to_uint_tree(values: Sequence[Any], depth: int = UINT_TREE_DEPTH) -> List[Any]:
    """
    Convert every leaf of a nested value list into a decimal string.

    Nesting is preserved up to `depth` levels; anything deeper is an error.
    """
    if depth < 1:
        raise ValueError("value nesting exceeds the supported depth")
    converted: List[Any] = []
    for item in values:
        if isinstance(item, (list, tuple)):
            converted.append(to_uint_tree(item, depth - 1))
        else:
            converted.append(str(to_uint(item)))
    return converted


def flatten(values: Sequence[Any], depth: int) -> List[Any]:
    """Flatten nested lists by `depth` levels, like `Array.prototype.flat`."""
    flat: List[Any] = []
    for item in values:
        if isinstance(item, (list, tuple)) and depth > 0:
            flat.extend(flatten(item, depth - 1))
        else:
            flat.append(item)
    return flat


def hash_values(values: Sequence[Scalar]) -> Identifier:
    """
    Keccak-256 over flat scalars packed as uint256 words.

    Example:
        >>> hash_values(["0"])
        '0x290decd9548b62a8d60345a988386fc84ba6bc95484008f6362f93160ef3e563'
    """
    words = [to_uint(value) for value in values]
    packed = encode_packed([IDENTITY_WORD_TYPE] * len(words), words)
    return "0x" + keccak(packed).hex()


def flatten_for_identity(value: Union[VerificationKey, Proof]) -> List[Any]:
    """
    Flatten a key or proof at its scheme's identity depth.

    Raises:
        ValueError: If nesting remains after flattening, which would mean
            the depth recorded for the scheme no longer covers its layout
    """
    if isinstance(value, VerificationKey):
        depth = value.scheme.layout.key_flatten_depth
    elif isinstance(value, Proof):
        depth = PROOF_FLATTEN_DEPTH
    else:
        raise TypeError("value must be a VerificationKey or Proof")

    flat = flatten(value.to_values(), depth)
    if any(isinstance(item, (list, tuple)) for item in flat):
        raise ValueError(
            f"{value.scheme.value} {type(value).__name__} is nested deeper "
            f"than its identity depth {depth}"
        )
    return flat


def identify(value: Union[VerificationKey, Proof]) -> Identifier:
    """Compute the key identifier or proof hash of a value."""
    return hash_values(flatten_for_identity(value))


def normalize_identifier(value: Union[str, bytes, bytearray]) -> Identifier:
    """Canonical `0x`-prefixed lowercase form of a 32-byte identifier."""
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    elif isinstance(value, str):
        text = value.strip()
        if text[:2].lower() == "0x":
            text = text[2:]
        try:
            raw = bytes.fromhex(text)
        except ValueError as exc:
            raise ValueError(f"identifier is not hex: {value!r}") from exc
    else:
        raise TypeError("identifier must be str or bytes")
    if len(raw) != 32:
        raise ValueError("identifier must be 32 bytes")
    return "0x" + raw.hex()
