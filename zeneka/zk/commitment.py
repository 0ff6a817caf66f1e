"""
SHA-256 commitment over encoded circuit chunks.

The circuit recomputes this digest from its private chunks and compares it
with the two public halves baked into the template, so the buffer layout
here must stay bit-exact with the circuit:

    digest = SHA-256(buf(c0) || buf(c1) || buf(c2) || buf(c3))
    buf(c) = 16-byte big-endian, value right aligned
    h0 = int(digest[:16]), h1 = int(digest[16:])
"""

from __future__ import annotations

import hashlib
from typing import Iterable

from .config import CHUNK_BYTES, COMMITMENT_HALF_BYTES
from .encoding import zpad
from .types import CommitmentDigest, EncodedInput


def chunk_buffer(chunk: int) -> bytes:
    """Serialize one chunk into its fixed-width big-endian buffer."""
    if not isinstance(chunk, int) or chunk < 0:
        raise ValueError("chunk must be a non-negative integer")
    raw = bytes.fromhex(zpad(f"{chunk:x}"))
    if len(raw) > CHUNK_BYTES:
        raise ValueError(f"chunk does not fit in {CHUNK_BYTES} bytes")
    return raw.rjust(CHUNK_BYTES, b"\x00")


def commitment_preimage(chunks: EncodedInput | Iterable[int]) -> bytes:
    return b"".join(chunk_buffer(chunk) for chunk in chunks)


def digest(chunks: EncodedInput) -> CommitmentDigest:
    """
    Compute the commitment halves for a set of chunks.

    Example:
        >>> from zeneka.zk.encoding import encode
        >>> digest(encode("hi")).hex()[:8]
        'fadd05cb'
    """
    if not isinstance(chunks, EncodedInput):
        chunks = EncodedInput(tuple(chunks))
    hashed = hashlib.sha256(commitment_preimage(chunks)).digest()
    h0 = int.from_bytes(hashed[:COMMITMENT_HALF_BYTES], "big")
    h1 = int.from_bytes(hashed[COMMITMENT_HALF_BYTES:], "big")
    return CommitmentDigest(h0=h0, h1=h1)
