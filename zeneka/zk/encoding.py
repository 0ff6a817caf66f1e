"""Plaintext to circuit field element encoding."""

from __future__ import annotations

from typing import List

from .config import CHUNK_COUNT, CHUNK_HEX_WIDTH
from .exceptions import InputOverflowError
from .types import EncodedInput


def zpad(hex_text: str) -> str:
    """Pad a hex string on the left with one zero if its length is odd."""
    return hex_text if len(hex_text) % 2 == 0 else "0" + hex_text


def encode(plaintext: str) -> EncodedInput:
    """
    Split UTF-8 plaintext into `CHUNK_COUNT` big unsigned integers.

    The hex encoding of the plaintext is cut into runs of `CHUNK_HEX_WIDTH`
    characters from the left; the final run may be shorter. Missing chunks
    are zero integers added in front, so the most significant chunk comes
    first.

    Raises:
        InputOverflowError: If the plaintext needs more than `CHUNK_COUNT`
            chunks. Data is never truncated.

    Example:
        >>> encode("hi").chunks
        (0, 0, 0, 26729)
    """
    if not isinstance(plaintext, str):
        raise TypeError("plaintext must be str")

    data = plaintext.encode("utf-8").hex()
    runs = [
        data[index:index + CHUNK_HEX_WIDTH]
        for index in range(0, len(data), CHUNK_HEX_WIDTH)
    ]
    if len(runs) > CHUNK_COUNT:
        raise InputOverflowError(
            f"plaintext needs {len(runs)} chunks; the circuit accepts {CHUNK_COUNT}"
        )

    chunks = [int(zpad(run), 16) for run in runs]
    chunks = [0] * (CHUNK_COUNT - len(chunks)) + chunks
    return EncodedInput(tuple(chunks))


def decode(chunks: EncodedInput) -> str:
    """
    Reassemble the plaintext from its chunks.

    Leading zero chunks are treated as padding, so plaintext starting with
    NUL bytes does not survive the round trip.
    """
    values = list(chunks)
    while values and values[0] == 0:
        values.pop(0)
    if not values:
        return ""

    parts = [f"{value:0{CHUNK_HEX_WIDTH}x}" for value in values[:-1]]
    parts.append(zpad(f"{values[-1]:x}"))
    return bytes.fromhex("".join(parts)).decode("utf-8")


def parse_address(address: str | int) -> int:
    """Parse an account address (0x hex or decimal) as an unsigned integer."""
    if isinstance(address, int):
        value = address
    elif isinstance(address, str):
        text = address.strip()
        try:
            value = int(text, 16) if text.lower().startswith("0x") else int(text, 10)
        except ValueError as exc:
            raise ValueError(f"invalid address: {address!r}") from exc
    else:
        raise TypeError("address must be str or int")
    if value < 0:
        raise ValueError("address must be non-negative")
    return value


def circuit_inputs(chunks: EncodedInput, address: str | int) -> List[str]:
    """Witness arguments: the chunk decimals followed by the address value."""
    return chunks.as_decimal() + [str(parse_address(address))]
