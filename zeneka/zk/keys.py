"""Verification key text parsing and rendering."""

from __future__ import annotations

import re
from typing import Any, List

from .exceptions import MalformedKeyError
from .types import ProvingScheme, VerificationKey

_NON_WORD = re.compile(r"\W", re.ASCII)


def tokenize(raw: str) -> List[str]:
    """
    Flatten every `name = value[,value...]` line into one token list.

    Only the right-hand side of the first `=` is used. Brackets, parens and
    whitespace around each comma separated value are stripped.

    Raises:
        MalformedKeyError: If a line has no `=` or a value is empty
    """
    if not isinstance(raw, str):
        raise TypeError("verification key text must be str")

    tokens: List[str] = []
    for number, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        name, sep, rhs = line.partition("=")
        if not sep:
            raise MalformedKeyError(f"line {number}: expected 'name = value'")
        for value in rhs.split(","):
            token = _NON_WORD.sub("", value)
            if not token:
                raise MalformedKeyError(
                    f"line {number} ({name.strip()}): empty value"
                )
            tokens.append(token)
    return tokens


def parse_verification_key(
    raw: str, scheme: ProvingScheme | str = ProvingScheme.G16
) -> VerificationKey:
    """
    Parse ZoKrates verification key text for one proving scheme.

    Parsing is positional: the line order of the file is part of the
    format. The fixed prefix is destructured into the scheme's named group
    elements, followed by the public input count and exactly that many
    pairs.

    Raises:
        MalformedKeyError: If the token count does not match the layout
    """
    return VerificationKey.from_tokens(ProvingScheme.parse(scheme), tokenize(raw))


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_render(item) for item in value) + "]"
    return str(value)


def format_verification_key(key: VerificationKey) -> str:
    """
    Render a key back into the line-oriented text format.

    `parse_verification_key(format_verification_key(k), k.scheme) == k`.
    """
    layout = key.scheme.layout
    lines = []
    for name, value in key.elements:
        lines.append(f"vk.{name} = {', '.join(_render(part) for part in value)}")
    lines.append(f"vk.{layout.list_field}.len() = {key.count}")
    for index, (x, y) in enumerate(key.query):
        lines.append(f"vk.{layout.list_field}[{index}] = {x}, {y}")
    return "\n".join(lines) + "\n"
