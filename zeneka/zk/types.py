"""
Common types for ZeneKa circuit inputs, verification keys and proofs.

This module provides:
1. EncodedInput / CommitmentDigest - host-side circuit input values
2. ProvingScheme - tagged enum of supported proving schemes, each carrying
   its positional layout
3. VerificationKey / Proof - scheme-tagged values with a single canonical
   nested-list form used by the parser, the identity hash and the exports

Keys keep their values as opaque numeric-string tokens exactly as they were
read from the verification key text. Proof leaves may be any scalar the
prover emitted (hex string, decimal string, int or bytes).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple

from .config import CHUNK_COUNT
from .exceptions import MalformedKeyError, MalformedProofError

# ============================================================================
# CIRCUIT INPUTS
# ============================================================================


@dataclass(frozen=True)
class EncodedInput:
    """
    Exactly `CHUNK_COUNT` unsigned chunks, most significant first.

    Example:
        >>> EncodedInput((0, 0, 0, 0x6869)).as_decimal()
        ['0', '0', '0', '26729']
    """

    chunks: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.chunks) != CHUNK_COUNT:
            raise ValueError(
                f"EncodedInput needs exactly {CHUNK_COUNT} chunks, "
                f"got {len(self.chunks)}"
            )
        for chunk in self.chunks:
            if not isinstance(chunk, int) or chunk < 0:
                raise ValueError("chunks must be non-negative integers")

    def __iter__(self) -> Iterator[int]:
        return iter(self.chunks)

    def __len__(self) -> int:
        return len(self.chunks)

    def __getitem__(self, index: int) -> int:
        return self.chunks[index]

    def as_decimal(self) -> List[str]:
        return [str(chunk) for chunk in self.chunks]


@dataclass(frozen=True)
class CommitmentDigest:
    """Two 128-bit halves of the SHA-256 commitment over the chunks."""

    h0: int
    h1: int

    def as_decimal(self) -> Tuple[str, str]:
        return str(self.h0), str(self.h1)

    def hex(self) -> str:
        return f"{self.h0:032x}{self.h1:032x}"


# ============================================================================
# PROVING SCHEMES
# ============================================================================

G1 = "G1"  # point over the base field: (x, y)
G2 = "G2"  # point over the extension field: ((x0, x1), (y0, y1))

_GROUP_TOKENS = {G1: 2, G2: 4}


@dataclass(frozen=True)
class SchemeLayout:
    """
    Positional layout of one proving scheme.

    Attributes:
        elements: Ordered (name, group) pairs of the fixed key prefix
        count_field: Name of the public input count scalar
        list_field: Name of the trailing list of G1 pairs
        proof_elements: Ordered names of the proof's group elements
        key_flatten_depth: Depth used when flattening a key for hashing
        cli_name: Scheme name understood by the ZoKrates command line
    """

    elements: Tuple[Tuple[str, str], ...]
    count_field: str
    list_field: str
    proof_elements: Tuple[str, ...]
    key_flatten_depth: int
    cli_name: str

    @property
    def prefix_tokens(self) -> int:
        return sum(_GROUP_TOKENS[group] for _, group in self.elements)

    @property
    def field_names(self) -> Tuple[str, ...]:
        names = tuple(name for name, _ in self.elements)
        return names + (self.count_field, self.list_field)


class ProvingScheme(Enum):
    """
    Proving schemes supported by the external prover.

    Each member carries its `SchemeLayout`; callers dispatch on the tag
    instead of subclassing per scheme.
    """

    G16 = "G16"
    GM17 = "GM17"
    PGHR13 = "PGHR13"

    @property
    def layout(self) -> SchemeLayout:
        return SCHEME_LAYOUTS[self]

    @classmethod
    def parse(cls, value: Any) -> "ProvingScheme":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().upper()
            for scheme in cls:
                if scheme.value == normalized:
                    return scheme
        valid = ", ".join(scheme.value for scheme in cls)
        raise ValueError(f"Unknown proving scheme: {value!r}. Valid options: {valid}")


SCHEME_LAYOUTS: Dict[ProvingScheme, SchemeLayout] = {
    ProvingScheme.G16: SchemeLayout(
        elements=(("a", G1), ("b", G2), ("gamma", G2), ("delta", G2)),
        count_field="gamma_abc_len",
        list_field="gamma_abc",
        proof_elements=("a", "b", "c"),
        key_flatten_depth=3,
        cli_name="g16",
    ),
    ProvingScheme.GM17: SchemeLayout(
        elements=(
            ("h", G2),
            ("g_alpha", G1),
            ("h_beta", G2),
            ("g_gamma", G1),
            ("h_gamma", G2),
        ),
        count_field="query_len",
        list_field="query",
        proof_elements=("a", "b", "c"),
        key_flatten_depth=3,
        cli_name="gm17",
    ),
    ProvingScheme.PGHR13: SchemeLayout(
        elements=(
            ("a", G2),
            ("b", G1),
            ("c", G2),
            ("gamma", G2),
            ("gamma_beta_1", G1),
            ("gamma_beta_2", G2),
            ("z", G2),
        ),
        count_field="ic_len",
        list_field="ic",
        proof_elements=("a", "a_p", "b", "b_p", "c", "c_p", "h", "k"),
        # PGHR13 keys have always been identified at depth 2
        key_flatten_depth=2,
        cli_name="pghr13",
    ),
}


# ============================================================================
# NESTED VALUE HELPERS
# ============================================================================


def freeze(value: Any) -> Any:
    """Recursively convert lists into tuples."""
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Recursively convert tuples into lists."""
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


def _g1_from_tokens(tokens: Sequence[str]) -> Tuple[str, str]:
    return (tokens[0], tokens[1])


def _g2_from_tokens(tokens: Sequence[str]) -> Tuple[Tuple[str, str], Tuple[str, str]]:
    return ((tokens[0], tokens[1]), (tokens[2], tokens[3]))


def _check_point(value: Any, group: str, name: str) -> Any:
    if group == G1:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise MalformedKeyError(f"{name} must be a pair")
        if any(isinstance(item, (list, tuple)) for item in value):
            raise MalformedKeyError(f"{name} must be a pair of scalars")
        return freeze(value)
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise MalformedKeyError(f"{name} must be a pair of pairs")
    for half in value:
        _check_point(half, G1, name)
    return freeze(value)


# ============================================================================
# VERIFICATION KEY
# ============================================================================


@dataclass(frozen=True)
class VerificationKey:
    """
    Scheme-tagged verification key.

    Attributes:
        scheme: Proving scheme tag
        elements: Ordered (name, point) pairs of the fixed prefix
        count: Public input count token
        query: Exactly `int(count)` G1 pairs

    The canonical value form (`to_values`) lists the element points in
    declaration order, then the count token, then the query list. This is
    the shape of the exported verification key document and of the
    registry's `register` call.
    """

    scheme: ProvingScheme
    elements: Tuple[Tuple[str, Any], ...]
    count: str
    query: Tuple[Tuple[str, str], ...]

    @classmethod
    def from_tokens(cls, scheme: ProvingScheme, tokens: Sequence[str]) -> "VerificationKey":
        """
        Destructure a flat token sequence by the scheme's layout.

        Raises:
            MalformedKeyError: If the token count does not match the layout
        """
        scheme = ProvingScheme.parse(scheme)
        layout = scheme.layout
        prefix = layout.prefix_tokens
        if len(tokens) < prefix + 1:
            raise MalformedKeyError(
                f"{scheme.value} key needs at least {prefix + 1} values, "
                f"got {len(tokens)}"
            )

        elements = []
        offset = 0
        for name, group in layout.elements:
            width = _GROUP_TOKENS[group]
            chunk = tokens[offset:offset + width]
            if group == G1:
                elements.append((name, _g1_from_tokens(chunk)))
            else:
                elements.append((name, _g2_from_tokens(chunk)))
            offset += width

        count = tokens[offset]
        length = _parse_count(count, layout.count_field)
        rest = tokens[offset + 1:]
        if len(rest) % 2 != 0 or len(rest) != 2 * length:
            raise MalformedKeyError(
                f"{scheme.value} {layout.count_field} is {length} but "
                f"{len(rest)} values follow (expected {2 * length})"
            )
        query = tuple((rest[i], rest[i + 1]) for i in range(0, len(rest), 2))
        return cls(scheme=scheme, elements=tuple(elements), count=count, query=query)

    @classmethod
    def from_values(cls, scheme: ProvingScheme, values: Sequence[Any]) -> "VerificationKey":
        """
        Rebuild a key from its canonical value form.

        Raises:
            MalformedKeyError: If the values do not match the layout
        """
        scheme = ProvingScheme.parse(scheme)
        layout = scheme.layout
        expected = len(layout.elements) + 2
        if not isinstance(values, (list, tuple)) or len(values) != expected:
            raise MalformedKeyError(
                f"{scheme.value} key needs {expected} fields"
            )

        elements = tuple(
            (name, _check_point(value, group, name))
            for (name, group), value in zip(layout.elements, values)
        )
        count = str(values[-2])
        length = _parse_count(count, layout.count_field)
        query_values = values[-1]
        if not isinstance(query_values, (list, tuple)) or len(query_values) != length:
            raise MalformedKeyError(
                f"{layout.list_field} must hold exactly {length} pairs"
            )
        query = tuple(
            _check_point(pair, G1, f"{layout.list_field}[{index}]")
            for index, pair in enumerate(query_values)
        )
        return cls(scheme=scheme, elements=elements, count=count, query=query)

    def element(self, name: str) -> Any:
        for element_name, value in self.elements:
            if element_name == name:
                return value
        raise KeyError(name)

    def to_values(self) -> List[Any]:
        values: List[Any] = [thaw(value) for _, value in self.elements]
        values.append(self.count)
        values.append(thaw(self.query))
        return values

    def to_dict(self) -> Dict[str, Any]:
        layout = self.scheme.layout
        return dict(zip(layout.field_names, self.to_values()))

    def tokens(self) -> List[str]:
        """Flat token sequence in file order."""
        flat: List[str] = []
        for _, value in self.elements:
            flat.extend(_flatten_all(value))
        flat.append(self.count)
        flat.extend(_flatten_all(self.query))
        return flat


def _parse_count(token: Any, field_name: str) -> int:
    text = str(token)
    if not text.isdigit():
        raise MalformedKeyError(f"{field_name} must be a non-negative integer, got {text!r}")
    return int(text)


def _flatten_all(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        flat: List[Any] = []
        for item in value:
            flat.extend(_flatten_all(item))
        return flat
    return [value]


# ============================================================================
# PROOF
# ============================================================================


@dataclass(frozen=True)
class Proof:
    """
    Scheme-tagged proof.

    Attributes:
        scheme: Proving scheme tag
        elements: Ordered (name, point) pairs as emitted by the prover
        inputs: Public inputs (commitment halves, address, outputs)

    Canonical value form: element values in layout order followed by the
    public input list as the final item.
    """

    scheme: ProvingScheme
    elements: Tuple[Tuple[str, Any], ...]
    inputs: Tuple[Any, ...]

    @classmethod
    def from_json(cls, scheme: ProvingScheme, document: Mapping[str, Any]) -> "Proof":
        """
        Build a proof from a ZoKrates `proof.json` document.

        Raises:
            MalformedProofError: If the document does not match the layout
        """
        scheme = ProvingScheme.parse(scheme)
        if not isinstance(document, Mapping):
            raise MalformedProofError("proof document must be an object")
        body = document.get("proof")
        inputs = document.get("inputs")
        if not isinstance(body, Mapping):
            raise MalformedProofError("proof document is missing 'proof'")
        if not isinstance(inputs, (list, tuple)):
            raise MalformedProofError("proof document is missing 'inputs'")

        names = scheme.layout.proof_elements
        if set(body.keys()) != set(names):
            raise MalformedProofError(
                f"{scheme.value} proof needs elements {', '.join(names)}; "
                f"got {', '.join(sorted(body.keys()))}"
            )
        elements = tuple((name, freeze(body[name])) for name in names)
        return cls(scheme=scheme, elements=elements, inputs=freeze(inputs))

    @classmethod
    def from_values(cls, scheme: ProvingScheme, values: Sequence[Any]) -> "Proof":
        """
        Build a proof from its canonical value form.

        Raises:
            MalformedProofError: If the values do not match the layout
        """
        scheme = ProvingScheme.parse(scheme)
        names = scheme.layout.proof_elements
        if not isinstance(values, (list, tuple)) or len(values) != len(names) + 1:
            raise MalformedProofError(
                f"{scheme.value} proof needs {len(names)} elements and an input list"
            )
        inputs = values[-1]
        if not isinstance(inputs, (list, tuple)):
            raise MalformedProofError("last proof value must be the input list")
        for name, value in zip(names, values):
            if not isinstance(value, (list, tuple)):
                raise MalformedProofError(f"proof element {name} must be a point")
        elements = tuple((name, freeze(value)) for name, value in zip(names, values))
        return cls(scheme=scheme, elements=elements, inputs=freeze(inputs))

    def to_values(self) -> List[Any]:
        values: List[Any] = [thaw(value) for _, value in self.elements]
        values.append(thaw(self.inputs))
        return values
