"""
Commit-reveal registry for verification keys and proofs.

State machines:
    key_id                  Unregistered -> Registered
    proof_hash              Uncommitted  -> Committed
    (key_id, address)       Unverified   -> Verified

A prover first commits the proof hash (the only public artifact before the
reveal), then reveals the proof itself. The reveal only counts for the
address that committed that exact hash, which prevents front-running.

Rejected reveals return no event and change nothing. Wrong prover,
unregistered key, malformed values and a failed cryptographic check are
indistinguishable to the caller.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import cbor2
from eth_utils import is_address, to_checksum_address

from ..zk.config import ZERO_ADDRESS
from ..zk.exceptions import (
    DuplicateCommitmentError,
    MalformedKeyError,
    MalformedProofError,
    UnverifiedQueryError,
)
from ..zk.factory import get_verifier
from ..zk.identity import identify, normalize_identifier, to_uint
from ..zk.interfaces import ProofVerifier
from ..zk.types import Proof, ProvingScheme, VerificationKey
from .events import Committed, Registered, Revealed, event_from_dict, event_to_dict

SNAPSHOT_VERSION = 1


def normalize_address(address: str) -> str:
    if not isinstance(address, str) or not is_address(address):
        raise ValueError(f"invalid address: {address!r}")
    return to_checksum_address(address)


@dataclass(frozen=True)
class RegistryEntry:
    key: VerificationKey
    registrant: str


@dataclass(frozen=True)
class Commitment:
    key_id: str
    prover: str


class Registry:
    """
    Commit-reveal registry for one proving scheme.

    All state-changing calls take the acting address as `sender` and are
    applied one at a time under a lock.

    Example:
        >>> registry = Registry(ProvingScheme.G16, verifier)
        >>> registry.register(vk, sender=alice)
        >>> registry.commit(key_id, proof_hash, sender=alice)
        >>> registry.prove(key_id, *proof.to_values(), sender=alice)
        >>> registry.verify(key_id, alice)
        True
    """

    def __init__(
        self,
        scheme: Union[ProvingScheme, str],
        verifier: Optional[ProofVerifier] = None,
    ) -> None:
        self._scheme = ProvingScheme.parse(scheme)
        self._verifier = verifier if verifier is not None else get_verifier()
        self._lock = threading.Lock()
        self._keys: Dict[str, RegistryEntry] = {}
        self._commitments: Dict[str, Commitment] = {}
        self._verified: Dict[Tuple[str, str], Tuple[int, ...]] = {}
        self._events: List[Any] = []

    @property
    def scheme(self) -> ProvingScheme:
        return self._scheme

    @property
    def events(self) -> Tuple[Any, ...]:
        return tuple(self._events)

    # ========================================================================
    # STATE-CHANGING CALLS
    # ========================================================================

    def register(
        self, key: Union[VerificationKey, Sequence[Any]], *, sender: str
    ) -> Optional[Registered]:
        """
        Register a verification key under its identifier.

        Registering an identical key again is a silent no-op: it returns
        None and emits nothing.

        Raises:
            MalformedKeyError: If the key does not fit this registry's scheme
        """
        sender = normalize_address(sender)
        if not isinstance(key, VerificationKey):
            key = VerificationKey.from_values(self._scheme, key)
        if key.scheme is not self._scheme:
            raise MalformedKeyError(
                f"{key.scheme.value} key sent to {self._scheme.value} registry"
            )
        key_id = identify(key)

        with self._lock:
            if key_id in self._keys:
                return None
            self._keys[key_id] = RegistryEntry(key=key, registrant=sender)
            event = Registered(key_id=key_id, registrant=sender)
            self._events.append(event)
            return event

    def commit(self, key_id: str, proof_hash: str, *, sender: str) -> Committed:
        """
        Commit to a proof hash before revealing the proof.

        Raises:
            DuplicateCommitmentError: If anyone already committed this hash
        """
        sender = normalize_address(sender)
        key_id = normalize_identifier(key_id)
        proof_hash = normalize_identifier(proof_hash)

        with self._lock:
            if proof_hash in self._commitments:
                raise DuplicateCommitmentError(f"proof hash {proof_hash} already committed")
            self._commitments[proof_hash] = Commitment(key_id=key_id, prover=sender)
            event = Committed(key_id=key_id, proof_hash=proof_hash, prover=sender)
            self._events.append(event)
            return event

    def prove(self, key_id: str, *proof_values: Any, sender: str) -> Optional[Revealed]:
        """
        Reveal a committed proof and record its public inputs.

        `proof_values` are the proof elements followed by the public input
        list. Returns the `Revealed` event, or None when the reveal is
        rejected for any reason.
        """
        sender = normalize_address(sender)
        try:
            key_id = normalize_identifier(key_id)
            proof = Proof.from_values(self._scheme, list(proof_values))
            proof_hash = identify(proof)
            inputs = tuple(to_uint(value) for value in proof.inputs)
        except (MalformedProofError, TypeError, ValueError):
            return None

        with self._lock:
            commitment = self._commitments.get(proof_hash)
            if commitment is None:
                return None
            if commitment.key_id != key_id or commitment.prover != sender:
                return None
            entry = self._keys.get(key_id)
            if entry is None:
                return None
            if not self._check_proof(entry.key, proof):
                return None

            self._verified[(key_id, sender)] = inputs
            event = Revealed(key_id=key_id, prover=sender)
            self._events.append(event)
            return event

    def _check_proof(self, key: VerificationKey, proof: Proof) -> bool:
        try:
            return bool(self._verifier.verify(key, proof))
        except Exception:
            return False

    # ========================================================================
    # READS
    # ========================================================================

    def is_registered(self, key_id: str) -> bool:
        return normalize_identifier(key_id) in self._keys

    def verify(self, key_id: str, address: str) -> bool:
        return (normalize_identifier(key_id), normalize_address(address)) in self._verified

    def input(self, key_id: str, address: str) -> List[int]:
        """
        Public inputs validated for `address` under `key_id`.

        Raises:
            UnverifiedQueryError: If no reveal succeeded for the pair
        """
        pair = (normalize_identifier(key_id), normalize_address(address))
        if pair not in self._verified:
            raise UnverifiedQueryError(
                f"{pair[1]} has no verified proof for key {pair[0]}"
            )
        return list(self._verified[pair])

    def prover(self, proof_hash: str) -> str:
        commitment = self._commitments.get(normalize_identifier(proof_hash))
        if commitment is None:
            return ZERO_ADDRESS
        return commitment.prover

    # ========================================================================
    # PERSISTENCE (CBOR)
    # ========================================================================

    def snapshot(self) -> bytes:
        """Serialize the full registry state to CBOR."""
        with self._lock:
            data = {
                "v": SNAPSHOT_VERSION,
                "scheme": self._scheme.value,
                "keys": [
                    {"id": key_id, "vk": entry.key.to_values(), "registrant": entry.registrant}
                    for key_id, entry in self._keys.items()
                ],
                "commitments": [
                    {"hash": proof_hash, "id": c.key_id, "prover": c.prover}
                    for proof_hash, c in self._commitments.items()
                ],
                "verified": [
                    {"id": key_id, "address": address, "inputs": list(inputs)}
                    for (key_id, address), inputs in self._verified.items()
                ],
                "events": [event_to_dict(event) for event in self._events],
            }
        return cbor2.dumps(data)

    @classmethod
    def restore(
        cls, data: bytes, verifier: Optional[ProofVerifier] = None
    ) -> "Registry":
        """
        Rebuild a registry from `snapshot()` output.

        Raises:
            ValueError: If the snapshot version is unsupported, a stored key
                no longer hashes to its identifier, or an identifier or
                address is invalid
        """
        obj = cbor2.loads(data)
        if not isinstance(obj, dict):
            raise ValueError("Invalid registry snapshot")
        version = obj.get("v")
        if version != SNAPSHOT_VERSION:
            raise ValueError(
                f"Unsupported snapshot version: {version} (expected {SNAPSHOT_VERSION})"
            )

        registry = cls(obj["scheme"], verifier)
        for item in obj.get("keys", []):
            key_id = normalize_identifier(item["id"])
            key = VerificationKey.from_values(registry.scheme, item["vk"])
            if identify(key) != key_id:
                raise ValueError(f"snapshot key {key_id} does not match its values")
            registry._keys[key_id] = RegistryEntry(
                key=key, registrant=normalize_address(item["registrant"])
            )
        for item in obj.get("commitments", []):
            registry._commitments[normalize_identifier(item["hash"])] = Commitment(
                key_id=normalize_identifier(item["id"]),
                prover=normalize_address(item["prover"]),
            )
        for item in obj.get("verified", []):
            entry = (normalize_identifier(item["id"]), normalize_address(item["address"]))
            registry._verified[entry] = tuple(to_uint(value) for value in item["inputs"])
        registry._events = [event_from_dict(event) for event in obj.get("events", [])]
        return registry
