from __future__ import annotations

from typing import Any, Dict, Set, Tuple

from ..identity import identify
from ..interfaces import ProofVerifier
from ..types import Proof, VerificationKey


class MockVerifier(ProofVerifier):
    """
    Verifier that accepts exactly the proofs pinned to it.

    Notes:
    - A proof is valid iff `(identify(key), identify(proof))` was passed to
      `accept`; any change to a single scalar of either side rejects it.
    - It does NOT provide real cryptographic security.
    """

    _BACKEND_NAME = "MockVerifier"

    def __init__(self) -> None:
        self._accepted: Set[Tuple[str, str]] = set()

    @property
    def backend_name(self) -> str:
        return self._BACKEND_NAME

    def accept(self, key: VerificationKey, proof: Proof) -> None:
        if key.scheme is not proof.scheme:
            raise ValueError("key and proof use different proving schemes")
        self._accepted.add((identify(key), identify(proof)))

    def verify(self, key: VerificationKey, proof: Proof) -> bool:
        try:
            if not isinstance(key, VerificationKey) or not isinstance(proof, Proof):
                return False
            if key.scheme is not proof.scheme:
                return False
            return (identify(key), identify(proof)) in self._accepted
        except (TypeError, ValueError):
            return False

    def get_backend_info(self) -> Dict[str, Any]:
        return {
            "name": self.backend_name,
            "adapter": "mock",
            "pinned": len(self._accepted),
            "security": "mock_only",
        }
