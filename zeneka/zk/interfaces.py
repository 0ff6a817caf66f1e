"""
Verifier backend interface.

The proving system itself is external: a backend only answers whether a
proof is valid for a verification key. Backends must never raise from
`verify`; every failure is reported as `False` so the registry cannot leak
why a reveal was rejected.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from .types import Proof, VerificationKey


class ProofVerifier(ABC):
    """Checks a proof against a verification key."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        ...

    @abstractmethod
    def verify(self, key: VerificationKey, proof: Proof) -> bool:
        ...

    def get_backend_info(self) -> Dict[str, Any]:
        return {"name": self.backend_name}
