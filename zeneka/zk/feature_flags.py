"""
Verifier backend selection.

The registry checks every reveal with one `ProofVerifier`. Which one is
chosen, in order: an explicit `prefer`, the in-process override set by
`set_backend_type`, `ZENEKA_VERIFIER_BACKEND`, then `mock`.

WARNING: the mock backend only accepts proofs pinned to it in-process and
must never guard a registry outside tests.
"""

from __future__ import annotations

import os
from typing import Any, Dict, Final

MOCK_BACKEND: Final[str] = "mock"
ZOKRATES_BACKEND: Final[str] = "zokrates"
VERIFIER_BACKENDS: Final[tuple[str, ...]] = (MOCK_BACKEND, ZOKRATES_BACKEND)

BACKEND_ENV_VAR: Final[str] = "ZENEKA_VERIFIER_BACKEND"
ZOKRATES_BIN_ENV_VAR: Final[str] = "ZENEKA_ZOKRATES_BIN"

_override: str | None = None


def _checked(value: Any) -> str | None:
    """Validate a backend name; None and "" both mean unset."""
    if value is None or value == "":
        return None
    if value in VERIFIER_BACKENDS:
        return value
    raise ValueError(
        f"Invalid verifier backend: {value!r}. "
        f"Valid options: {', '.join(VERIFIER_BACKENDS)}"
    )


def get_backend_type(prefer: str | None = None) -> str:
    """
    Resolve the verifier backend name.

    Raises:
        ValueError: If `prefer` or the environment names an unknown backend
    """
    preferred = _checked(prefer)
    if preferred is not None:
        return preferred
    if _override is not None:
        return _override
    return _checked(os.getenv(BACKEND_ENV_VAR)) or MOCK_BACKEND


def set_backend_type(value: str | None) -> None:
    """Force a backend for this process (tests); None or "" clears it."""
    global _override
    _override = _checked(value)


def get_backend_options(backend: str) -> Dict[str, Any]:
    """Constructor options for `backend` taken from the environment."""
    if backend == ZOKRATES_BACKEND and os.getenv(ZOKRATES_BIN_ENV_VAR):
        return {"zokrates_bin": os.environ[ZOKRATES_BIN_ENV_VAR]}
    return {}
