"""
Verifier backend factory.

Backends are imported lazily from dotted paths, so selecting the mock never
touches the subprocess-based verifier and vice versa.
"""

from __future__ import annotations

import importlib
from typing import Any, Final

from .exceptions import ConfigurationError
from .feature_flags import get_backend_options, get_backend_type
from .interfaces import ProofVerifier

BACKEND_REGISTRY: Final[dict[str, str]] = {
    "mock": "zeneka.zk.adapters.mock_verifier.MockVerifier",
    "zokrates": "zeneka.zk.verifier.ZokratesVerifier",
}


def _load_backend_class(backend_name: str) -> type[ProofVerifier]:
    module_path, _, class_name = BACKEND_REGISTRY[backend_name].rpartition(".")
    backend_cls = getattr(importlib.import_module(module_path), class_name, None)
    if not isinstance(backend_cls, type) or not issubclass(backend_cls, ProofVerifier):
        raise ConfigurationError(
            f"{module_path}.{class_name} is not a ProofVerifier"
        )
    return backend_cls


def get_verifier(prefer: str | None = None, **kwargs: Any) -> ProofVerifier:
    """
    Build the selected verifier backend.

    Explicit keyword arguments win over options read from the environment
    (`ZENEKA_ZOKRATES_BIN` for the zokrates backend).

    Raises:
        ConfigurationError: If the backend name is invalid
    """
    try:
        backend_name = get_backend_type(prefer)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    options = {**get_backend_options(backend_name), **kwargs}
    return _load_backend_class(backend_name)(**options)
