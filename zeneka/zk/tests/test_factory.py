"""
Unit tests for verifier backend factory selection.
"""

from __future__ import annotations

import pytest

from zeneka.zk import factory
from zeneka.zk.adapters import MockVerifier
from zeneka.zk.exceptions import ConfigurationError
from zeneka.zk.feature_flags import set_backend_type
from zeneka.zk.interfaces import ProofVerifier
from zeneka.zk.verifier import ZokratesVerifier


def _assert_verifier_interface(verifier: ProofVerifier) -> None:
    assert isinstance(verifier, ProofVerifier)
    assert callable(getattr(verifier, "verify", None))
    assert callable(getattr(verifier, "get_backend_info", None))


def test_default_backend_is_mock() -> None:
    verifier = factory.get_verifier()
    _assert_verifier_interface(verifier)
    assert isinstance(verifier, MockVerifier)


def test_env_var_selects_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "zokrates")
    verifier = factory.get_verifier()
    _assert_verifier_interface(verifier)
    assert isinstance(verifier, ZokratesVerifier)


def test_override_selects_backend() -> None:
    set_backend_type("zokrates")
    assert isinstance(factory.get_verifier(), ZokratesVerifier)


def test_prefer_selects_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "zokrates")
    assert isinstance(factory.get_verifier(prefer="mock"), MockVerifier)


def test_kwargs_reach_constructor() -> None:
    verifier = factory.get_verifier(prefer="zokrates", zokrates_bin="/opt/zokrates", timeout=5)
    assert verifier.get_backend_info() == {
        "name": "ZokratesVerifier",
        "zokrates_bin": "/opt/zokrates",
        "timeout": 5,
    }


def test_invalid_backend_name_raises() -> None:
    with pytest.raises(ConfigurationError, match="Invalid verifier backend"):
        factory.get_verifier(prefer="groth")


def test_registry_entries_resolve() -> None:
    for name in factory.BACKEND_REGISTRY:
        assert issubclass(factory._load_backend_class(name), ProofVerifier)


def test_env_binary_reaches_zokrates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_ZOKRATES_BIN", "/opt/zokrates")
    verifier = factory.get_verifier(prefer="zokrates")
    assert verifier.get_backend_info()["zokrates_bin"] == "/opt/zokrates"

    explicit = factory.get_verifier(prefer="zokrates", zokrates_bin="./zokrates")
    assert explicit.get_backend_info()["zokrates_bin"] == "./zokrates"
