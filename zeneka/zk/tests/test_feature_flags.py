"""
Unit tests for feature flag verifier backend selection.
"""

import pytest

from zeneka.zk import feature_flags


@pytest.fixture(autouse=True)
def reset_feature_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    feature_flags.set_backend_type(None)
    monkeypatch.delenv("ZENEKA_VERIFIER_BACKEND", raising=False)
    yield
    feature_flags.set_backend_type(None)
    monkeypatch.delenv("ZENEKA_VERIFIER_BACKEND", raising=False)


def test_default_backend_is_mock() -> None:
    assert feature_flags.get_backend_type() == "mock"


def test_env_var_controls_backend(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "zokrates")
    assert feature_flags.get_backend_type() == "zokrates"


def test_prefer_overrides_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "zokrates")
    assert feature_flags.get_backend_type(prefer="mock") == "mock"


def test_set_backend_type_overrides_and_clears(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "zokrates")
    feature_flags.set_backend_type("mock")
    assert feature_flags.get_backend_type() == "mock"
    feature_flags.set_backend_type(None)
    assert feature_flags.get_backend_type() == "zokrates"


def test_invalid_prefer_raises_value_error() -> None:
    with pytest.raises(ValueError, match="Invalid verifier backend"):
        feature_flags.get_backend_type(prefer="groth")


def test_invalid_env_raises_value_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "groth")
    with pytest.raises(ValueError, match="Invalid verifier backend"):
        feature_flags.get_backend_type()


def test_empty_env_var_treated_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "")
    assert feature_flags.get_backend_type() == "mock"


def test_prefer_ignores_invalid_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_VERIFIER_BACKEND", "groth")
    assert feature_flags.get_backend_type(prefer="zokrates") == "zokrates"


def test_zokrates_options_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ZENEKA_ZOKRATES_BIN", "/opt/zokrates")
    assert feature_flags.get_backend_options("zokrates") == {"zokrates_bin": "/opt/zokrates"}
    assert feature_flags.get_backend_options("mock") == {}


def test_zokrates_options_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ZENEKA_ZOKRATES_BIN", raising=False)
    assert feature_flags.get_backend_options("zokrates") == {}
