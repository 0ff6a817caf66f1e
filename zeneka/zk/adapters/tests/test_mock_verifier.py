"""
Unit tests for the pinned-proof mock verifier.
"""

import pytest

from zeneka.zk.adapters import MockVerifier
from zeneka.zk.keys import parse_verification_key
from zeneka.zk.types import Proof, ProvingScheme


@pytest.fixture
def key(scheme, vk_text):
    return parse_verification_key(vk_text, scheme)


@pytest.fixture
def proof(scheme, proof_document):
    return Proof.from_json(scheme, proof_document)


def test_unpinned_proof_rejected(key, proof):
    assert MockVerifier().verify(key, proof) is False


def test_pinned_proof_accepted(key, proof):
    verifier = MockVerifier()
    verifier.accept(key, proof)
    assert verifier.verify(key, proof) is True


def test_single_scalar_change_rejected(scheme, key, proof):
    verifier = MockVerifier()
    verifier.accept(key, proof)
    values = proof.to_values()
    values[-1][0] = "0"
    assert verifier.verify(key, Proof.from_values(scheme, values)) is False


def test_other_key_rejected(scheme, proof, vk_factory):
    verifier = MockVerifier()
    verifier.accept(parse_verification_key(vk_factory(scheme, seed=1), scheme), proof)
    other = parse_verification_key(vk_factory(scheme, seed=9), scheme)
    assert verifier.verify(other, proof) is False


def test_accept_rejects_scheme_mismatch(vk_factory, proof_factory):
    key = parse_verification_key(vk_factory(ProvingScheme.G16), ProvingScheme.G16)
    proof = Proof.from_json(ProvingScheme.PGHR13, proof_factory(ProvingScheme.PGHR13))
    with pytest.raises(ValueError):
        MockVerifier().accept(key, proof)


def test_non_numeric_proof_is_false(scheme, key, proof):
    verifier = MockVerifier()
    verifier.accept(key, proof)
    values = proof.to_values()
    values[-1][0] = "not-a-number"
    assert verifier.verify(key, Proof.from_values(scheme, values)) is False


def test_backend_info(key, proof):
    verifier = MockVerifier()
    verifier.accept(key, proof)
    info = verifier.get_backend_info()
    assert info["name"] == "MockVerifier"
    assert info["pinned"] == 1
    assert info["security"] == "mock_only"
