"""
Shared fixtures: canned ZoKrates output for every proving scheme.
"""

from __future__ import annotations

import itertools
import json
from typing import Any, Dict, List

import pytest

from zeneka.zk import feature_flags
from zeneka.zk.types import G1, ProvingScheme

ALICE = "0x90f8bf6a479f320ead074411a4b0e7944ea8c9c1"
BOB = "0xffcf8fdee72ac11b5c542428b35eef5769c409f0"


def _word(value: int) -> str:
    return f"0x{value:064x}"


def make_vk_text(scheme: ProvingScheme, seed: int = 1, query_len: int = 3) -> str:
    """Verification key text in the line format ZoKrates writes."""
    layout = scheme.layout
    counter = itertools.count(seed)
    lines = []
    for name, group in layout.elements:
        if group == G1:
            lines.append(f"vk.{name} = {_word(next(counter))}, {_word(next(counter))}")
        else:
            lines.append(
                f"vk.{name} = [{_word(next(counter))}, {_word(next(counter))}], "
                f"[{_word(next(counter))}, {_word(next(counter))}]"
            )
    lines.append(f"vk.{layout.list_field}.len() = {query_len}")
    for index in range(query_len):
        lines.append(
            f"vk.{layout.list_field}[{index}] = {_word(next(counter))}, {_word(next(counter))}"
        )
    return "\n".join(lines) + "\n"


def make_proof_document(
    scheme: ProvingScheme, seed: int = 1000, inputs: List[int] | None = None
) -> Dict[str, Any]:
    """A `proof.json` document; `b` is the only G2 proof element."""
    counter = itertools.count(seed)
    body: Dict[str, Any] = {}
    for name in scheme.layout.proof_elements:
        if name == "b":
            body[name] = [
                [_word(next(counter)), _word(next(counter))],
                [_word(next(counter)), _word(next(counter))],
            ]
        else:
            body[name] = [_word(next(counter)), _word(next(counter))]
    if inputs is None:
        inputs = [11, 22, 1]
    return {"proof": body, "inputs": [_word(value) for value in inputs]}


@pytest.fixture(params=list(ProvingScheme), ids=lambda scheme: scheme.value)
def scheme(request) -> ProvingScheme:
    return request.param


@pytest.fixture
def vk_text(scheme: ProvingScheme) -> str:
    return make_vk_text(scheme)


@pytest.fixture
def proof_document(scheme: ProvingScheme) -> Dict[str, Any]:
    return make_proof_document(scheme)


@pytest.fixture
def proof_text(proof_document: Dict[str, Any]) -> str:
    return json.dumps(proof_document, indent=2)


@pytest.fixture
def vk_factory():
    return make_vk_text


@pytest.fixture
def proof_factory():
    return make_proof_document


@pytest.fixture
def accounts():
    return ALICE, BOB


@pytest.fixture(autouse=True)
def reset_verifier_backend(monkeypatch: pytest.MonkeyPatch):
    feature_flags.set_backend_type(None)
    monkeypatch.delenv("ZENEKA_VERIFIER_BACKEND", raising=False)
    yield
    feature_flags.set_backend_type(None)
