"""
End-to-end: export artifacts with the pipeline, then drive the registry with
the exported documents exactly as a client would read them from disk.
"""

import json

import pytest
import trio
from eth_utils import to_checksum_address

from zeneka.pipeline import PipelineSettings, ProofPipeline
from zeneka.pipeline.prover import CompiledCircuit, RawSchemeOutput
from zeneka.registry import Registry
from zeneka.zk.adapters import MockVerifier
from zeneka.zk.exceptions import DuplicateCommitmentError, UnverifiedQueryError
from zeneka.zk.keys import parse_verification_key
from zeneka.zk.types import Proof, ProvingScheme


class CannedProver:
    def __init__(self, vk_factory, proof_factory):
        self.vk_factory = vk_factory
        self.proof_factory = proof_factory
        self.outputs = {}

    async def prepare(self, circuit_path, arguments, work_dir):
        self.arguments = list(arguments)
        return CompiledCircuit(program_path=work_dir / "out", witness_path=work_dir / "witness")

    async def prove(self, scheme, circuit, scheme_dir):
        await trio.sleep(0)
        offset = 100 * list(ProvingScheme).index(scheme)
        # public inputs as the circuit would emit them: h0, h1, sender, ok
        document = self.proof_factory(
            scheme, seed=1000 + offset, inputs=[7, 8, int(self.arguments[-1]), 1]
        )
        raw = RawSchemeOutput(
            scheme=scheme,
            proof_text=json.dumps(document),
            verification_key_text=self.vk_factory(scheme, seed=1 + offset),
        )
        self.outputs[scheme] = raw
        return raw


@pytest.fixture
def exported(tmp_path, vk_factory, proof_factory):
    template = tmp_path / "example.zok.tpl"
    template.write_text("h0 = {{h0}}; h1 = {{h1}};")
    settings = PipelineSettings(work_dir=tmp_path / "work", output_dir=tmp_path / "out")
    prover = CannedProver(vk_factory, proof_factory)

    trio.run(ProofPipeline(settings, prover).run_and_export, template, "hi", "0x10")

    documents = {
        suffix: json.loads((tmp_path / "out" / f"example{suffix}").read_text())
        for suffix in ("_vk.json", "_vk_id.json", "_proof.json", "_proofHash.json", "_inputs.json")
    }
    return documents, prover


@pytest.fixture
def verifier(exported):
    """Mock verifier that accepts exactly the proofs the prover produced."""
    _, prover = exported
    verifier = MockVerifier()
    for scheme, raw in prover.outputs.items():
        verifier.accept(
            parse_verification_key(raw.verification_key_text, scheme),
            Proof.from_json(scheme, json.loads(raw.proof_text)),
        )
    return verifier


def test_inputs_document(exported):
    documents, _ = exported
    assert documents["_inputs.json"] == ["0", "0", "0", "26729", "16"]


@pytest.mark.parametrize("scheme", list(ProvingScheme), ids=lambda scheme: scheme.value)
def test_registry_round(scheme, exported, verifier, accounts):
    documents, _ = exported
    k0, k1 = accounts
    name = scheme.value
    vk = documents["_vk.json"][f"vk{name}"]
    vk_id = documents["_vk_id.json"][f"vk{name}Id"]
    proof = documents["_proof.json"][f"proof{name}"]
    proof_hash = documents["_proofHash.json"][f"proofHash{name}"]

    registry = Registry(scheme, verifier)

    assert registry.register(vk, sender=k0).key_id == vk_id
    assert registry.register(vk, sender=k0) is None

    registry.commit(vk_id, proof_hash, sender=k0)
    assert registry.prover(proof_hash) == to_checksum_address(k0)
    with pytest.raises(DuplicateCommitmentError):
        registry.commit(vk_id, proof_hash, sender=k1)

    bad_proof = json.loads(json.dumps(proof))
    bad_proof[-1][0] = "0"
    assert registry.prove(vk_id, *bad_proof, sender=k0) is None
    assert registry.prove(vk_id, *proof, sender=k1) is None
    with pytest.raises(UnverifiedQueryError):
        registry.input(vk_id, k0)

    assert registry.prove(vk_id, *proof, sender=k0).prover == to_checksum_address(k0)
    assert registry.verify(vk_id, k0)
    assert [str(value) for value in registry.input(vk_id, k0)] == proof[-1]
    assert registry.input(vk_id, k0) == [7, 8, 16, 1]


def test_keys_do_not_cross_schemes(exported, verifier, accounts):
    documents, _ = exported
    k0 = accounts[0]
    registry = Registry(ProvingScheme.G16, verifier)
    registry.register(documents["_vk.json"]["vkG16"], sender=k0)

    gm17_hash = documents["_proofHash.json"]["proofHashGM17"]
    registry.commit(documents["_vk_id.json"]["vkG16Id"], gm17_hash, sender=k0)
    gm17_proof = documents["_proof.json"]["proofGM17"]

    assert registry.prove(documents["_vk_id.json"]["vkG16Id"], *gm17_proof, sender=k0) is None
