"""
Commit-Reveal Example

Drives one registry per proving scheme with the documents `zeneka run`
exported, the same way an on-chain client would:

    register(vk) -> commit(vk_id, proof_hash) -> prove(vk_id, *proof)

Usage:

    zeneka run examples/example.zok.tpl hi 0x90f8bf6a479f320ead074411a4b0e7944ea8c9c1
    python examples/commit_reveal_demo.py . example 0x90f8bf6a479f320ead074411a4b0e7944ea8c9c1

Set ZENEKA_VERIFIER_BACKEND=zokrates to check every reveal with the
ZoKrates binary; the default mock backend rejects every reveal.
"""

import json
import sys
from pathlib import Path

from zeneka.registry import Registry
from zeneka.zk.exceptions import DuplicateCommitmentError, UnverifiedQueryError
from zeneka.zk.factory import get_verifier
from zeneka.zk.types import ProvingScheme


def load_documents(output_dir, stem):
    documents = {}
    for suffix in ("_vk", "_vk_id", "_proof", "_proofHash"):
        path = Path(output_dir) / f"{stem}{suffix}.json"
        documents[suffix] = json.loads(path.read_text(encoding="utf-8"))
    return documents


def run_scheme(scheme, documents, sender, verifier):
    name = scheme.value
    vk_id = documents["_vk_id"][f"vk{name}Id"]
    proof = documents["_proof"][f"proof{name}"]
    proof_hash = documents["_proofHash"][f"proofHash{name}"]

    print(f"\n{name}")
    registry = Registry(scheme, verifier)

    event = registry.register(documents["_vk"][f"vk{name}"], sender=sender)
    print(f"   ✓ Registered {event.key_id}")

    registry.commit(vk_id, proof_hash, sender=sender)
    print(f"   ✓ Committed {proof_hash}")
    try:
        registry.commit(vk_id, proof_hash, sender=sender)
    except DuplicateCommitmentError:
        print("   ✓ Duplicate commitment rejected")

    if registry.prove(vk_id, *proof, sender=sender) is None:
        print("   ✗ Reveal rejected")
        return False

    try:
        inputs = registry.input(vk_id, sender)
    except UnverifiedQueryError:
        return False
    print(f"   ✓ Revealed, public inputs: {inputs}")
    return registry.verify(vk_id, sender)


def main():
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(2)
    output_dir, stem, sender = sys.argv[1:]

    print("\n" + "=" * 70)
    print("ZeneKa - Commit-Reveal Example")
    print("=" * 70)

    documents = load_documents(output_dir, stem)
    verifier = get_verifier()
    print(f"\nVerifier backend: {verifier.backend_name}")

    results = {scheme: run_scheme(scheme, documents, sender, verifier) for scheme in ProvingScheme}

    print("\n" + "=" * 70)
    for scheme, verified in results.items():
        print(f"{scheme.value:8} {'verified' if verified else 'not verified'}")
    sys.exit(0 if all(results.values()) else 1)


if __name__ == "__main__":
    main()
