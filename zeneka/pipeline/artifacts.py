"""Parsed per-scheme artifacts and exported documents."""

from __future__ import annotations

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from ..zk.exceptions import MalformedKeyError, MalformedProofError
from ..zk.identity import Identifier, identify, to_uint_tree
from ..zk.keys import parse_verification_key
from ..zk.types import CommitmentDigest, Proof, ProvingScheme, VerificationKey
from .constants import (
    INPUTS_DOCUMENT,
    JSON_INDENT,
    PROOF_DOCUMENT,
    PROOF_HASH_DOCUMENT,
    VK_DOCUMENT,
    VK_ID_DOCUMENT,
)
from .prover import RawSchemeOutput


@dataclass(frozen=True)
class SchemeArtifacts:
    scheme: ProvingScheme
    verification_key: VerificationKey
    key_id: Identifier
    proof: Proof
    proof_hash: Identifier

    def exported_proof(self) -> List[Any]:
        """Proof values with every leaf as an unsigned decimal string."""
        return to_uint_tree(self.proof.to_values())


def build_scheme_artifacts(raw: RawSchemeOutput) -> SchemeArtifacts:
    """
    Parse raw prover output and derive both identifiers.

    The proof hash identifies the proof (elements and inputs) and is what a
    prover commits to; the key identifier addresses the verification key.

    Raises:
        MalformedProofError: If proof.json is not valid for the scheme
        MalformedKeyError: If verification.key is not valid for the scheme
    """
    try:
        document = json.loads(raw.proof_text)
    except json.JSONDecodeError as exc:
        raise MalformedProofError(f"{raw.scheme.value}: proof.json is not JSON: {exc}") from exc

    proof = Proof.from_json(raw.scheme, document)
    try:
        proof_hash = identify(proof)
    except (TypeError, ValueError) as exc:
        raise MalformedProofError(f"{raw.scheme.value}: {exc}") from exc

    verification_key = parse_verification_key(raw.verification_key_text, raw.scheme)
    try:
        key_id = identify(verification_key)
    except (TypeError, ValueError) as exc:
        raise MalformedKeyError(f"{raw.scheme.value}: {exc}") from exc

    return SchemeArtifacts(
        scheme=raw.scheme,
        verification_key=verification_key,
        key_id=key_id,
        proof=proof,
        proof_hash=proof_hash,
    )


@dataclass(frozen=True)
class PipelineArtifacts:
    """Everything one pipeline run exports."""

    stem: str
    circuit_inputs: Tuple[str, ...]
    commitment: CommitmentDigest
    schemes: Mapping[ProvingScheme, SchemeArtifacts]

    def documents(self) -> Dict[str, Any]:
        """Exported documents keyed by file suffix, in write order."""
        verification_keys = {}
        key_ids = {}
        proof_hashes = {}
        proofs = {}
        for scheme, artifacts in self.schemes.items():
            verification_keys[f"vk{scheme.value}"] = artifacts.verification_key.to_values()
            key_ids[f"vk{scheme.value}Id"] = artifacts.key_id
            proof_hashes[f"proofHash{scheme.value}"] = artifacts.proof_hash
            proofs[f"proof{scheme.value}"] = artifacts.exported_proof()

        return {
            INPUTS_DOCUMENT: list(self.circuit_inputs),
            VK_DOCUMENT: verification_keys,
            VK_ID_DOCUMENT: key_ids,
            PROOF_HASH_DOCUMENT: proof_hashes,
            PROOF_DOCUMENT: proofs,
        }

    def write(self, output_dir: str | Path) -> List[Path]:
        """
        Write every document into `output_dir`.

        All documents are staged as temporary files first and only moved
        into place once every one of them was written. If moving a document
        fails, the documents not yet moved are discarded with their
        temporary files.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        staged: List[Tuple[str, Path]] = []
        try:
            for suffix, document in self.documents().items():
                target = output_dir / f"{self.stem}{suffix}"
                tmp_fd, tmp_path = tempfile.mkstemp(prefix=target.name, dir=str(output_dir))
                staged.append((tmp_path, target))
                with os.fdopen(tmp_fd, "w", encoding="utf-8") as handle:
                    json.dump(document, handle, indent=JSON_INDENT)
                    handle.write("\n")
        except Exception:
            for tmp_path, _ in staged:
                os.remove(tmp_path)
            raise

        written: List[Path] = []
        try:
            for tmp_path, target in staged:
                os.replace(tmp_path, target)
                written.append(target)
        except OSError:
            for tmp_path, _ in staged[len(written):]:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
            raise
        return written
