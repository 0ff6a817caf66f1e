"""ZoKrates command line verification backend."""

from __future__ import annotations

import json
import subprocess
import tempfile
from pathlib import Path
from typing import Any, Dict

from .identity import to_uint
from .interfaces import ProofVerifier
from .keys import format_verification_key
from .types import Proof, VerificationKey

DEFAULT_VERIFIER_TIMEOUT = 120


def _hex_word(value: Any) -> str:
    return f"0x{to_uint(value):064x}"


def _hex_tree(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        return [_hex_tree(item) for item in value]
    return _hex_word(value)


def proof_to_json(proof: Proof) -> Dict[str, Any]:
    """Render a proof as a ZoKrates `proof.json` document."""
    return {
        "proof": {name: _hex_tree(value) for name, value in proof.elements},
        "inputs": [_hex_word(value) for value in proof.inputs],
    }


class ZokratesVerifier(ProofVerifier):
    """Verify proofs by running `zokrates verify` on temporary files."""

    _BACKEND_NAME = "ZokratesVerifier"

    def __init__(
        self,
        zokrates_bin: str = "zokrates",
        timeout: float = DEFAULT_VERIFIER_TIMEOUT,
    ) -> None:
        self._zokrates_bin = zokrates_bin
        self._timeout = timeout

    @property
    def backend_name(self) -> str:
        return self._BACKEND_NAME

    def verify(self, key: VerificationKey, proof: Proof) -> bool:
        if not isinstance(key, VerificationKey) or not isinstance(proof, Proof):
            return False
        if key.scheme is not proof.scheme:
            return False

        try:
            with tempfile.TemporaryDirectory() as tmp_dir:
                vk_path = Path(tmp_dir) / "verification.key"
                proof_path = Path(tmp_dir) / "proof.json"
                vk_path.write_text(format_verification_key(key), encoding="utf-8")
                proof_path.write_text(
                    json.dumps(proof_to_json(proof), indent=2), encoding="utf-8"
                )
                result = subprocess.run(
                    [
                        self._zokrates_bin,
                        "verify",
                        "--verification-key-path",
                        str(vk_path),
                        "--proof-path",
                        str(proof_path),
                    ],
                    capture_output=True,
                    text=True,
                    check=False,
                    timeout=self._timeout,
                    cwd=tmp_dir,
                )
        except (OSError, ValueError, TypeError, subprocess.SubprocessError):
            return False

        if result.returncode != 0:
            return False
        return "PASSED" in result.stdout or "PASSED" in result.stderr

    def get_backend_info(self) -> Dict[str, Any]:
        return {
            "name": self.backend_name,
            "zokrates_bin": self._zokrates_bin,
            "timeout": self._timeout,
        }
