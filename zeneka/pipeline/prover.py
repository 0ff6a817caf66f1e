"""External ZoKrates prover driven as a subprocess."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol, Sequence

import trio

from ..zk.exceptions import ProverError
from ..zk.types import ProvingScheme
from .constants import (
    COMPILED_CIRCUIT,
    DEFAULT_PROVER_TIMEOUT,
    DEFAULT_ZOKRATES_BIN,
    PROOF_FILE,
    PROVING_KEY_FILE,
    VERIFICATION_KEY_FILE,
    WITNESS_FILE,
)


@dataclass(frozen=True)
class CompiledCircuit:
    program_path: Path
    witness_path: Path


@dataclass(frozen=True)
class RawSchemeOutput:
    """Prover output for one scheme, before parsing."""

    scheme: ProvingScheme
    proof_text: str
    verification_key_text: str


class CircuitProver(Protocol):
    async def prepare(
        self, circuit_path: Path, arguments: Sequence[str], work_dir: Path
    ) -> CompiledCircuit:
        ...

    async def prove(
        self, scheme: ProvingScheme, circuit: CompiledCircuit, scheme_dir: Path
    ) -> RawSchemeOutput:
        ...


class ZokratesProver:
    """
    Compile, witness, setup and prove with the `zokrates` binary.

    `prepare` runs once per circuit; `prove` runs once per scheme in its own
    directory, so schemes never share key or proof files.
    """

    def __init__(
        self,
        zokrates_bin: str = DEFAULT_ZOKRATES_BIN,
        timeout: float = DEFAULT_PROVER_TIMEOUT,
    ) -> None:
        self._zokrates_bin = zokrates_bin
        self._timeout = timeout

    async def prepare(
        self, circuit_path: Path, arguments: Sequence[str], work_dir: Path
    ) -> CompiledCircuit:
        program_path = work_dir / COMPILED_CIRCUIT
        witness_path = work_dir / WITNESS_FILE
        await self._run(
            ["compile", "--input", str(circuit_path), "--output", str(program_path)],
            cwd=work_dir,
        )
        await self._run(
            [
                "compute-witness",
                "--input",
                str(program_path),
                "--output",
                str(witness_path),
                "--arguments",
                *arguments,
            ],
            cwd=work_dir,
        )
        return CompiledCircuit(program_path=program_path, witness_path=witness_path)

    async def prove(
        self, scheme: ProvingScheme, circuit: CompiledCircuit, scheme_dir: Path
    ) -> RawSchemeOutput:
        try:
            scheme_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ProverError(f"{scheme.value}: cannot create {scheme_dir}: {exc}") from exc
        cli_name = scheme.layout.cli_name
        proving_key = scheme_dir / PROVING_KEY_FILE
        verification_key = scheme_dir / VERIFICATION_KEY_FILE
        proof_path = scheme_dir / PROOF_FILE

        await self._run(
            [
                "setup",
                "--input",
                str(circuit.program_path),
                "--proving-key-path",
                str(proving_key),
                "--verification-key-path",
                str(verification_key),
                "--proving-scheme",
                cli_name,
            ],
            cwd=scheme_dir,
        )
        await self._run(
            [
                "generate-proof",
                "--input",
                str(circuit.program_path),
                "--witness",
                str(circuit.witness_path),
                "--proving-key-path",
                str(proving_key),
                "--proof-path",
                str(proof_path),
                "--proving-scheme",
                cli_name,
            ],
            cwd=scheme_dir,
        )

        try:
            proof_text = proof_path.read_text(encoding="utf-8")
            vk_text = verification_key.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ProverError(f"{scheme.value}: unreadable prover output: {exc}") from exc
        return RawSchemeOutput(
            scheme=scheme, proof_text=proof_text, verification_key_text=vk_text
        )

    async def _run(self, arguments: List[str], cwd: Path) -> None:
        command = [self._zokrates_bin, *arguments]
        try:
            with trio.fail_after(self._timeout):
                result = await trio.run_process(
                    command,
                    cwd=str(cwd),
                    capture_stdout=True,
                    capture_stderr=True,
                    check=False,
                )
        except trio.TooSlowError as exc:
            raise ProverError(
                f"zokrates {arguments[0]} timed out after {self._timeout}s"
            ) from exc
        except OSError as exc:
            raise ProverError(f"unable to run {self._zokrates_bin}: {exc}") from exc

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", "replace").strip()
            raise ProverError(
                f"zokrates {arguments[0]} failed: {stderr or 'unknown prover error'}"
            )


def zokrates_version(zokrates_bin: str = DEFAULT_ZOKRATES_BIN) -> str | None:
    """Installed ZoKrates version string, or None when it is unavailable."""
    try:
        result = subprocess.run(
            [zokrates_bin, "--version"],
            capture_output=True,
            text=True,
            check=False,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None
