"""
Proof pipeline: plaintext to exported registry artifacts.

    plaintext -> encode -> digest -> render circuit -> compile + witness
              -> per scheme: setup + prove -> parse + identify -> export

Per-scheme prover work runs concurrently in a trio nursery. The first
failure cancels the remaining schemes and nothing is exported.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import trio

from ..zk.commitment import digest
from ..zk.encoding import circuit_inputs, encode
from ..zk.types import ProvingScheme
from .artifacts import PipelineArtifacts, SchemeArtifacts, build_scheme_artifacts
from .prover import CircuitProver, CompiledCircuit, ZokratesProver
from .settings import PipelineSettings
from .template import template_stem, write_circuit


class ProofPipeline:
    def __init__(
        self,
        settings: Optional[PipelineSettings] = None,
        prover: Optional[CircuitProver] = None,
    ) -> None:
        self._settings = settings if settings is not None else PipelineSettings()
        if prover is None:
            prover = ZokratesProver(
                zokrates_bin=self._settings.zokrates_bin,
                timeout=self._settings.prover_timeout,
            )
        self._prover = prover

    @property
    def settings(self) -> PipelineSettings:
        return self._settings

    async def run(
        self, template_path: str | Path, plaintext: str, address: str
    ) -> PipelineArtifacts:
        """
        Produce artifacts for every configured scheme without writing them.

        Raises:
            InputOverflowError: Before any external call, if the plaintext
                does not fit the circuit
            ProverError: If any external prover step fails
            MalformedKeyError / MalformedProofError: If prover output does
                not parse for its scheme

        Any other exception raised by the prover propagates unchanged, after
        the remaining schemes are cancelled.
        """
        chunks = encode(plaintext)
        commitment = digest(chunks)
        inputs = circuit_inputs(chunks, address)

        work_dir = Path(self._settings.work_dir)
        work_dir.mkdir(parents=True, exist_ok=True)
        circuit_path = write_circuit(template_path, commitment, work_dir)
        circuit = await self._prover.prepare(circuit_path, inputs, work_dir)

        results: Dict[ProvingScheme, SchemeArtifacts] = {}
        if self._settings.parallel:
            await self._run_parallel(circuit, work_dir, results)
        else:
            for scheme in self._settings.schemes:
                await self._run_scheme(scheme, circuit, work_dir, results)

        return PipelineArtifacts(
            stem=template_stem(template_path),
            circuit_inputs=tuple(inputs),
            commitment=commitment,
            schemes={scheme: results[scheme] for scheme in self._settings.schemes},
        )

    async def run_and_export(
        self, template_path: str | Path, plaintext: str, address: str
    ) -> List[Path]:
        artifacts = await self.run(template_path, plaintext, address)
        return artifacts.write(self._settings.output_dir)

    async def _run_parallel(
        self,
        circuit: CompiledCircuit,
        work_dir: Path,
        results: Dict[ProvingScheme, SchemeArtifacts],
    ) -> None:
        failures: List[Exception] = []

        async with trio.open_nursery() as nursery:

            async def _guarded(scheme: ProvingScheme) -> None:
                try:
                    await self._run_scheme(scheme, circuit, work_dir, results)
                except Exception as exc:
                    failures.append(exc)
                    nursery.cancel_scope.cancel()

            for scheme in self._settings.schemes:
                nursery.start_soon(_guarded, scheme)

        if failures:
            raise failures[0]

    async def _run_scheme(
        self,
        scheme: ProvingScheme,
        circuit: CompiledCircuit,
        work_dir: Path,
        results: Dict[ProvingScheme, SchemeArtifacts],
    ) -> None:
        raw = await self._prover.prove(scheme, circuit, work_dir / scheme.layout.cli_name)
        results[scheme] = build_scheme_artifacts(raw)
