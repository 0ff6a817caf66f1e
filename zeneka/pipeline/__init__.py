"""Circuit preparation, external proving and artifact export."""

from .artifacts import PipelineArtifacts, SchemeArtifacts, build_scheme_artifacts
from .pipeline import ProofPipeline
from .prover import CircuitProver, CompiledCircuit, RawSchemeOutput, ZokratesProver
from .settings import PipelineSettings, load_settings
from .template import render_template, write_circuit

__all__ = [
    "ProofPipeline",
    "PipelineSettings",
    "load_settings",
    "PipelineArtifacts",
    "SchemeArtifacts",
    "build_scheme_artifacts",
    "CircuitProver",
    "CompiledCircuit",
    "RawSchemeOutput",
    "ZokratesProver",
    "render_template",
    "write_circuit",
]
