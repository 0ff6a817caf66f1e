"""Circuit template rendering."""

from __future__ import annotations

from pathlib import Path

from ..zk.types import CommitmentDigest
from .constants import CIRCUIT_SUFFIX, H0_PLACEHOLDER, H1_PLACEHOLDER


def template_stem(template_path: str | Path) -> str:
    """File name up to its first dot: `example.zok.tpl` -> `example`."""
    return Path(template_path).name.split(".")[0]


def render_template(source: str, commitment: CommitmentDigest) -> str:
    """
    Hard-code the commitment halves into the circuit source.

    Literal replacement of the first occurrence of each placeholder, not a
    templating language.
    """
    h0, h1 = commitment.as_decimal()
    rendered = source.replace(H0_PLACEHOLDER, h0, 1)
    return rendered.replace(H1_PLACEHOLDER, h1, 1)


def write_circuit(
    template_path: str | Path, commitment: CommitmentDigest, work_dir: str | Path
) -> Path:
    template_path = Path(template_path)
    source = template_path.read_text(encoding="utf-8")
    circuit_path = Path(work_dir) / f"{template_stem(template_path)}{CIRCUIT_SUFFIX}"
    circuit_path.parent.mkdir(parents=True, exist_ok=True)
    circuit_path.write_text(render_template(source, commitment), encoding="utf-8")
    return circuit_path
