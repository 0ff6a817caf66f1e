"""
Command-line interface for ZeneKa.
"""

import json
import sys
from pathlib import Path

import click
import trio
from rich.console import Console
from rich.table import Table

from zeneka import __version__
from zeneka.pipeline import ProofPipeline, load_settings
from zeneka.pipeline.prover import zokrates_version
from zeneka.zk.commitment import digest
from zeneka.zk.encoding import circuit_inputs, encode
from zeneka.zk.exceptions import MalformedProofError, ZenekaError
from zeneka.zk.identity import identify
from zeneka.zk.keys import parse_verification_key
from zeneka.zk.types import Proof, ProvingScheme

SCHEME_CHOICE = click.Choice([scheme.value for scheme in ProvingScheme], case_sensitive=False)


def _fail(message: str) -> None:
    click.echo(click.style(f"✗ Error: {message}", fg="red"), err=True)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def main():
    """
    ZeneKa - commit-reveal registry tooling for zkSNARK proofs.

    Encodes plaintext for a ZoKrates circuit, drives the external prover
    and exports verification keys, proofs and their identifiers.
    """
    pass


@main.command(name="encode")
@click.argument("plaintext")
@click.option("--address", default=None, help="Prover account address (0x hex or decimal)")
def encode_cmd(plaintext, address):
    """
    Show the circuit chunks and commitment for PLAINTEXT.

    Examples:

        zeneka encode hi

        zeneka encode hi --address 0x1234
    """
    try:
        chunks = encode(plaintext)
        commitment = digest(chunks)
        h0, h1 = commitment.as_decimal()

        click.echo(f"chunks: {', '.join(chunks.as_decimal())}")
        click.echo(f"h0:     {h0}")
        click.echo(f"h1:     {h1}")
        if address is not None:
            click.echo(f"inputs: {' '.join(circuit_inputs(chunks, address))}")
    except (ZenekaError, ValueError) as e:
        _fail(str(e))


@main.command()
@click.argument("template", type=click.Path(exists=True, dir_okay=False))
@click.argument("plaintext")
@click.argument("address")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False), default=None, help="YAML settings file")
@click.option("--output-dir", type=click.Path(file_okay=False), default=None, help="Directory for exported documents")
@click.option("--scheme", "schemes", multiple=True, type=SCHEME_CHOICE, help="Proving scheme (repeatable, default all)")
@click.option("--sequential", is_flag=True, help="Run proving schemes one after another")
def run(template, plaintext, address, config_path, output_dir, schemes, sequential):
    """
    Run the full proof pipeline for TEMPLATE.

    Renders the commitment into the circuit, runs ZoKrates for every
    proving scheme and writes the exported documents.

    Examples:

        zeneka run example.zok.tpl hi 0x1234

        zeneka run example.zok.tpl hi 0x1234 --scheme G16 --sequential
    """
    try:
        settings = load_settings(config_path)
        settings = settings.with_overrides(
            output_dir=Path(output_dir) if output_dir else None,
            schemes=tuple(ProvingScheme.parse(s) for s in schemes) or None,
            parallel=False if sequential else None,
        )

        version = zokrates_version(settings.zokrates_bin)
        if version is None:
            _fail(f"ZoKrates not found: {settings.zokrates_bin}")
        click.echo(click.style(f"Using {version}", fg="cyan"))

        pipeline = ProofPipeline(settings)
        artifacts = trio.run(pipeline.run, template, plaintext, address)
        written = artifacts.write(settings.output_dir)
    except Exception as e:
        _fail(str(e))

    table = Table(title=f"ZeneKa artifacts: {artifacts.stem}")
    table.add_column("Scheme", style="cyan")
    table.add_column("Key id")
    table.add_column("Proof hash")
    for scheme, scheme_artifacts in artifacts.schemes.items():
        table.add_row(scheme.value, scheme_artifacts.key_id, scheme_artifacts.proof_hash)
    Console().print(table)

    click.echo(click.style(f"✓ Wrote {len(written)} files to {settings.output_dir}", fg="green"))
    for path in written:
        click.echo(f"  {path}")


@main.command(name="vk-id")
@click.argument("vk_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--scheme", type=SCHEME_CHOICE, default="G16", show_default=True)
def vk_id(vk_file, scheme):
    """Print the identifier of a ZoKrates verification key file."""
    try:
        raw = Path(vk_file).read_text(encoding="utf-8")
        key = parse_verification_key(raw, scheme)
        click.echo(identify(key))
    except (ZenekaError, ValueError) as e:
        _fail(str(e))


@main.command(name="proof-hash")
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--scheme", type=SCHEME_CHOICE, default="G16", show_default=True)
def proof_hash(proof_file, scheme):
    """Print the hash a prover commits to for a ZoKrates proof.json file."""
    try:
        try:
            document = json.loads(Path(proof_file).read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise MalformedProofError(f"{proof_file} is not JSON: {exc}") from exc
        proof = Proof.from_json(scheme, document)
        click.echo(identify(proof))
    except (ZenekaError, ValueError) as e:
        _fail(str(e))


if __name__ == "__main__":
    main()
