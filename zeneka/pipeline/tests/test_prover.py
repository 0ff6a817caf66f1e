"""
Tests for the ZoKrates subprocess driver, using shell scripts as the binary.
"""

import os
import stat
import sys

import pytest

from zeneka.pipeline.prover import CompiledCircuit, ZokratesProver, zokrates_version
from zeneka.zk.exceptions import ProverError
from zeneka.zk.types import ProvingScheme

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="needs a POSIX shell")

# Logs its arguments and writes the files `setup` and `generate-proof` produce.
FAKE_ZOKRATES = """#!/bin/sh
echo "$@" >> "{log}"
case "$1" in
  --version) echo "ZoKrates 0.5.1" ;;
  setup)
    while [ "$#" -gt 0 ]; do
      if [ "$1" = "--verification-key-path" ]; then echo "vk.a = 1, 2" > "$2"; fi
      shift
    done ;;
  generate-proof)
    while [ "$#" -gt 0 ]; do
      if [ "$1" = "--proof-path" ]; then echo '{{"proof": {{}}, "inputs": []}}' > "$2"; fi
      shift
    done ;;
  fail) echo "boom" >&2; exit 3 ;;
esac
"""


@pytest.fixture
def fake_bin(tmp_path):
    log = tmp_path / "calls.log"
    path = tmp_path / "zokrates"
    path.write_text(FAKE_ZOKRATES.format(log=log))
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return str(path), log


def test_version(fake_bin):
    assert zokrates_version(fake_bin[0]) == "ZoKrates 0.5.1"


def test_version_missing_binary(tmp_path):
    assert zokrates_version(str(tmp_path / "absent")) is None


@pytest.mark.trio
async def test_prepare_commands(fake_bin, tmp_path):
    binary, log = fake_bin
    prover = ZokratesProver(zokrates_bin=binary, timeout=10)
    circuit = await prover.prepare(tmp_path / "example.zok", ["0", "1", "2", "3", "16"], tmp_path)

    assert circuit == CompiledCircuit(program_path=tmp_path / "out", witness_path=tmp_path / "witness")
    lines = log.read_text().splitlines()
    assert lines[0].startswith("compile --input")
    assert lines[1].startswith("compute-witness")
    assert lines[1].endswith("--arguments 0 1 2 3 16")


@pytest.mark.trio
async def test_prove_reads_outputs(fake_bin, tmp_path):
    binary, log = fake_bin
    prover = ZokratesProver(zokrates_bin=binary, timeout=10)
    circuit = CompiledCircuit(program_path=tmp_path / "out", witness_path=tmp_path / "witness")

    raw = await prover.prove(ProvingScheme.GM17, circuit, tmp_path / "gm17")

    assert raw.scheme is ProvingScheme.GM17
    assert raw.verification_key_text.strip() == "vk.a = 1, 2"
    assert '"inputs"' in raw.proof_text
    assert all("--proving-scheme gm17" in line for line in log.read_text().splitlines())


@pytest.mark.trio
async def test_nonzero_exit_raises(fake_bin, tmp_path):
    prover = ZokratesProver(zokrates_bin=fake_bin[0], timeout=10)
    with pytest.raises(ProverError, match="boom"):
        await prover._run(["fail"], cwd=tmp_path)


@pytest.mark.trio
async def test_missing_binary_raises(tmp_path):
    prover = ZokratesProver(zokrates_bin=os.path.join(str(tmp_path), "absent"))
    with pytest.raises(ProverError, match="unable to run"):
        await prover._run(["compile"], cwd=tmp_path)


@pytest.mark.trio
async def test_timeout_raises(tmp_path):
    script = tmp_path / "slow"
    script.write_text("#!/bin/sh\nsleep 5\n")
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    prover = ZokratesProver(zokrates_bin=str(script), timeout=0.2)
    with pytest.raises(ProverError, match="timed out"):
        await prover._run(["setup"], cwd=tmp_path)


@pytest.mark.trio
async def test_unwritable_scheme_dir_raises(fake_bin, tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    prover = ZokratesProver(zokrates_bin=fake_bin[0], timeout=10)
    circuit = CompiledCircuit(program_path=tmp_path / "out", witness_path=tmp_path / "witness")

    with pytest.raises(ProverError, match="cannot create"):
        await prover.prove(ProvingScheme.G16, circuit, blocker / "g16")


@pytest.mark.trio
async def test_undecodable_output_raises(tmp_path):
    script = tmp_path / "zokrates"
    script.write_text(
        "#!/bin/sh\n"
        'while [ "$#" -gt 0 ]; do\n'
        '  case "$1" in --verification-key-path|--proof-path) printf \'\\377\\376\' > "$2" ;; esac\n'
        "  shift\n"
        "done\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    prover = ZokratesProver(zokrates_bin=str(script), timeout=10)
    circuit = CompiledCircuit(program_path=tmp_path / "out", witness_path=tmp_path / "witness")

    with pytest.raises(ProverError, match="unreadable prover output"):
        await prover.prove(ProvingScheme.G16, circuit, tmp_path / "g16")
