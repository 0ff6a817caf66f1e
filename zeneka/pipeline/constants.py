"""Pipeline constants for circuit preparation and artifact export."""

from __future__ import annotations

H0_PLACEHOLDER = "{{h0}}"
H1_PLACEHOLDER = "{{h1}}"

CIRCUIT_SUFFIX = ".zok"
COMPILED_CIRCUIT = "out"
WITNESS_FILE = "witness"
PROVING_KEY_FILE = "proving.key"
VERIFICATION_KEY_FILE = "verification.key"
PROOF_FILE = "proof.json"

DEFAULT_ZOKRATES_BIN = "zokrates"
DEFAULT_PROVER_TIMEOUT = 600.0
DEFAULT_WORK_DIR = ".zeneka"
DEFAULT_OUTPUT_DIR = "."

INPUTS_DOCUMENT = "_inputs.json"
VK_DOCUMENT = "_vk.json"
VK_ID_DOCUMENT = "_vk_id.json"
PROOF_HASH_DOCUMENT = "_proofHash.json"
PROOF_DOCUMENT = "_proof.json"

JSON_INDENT = 2
