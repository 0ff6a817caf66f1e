"""
Encoding and hashing configuration for ZeneKa circuit inputs.

The values below are shared between the host-side encoder and the circuit
template, so changing any of them invalidates every compiled circuit and
every identifier already registered.
"""

# ============================================================================
# FIELD ENCODING
# ============================================================================

# Number of field elements the circuit accepts as private input
CHUNK_COUNT = 4

# Hex characters of plaintext carried by one chunk
CHUNK_HEX_WIDTH = 4

# Width of the big-endian buffer each chunk occupies in the commitment hash
CHUNK_BYTES = 16

# ============================================================================
# COMMITMENT HASH
# ============================================================================

COMMITMENT_HASH_FUNCTION = "SHA-256"
COMMITMENT_DIGEST_BYTES = 32
COMMITMENT_HALF_BYTES = COMMITMENT_DIGEST_BYTES // 2

# ============================================================================
# IDENTITY HASH
# ============================================================================

# Matches the target chain's native hash (Solidity keccak256)
IDENTITY_HASH_FUNCTION = "keccak256"

# Every scalar is packed as one ABI uint256 word
IDENTITY_WORD_TYPE = "uint256"
IDENTITY_WORD_BYTES = 32
IDENTITY_WORD_MAX = 2**256 - 1

# Flatten depth of the canonical proof value sequence
PROOF_FLATTEN_DEPTH = 2

# Depth at which exported proof leaves are converted to unsigned integers
UINT_TREE_DEPTH = 3

# ============================================================================
# ADDRESSES
# ============================================================================

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def validate_config() -> bool:
    """
    Validate configuration parameters.

    Returns:
        True if configuration is valid

    Raises:
        AssertionError: If configuration is invalid
    """
    assert CHUNK_COUNT > 0, "Circuit needs at least one chunk"
    assert CHUNK_HEX_WIDTH % 2 == 0, "Chunk width must cover whole bytes"
    assert CHUNK_HEX_WIDTH // 2 <= CHUNK_BYTES, "Chunk does not fit its buffer"
    assert COMMITMENT_HALF_BYTES * 2 == COMMITMENT_DIGEST_BYTES
    assert IDENTITY_WORD_BYTES * 8 == 256, "ABI words are 256 bits"

    return True


# Auto-validate on import
validate_config()
