"""
Custom exceptions for ZeneKa.

These exceptions provide structured error handling for the encoding pipeline
and the commit-reveal registry. Registry rejections that must not leak
information (an unauthorized or invalid reveal) are deliberately NOT
exceptions: `Registry.prove` returns no event instead.
"""


class ZenekaError(Exception):
    """Base exception for ZeneKa errors."""

    pass


class InputOverflowError(ZenekaError):
    """Plaintext encodes to more chunks than the circuit accepts."""

    pass


class MalformedKeyError(ZenekaError):
    """Verification key text does not match its proving scheme layout."""

    pass


class MalformedProofError(ZenekaError):
    """Proof document or proof values do not match the scheme layout."""

    pass


class ProverError(ZenekaError):
    """The external proving toolchain failed."""

    pass


class ConfigurationError(ZenekaError):
    """Configuration error."""

    pass


class DuplicateCommitmentError(ZenekaError):
    """A proof hash was committed a second time."""

    pass


class UnverifiedQueryError(ZenekaError):
    """Inputs were requested before a successful reveal."""

    pass
