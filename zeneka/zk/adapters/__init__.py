from .mock_verifier import MockVerifier

__all__ = ["MockVerifier"]
