class TorusRLWEError(Exception):
    """Base class for errors raised by torus_rlwe."""


class DimensionMismatchError(TorusRLWEError, ValueError):
    """Raised when ring elements, ciphertexts or keys disagree on (k, n)."""


class PlaintextRangeError(TorusRLWEError, ValueError):
    """Raised when a plaintext value does not fit into the configured bit width."""
