"""Exception types raised inside the trust-scoring system.

None of these escape a pipeline run: they are raised at IO seams and caught
at the per-claim, per-signal, or reload boundary that owns the fallback.
"""


class TruthCheckError(RuntimeError):
    """Base class for system errors."""


class RemoteServiceError(TruthCheckError):
    """Raised when a remote collaborator (LLM, search API) fails a request."""


class BiasSnapshotError(TruthCheckError):
    """Raised when a bias table snapshot cannot be fetched or is malformed."""
