"""radioRecall — live radio stream recorder with fingerprint-based deduplication."""

__version__ = "0.1.0"
