"""Content fingerprint used to detect re-uploads of the same file."""

import hashlib


def compute_fingerprint(content: bytes) -> str:
    """Return the SHA-256 hex digest of the raw upload bytes."""
    return hashlib.sha256(content).hexdigest()
