"""
hashing.py - Content fingerprints

Fingerprints are only used to recognise identical workflow files across
branches. They are not a security boundary, so a short 64-bit BLAKE2b
digest is enough.
"""

import hashlib

DIGEST_SIZE = 8


def fingerprint(content: bytes) -> str:
    """
    Compute the fingerprint of a byte sequence

    Args:
        content: Raw bytes to fingerprint

    Returns:
        Lowercase hex digest (16 characters)
    """
    return hashlib.blake2b(content, digest_size=DIGEST_SIZE).hexdigest()
