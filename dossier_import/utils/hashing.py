"""Hashing utilities for import memoization."""

import hashlib


def hash_string(value: str) -> str:
    """Compute SHA256 hash of a string value.

    Used as the memoization key for raw import text: identical payloads
    always hash to the same 64-character hex digest.
    """
    hash_obj = hashlib.sha256(value.encode("utf-8"))
    return hash_obj.hexdigest()
