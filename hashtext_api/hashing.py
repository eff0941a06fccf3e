"""
SHA-256 helpers shared by user tokens and stored text.
"""

import hashlib


def sha256_hex(text: str) -> str:
    """Return the lowercase hex SHA-256 digest of the UTF-8 encoded text."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def user_token(name: str) -> str:
    """Token a user with this registration name authenticates with."""
    return sha256_hex(name)
