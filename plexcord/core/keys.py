"""Cache key derivation."""

import re
from hashlib import sha1

__all__ = ["derive_cache_key", "is_cache_key"]

_CACHE_KEY_PATTERN = re.compile(r"[0-9a-f]{40}")


def derive_cache_key(server_id: str, item_id: str) -> str:
    """Derive the thumbnail cache key for a media item on a Plex server.

    The key is the SHA-1 hex digest of the two identifiers concatenated without a
    separator, so it is stable across restarts and identical for every event about
    the same item.

    Args:
        server_id (str): The Plex server's UUID.
        item_id (str): The media item's rating key.

    Returns:
        str: A 40 character lowercase hexadecimal digest.
    """
    return sha1(f"{server_id}{item_id}".encode()).hexdigest()


def is_cache_key(value: str) -> bool:
    """Check whether a string has the shape of a derived cache key."""
    return bool(_CACHE_KEY_PATTERN.fullmatch(value))
