"""Tests for cache key derivation."""

from hashlib import sha1

from plexcord.core.keys import derive_cache_key, is_cache_key


def test_derive_cache_key_is_deterministic():
    """The same server and item always produce the same key."""
    assert derive_cache_key("server-uuid", "1234") == derive_cache_key(
        "server-uuid", "1234"
    )


def test_derive_cache_key_differs_per_item_and_server():
    """Changing either identifier changes the key."""
    base = derive_cache_key("server-uuid", "1234")

    assert derive_cache_key("server-uuid", "1235") != base
    assert derive_cache_key("other-server", "1234") != base


def test_derive_cache_key_is_sha1_of_concatenation():
    """Keys are the SHA-1 of the identifiers joined without a separator."""
    key = derive_cache_key("abc", "42")

    assert key == sha1(b"abc42").hexdigest()
    assert len(key) == 40
    assert is_cache_key(key)


def test_is_cache_key_rejects_other_shapes():
    """Only 40 character lowercase hex strings are keys."""
    assert not is_cache_key("")
    assert not is_cache_key("../etc/passwd")
    assert not is_cache_key("A" * 40)
    assert not is_cache_key("a" * 39)
    assert not is_cache_key("a" * 40 + "\n")
