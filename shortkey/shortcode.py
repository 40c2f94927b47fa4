"""Short key generation."""

import base64
import hashlib

from .constants import KEY_LENGTH


class ShortKeyGenerator:
    """Derive fixed-length, URL-safe keys from long URLs.

    Keys are the first ``key_length`` characters of the URL-safe base64
    encoding of ``sha256(f"{long_url}:{salt}")``. The mapping is a pure
    function of its inputs, so a key computed today is the key computed
    after a restart.
    """

    def __init__(self, key_length: int = KEY_LENGTH):
        """Initialize short key generator.

        Args:
            key_length: Number of encoded characters kept (43 at most for SHA-256)
        """
        self.key_length = key_length

    def generate(self, long_url: str, salt: int = 0) -> str:
        """Generate the key for a long URL and salt.

        Salt 0 is the canonical key; higher salts are collision-retry
        variants.

        Args:
            long_url: The URL to hash
            salt: Non-negative retry counter

        Returns:
            Short key of ``key_length`` characters
        """
        digest = hashlib.sha256(f"{long_url}:{salt}".encode("utf-8")).digest()
        encoded = base64.urlsafe_b64encode(digest).decode("ascii")
        # 64^7 possible keys at the default length
        return encoded[:self.key_length]
