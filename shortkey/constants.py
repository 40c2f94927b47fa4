"""Shared limits and alphabet for short keys."""

import string

# Broadly compatible upper bound; browsers and proxies start failing well past this
MAX_URL_LENGTH = 2048

# Salted attempts before giving up on a long URL
MAX_COLLISION_RETRIES = 5

KEY_LENGTH = 7

# URL-safe base64 alphabet (RFC 4648 section 5)
KEY_ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"

ALLOWED_SCHEMES = ("http", "https")
