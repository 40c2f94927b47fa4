"""URL building utilities for shortkey."""


def build_short_url(
    short_key: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.

    Leading and trailing slashes on either part are normalised, so
    ``http://sho.rt/`` and ``http://sho.rt`` produce the same result.

    Args:
        short_key: The short key
        base_url: Base URL (e.g., https://sho.rt)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_key}"
    return f"{base}/{short_key}"
