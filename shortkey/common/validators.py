"""Validation utilities for long URLs and short keys."""

import ipaddress
import re
import socket
from typing import Optional, Union
from urllib.parse import urlsplit

from ..constants import ALLOWED_SCHEMES, KEY_ALPHABET, KEY_LENGTH, MAX_URL_LENGTH
from ..exceptions import InvalidKeyError, ValidationError


IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# Targets a redirect-following client must never be sent to
BLOCKED_NETWORKS = tuple(
    ipaddress.ip_network(cidr)
    for cidr in (
        "127.0.0.0/8",      # loopback
        "10.0.0.0/8",       # private
        "172.16.0.0/12",    # private
        "192.168.0.0/16",   # private
        "0.0.0.0/8",        # "this" network
        "169.254.0.0/16",   # link-local, cloud metadata endpoints
        "::1/128",          # IPv6 loopback
        "::/128",           # IPv6 unspecified
        "fc00::/7",         # IPv6 unique local
        "fe80::/10",        # IPv6 link-local
    )
)

# IPv6 ranges whose low 32 bits are an IPv4 address
IPV4_EMBEDDING_NETWORKS = (
    ipaddress.ip_network("::/96"),          # IPv4-compatible (deprecated)
    ipaddress.ip_network("64:ff9b::/96"),   # NAT64
)

# Registered names after IDNA encoding; IP literals go through ipaddress
HOSTNAME_PATTERN = re.compile(r"[A-Za-z0-9.-]+")

SHORT_KEY_PATTERN = re.compile(f"[{re.escape(KEY_ALPHABET)}]+")


def _embedded_ipv4(address: ipaddress.IPv6Address) -> Optional[ipaddress.IPv4Address]:
    """Return the IPv4 address carried inside an IPv6 address, if any."""
    if address.ipv4_mapped:
        return address.ipv4_mapped
    if address.sixtofour:
        return address.sixtofour
    if any(address in network for network in IPV4_EMBEDDING_NETWORKS):
        return ipaddress.IPv4Address(int(address) & 0xFFFFFFFF)
    return None


def _parse_ip(host: str) -> Optional[IPAddress]:
    """Parse a host as an IP literal, unwrapping IPv4 carried in IPv6."""
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        # inet_aton also accepts the octal, hex and integer forms clients honour
        try:
            return ipaddress.IPv4Address(socket.inet_aton(host))
        except (OSError, ValueError):
            return None

    if isinstance(address, ipaddress.IPv6Address):
        return _embedded_ipv4(address) or address
    return address


def _normalize_host(host: str, bracketed: bool) -> str:
    """Return the ASCII form of a URL host.

    Args:
        host: Host as returned by ``urlsplit`` (lower-cased, no brackets)
        bracketed: Whether the host was written as ``[...]``

    Raises:
        ValidationError: If the host is not a legal name or IP literal
    """
    if bracketed:
        try:
            ipaddress.IPv6Address(host)
        except ValueError as e:
            raise ValidationError("format", f"invalid IPv6 host: {host}") from e
        return host

    if not host.isascii():
        # nameprep folds fullwidth digits and dots onto their ASCII forms
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError as e:
            raise ValidationError("format", "url host is not a valid domain name") from e

    host = host.rstrip(".")
    if not host or not HOSTNAME_PATTERN.fullmatch(host):
        raise ValidationError("format", "url host contains invalid characters")
    return host.lower()


def is_blocked_host(host: str) -> bool:
    """Check whether a host points at loopback or private address space.

    Host names are not resolved; only ``localhost`` names and IP literals
    are recognised.

    Args:
        host: Lower-cased ASCII host name or IP literal (without brackets)

    Returns:
        True if the host must be rejected
    """
    if host == "localhost" or host.endswith(".localhost"):
        return True

    address = _parse_ip(host)
    if address is None:
        return False

    return any(
        address.version == network.version and address in network
        for network in BLOCKED_NETWORKS
    )


def validate_long_url(url: str, max_length: int = MAX_URL_LENGTH) -> None:
    """Validate a URL submitted for shortening.

    Rules are checked in order: format (presence), length, format, scheme,
    ssrf.

    Args:
        url: The URL to validate
        max_length: Maximum accepted length in characters

    Raises:
        ValidationError: With ``rule`` naming the first violated rule
    """
    if not isinstance(url, str) or not url:
        raise ValidationError("format", "url is required")

    if len(url) > max_length:
        raise ValidationError(
            "length", f"url exceeds maximum length of {max_length} characters"
        )

    # Browsers read "\" as "/", so the authority they see differs from ours
    if "\\" in url:
        raise ValidationError("format", "url must not contain backslashes")

    try:
        parsed = urlsplit(url)
        # Accessing .port validates it
        parsed.port
    except ValueError as e:
        raise ValidationError("format", f"invalid url format: {e}") from e

    if parsed.scheme not in ALLOWED_SCHEMES:
        raise ValidationError("scheme", "url must use http or https scheme")

    if not parsed.hostname:
        raise ValidationError("format", "url must have a host")

    bracketed = "[" in parsed.netloc.rpartition("@")[2]
    host = _normalize_host(parsed.hostname, bracketed)

    if is_blocked_host(host):
        raise ValidationError("ssrf", "internal or private urls are not allowed")


def validate_short_key(short_key: str, length: int = KEY_LENGTH) -> None:
    """Validate the shape of a short key before it reaches the store.

    Args:
        short_key: Key taken from the redirect path
        length: Required key length

    Raises:
        InvalidKeyError: If the length or alphabet is wrong
    """
    if not isinstance(short_key, str) or len(short_key) != length:
        raise InvalidKeyError("invalid short key length")

    if not SHORT_KEY_PATTERN.fullmatch(short_key):
        raise InvalidKeyError("invalid short key format")
