"""Host substitution for debug start URLs."""

from __future__ import annotations

LOOPBACK_HOST = "http://localhost"
DEFAULT_REMOTE_HOST = "http://debug.example.edu"


def rewrite_debug_url(
    value: str,
    remote_host: str = DEFAULT_REMOTE_HOST,
    *,
    loopback_host: str = LOOPBACK_HOST,
) -> str:
    """Replace every ``loopback_host`` occurrence in ``value`` with ``remote_host``.

    The match is a plain, case-sensitive substring replacement: ports, paths
    and query strings following the host token are carried over untouched and
    values without the token pass through unchanged.

    >>> rewrite_debug_url("http://localhost:8080/MyApp")
    'http://debug.example.edu:8080/MyApp'
    """

    if not loopback_host:
        raise ValueError("loopback_host cannot be empty")
    return value.replace(loopback_host, remote_host)
