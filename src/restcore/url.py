"""Scheme detection for request URLs."""

from __future__ import annotations

HTTP_PREFIX = "http://"
HTTPS_PREFIX = "https://"


def normalize_url(url: str, https: bool) -> tuple[str, bool]:
    """Return the effective URL and the HTTPS flag it implies.

    An explicit ``http://`` or ``https://`` prefix (any case) wins and decides
    the flag; a bare host gets the prefix matching the current ``https`` flag.
    """
    head = url[: len(HTTPS_PREFIX)].lower()
    if head.startswith(HTTP_PREFIX):
        return url, False
    if head == HTTPS_PREFIX:
        return url, True
    return (HTTPS_PREFIX if https else HTTP_PREFIX) + url, https


__all__ = ["HTTP_PREFIX", "HTTPS_PREFIX", "normalize_url"]
