"""Session-cookie safety: server URL checks, origin comparison and log redaction."""

from __future__ import annotations

from typing import Mapping
from urllib.parse import urlparse

import httpx


SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-molgenis-token"})
LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "::1"})

_DEFAULT_PORTS = {"http": 80, "https": 443}


def sanitize_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy ``headers`` with session cookies and tokens masked, for debug logs."""
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }


def validate_base_url(url: str, *, allow_http: bool = False) -> None:
    """Reject server URLs the session cookie must not travel to.

    Plain http is accepted for a local MOLGENIS (the default
    ``http://localhost:8080``) or when ``allow_http`` is set.
    """
    if "\x00" in url:
        raise ValueError("MOLGENIS server URL contains a NUL character")
    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        raise ValueError(f"MOLGENIS server URL needs an http(s) scheme, got {url!r}")
    if not parsed.netloc:
        raise ValueError(f"MOLGENIS server URL has no host: {url!r}")
    host = (parsed.hostname or "").lower()
    if parsed.scheme == "http" and not allow_http and host not in LOOPBACK_HOSTS:
        raise ValueError(
            f"refusing to send the session cookie over plain http to {host}; pass allow_http=True"
        )


def _origin(url: httpx.URL) -> tuple[str, str, int | None]:
    scheme = url.scheme.lower()
    return scheme, url.host.lower(), url.port or _DEFAULT_PORTS.get(scheme)


def is_same_origin(url: httpx.URL | str, base_url: httpx.URL | str) -> bool:
    """Return True when ``url`` shares scheme, host and port with ``base_url``."""
    return _origin(httpx.URL(url)) == _origin(httpx.URL(base_url))
