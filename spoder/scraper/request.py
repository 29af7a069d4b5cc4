"""Serialise the single HTTP/1.1 GET request sent per fetch."""

from __future__ import annotations

DEFAULT_USER_AGENT = "spoder/0.1"


def _check_field(name: str, value: str) -> None:
    if "\r" in value or "\n" in value:
        raise ValueError(f"{name} must not contain CR or LF: {value!r}")
    if not value.isascii():
        raise ValueError(f"{name} must be ASCII: {value!r}")


def _check_target(path: str) -> None:
    # The request target is a single token: no SP, no controls.
    if any(ch.isspace() or ord(ch) < 0x20 or ord(ch) == 0x7F for ch in path):
        raise ValueError(f"path must be percent-encoded, got {path!r}")


def build_request(host: str, path: str = "/", user_agent: str = DEFAULT_USER_AGENT) -> bytes:
    """Return the exact request bytes for ``GET path`` on *host*.

    The connection is always ``close``: the body is read until the peer
    hangs up, so no keep-alive or chunked decoding is needed.  *path* must
    already be percent-encoded (see :func:`spoder.scraper.url.parse_url`).
    An IPv6 literal *host* is bracketed in the ``Host`` header.
    """
    path = path or "/"
    for name, value in (("host", host), ("path", path), ("user_agent", user_agent)):
        _check_field(name, value)
    _check_target(path)

    if ":" in host and not host.startswith("["):
        host = f"[{host}]"

    request = f"GET {path} HTTP/1.1\r\n"
    request += f"Host: {host}\r\n"
    request += "Connection: close\r\n"
    request += f"User-Agent: {user_agent}\r\n"
    request += "\r\n"
    return request.encode("ascii")
