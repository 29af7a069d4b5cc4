"""Split an ``http``/``https`` URL into an :class:`Endpoint` and a path."""

from __future__ import annotations

from typing import Optional, Tuple
from urllib.parse import quote

from spoder.scraper.models import Endpoint

_DEFAULT_PORTS = {"http": 80, "https": 443}

# RFC 3986 pchar plus "/" and "?", and "%" so existing escapes survive.
_PATH_SAFE = "/?&=%:@!$'()*+,;~-._"


def parse_url(url: str, port: Optional[int] = None) -> Tuple[Endpoint, str]:
    """Parse *url* into ``(endpoint, path)``.

    Only ``http://`` and ``https://`` are accepted.  An explicit *port*
    overrides both the scheme default and any ``:port`` in the URL.

    Raises:
        ValueError: On an unsupported scheme, an empty host or a bad port.
    """
    if "://" not in url:
        raise ValueError(
            f"Invalid URL {url!r}: only accepted protocols are http and https"
        )
    scheme, rest = url.split("://", 1)
    scheme = scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise ValueError(
            f"Invalid protocol {scheme!r}: only accepted protocols are http and https"
        )

    cuts = [i for i in (rest.find(c) for c in "/?#") if i != -1]
    if not cuts:
        netloc, path = rest, "/"
    else:
        netloc, path = rest[: min(cuts)], rest[min(cuts):]
        if not path.startswith("/"):
            path = "/" + path

    # Fragments are never sent to the server.
    path = path.split("#", 1)[0] or "/"
    path = quote(path, safe=_PATH_SAFE)

    host, url_port = _split_netloc(netloc, _DEFAULT_PORTS[scheme], url)

    if not host:
        raise ValueError(f"Invalid URL {url!r}: missing host")

    endpoint = Endpoint(
        host=host,
        port=port if port is not None else url_port,
        secure=scheme == "https",
    )
    return endpoint, path


def _split_netloc(netloc: str, default_port: int, url: str) -> Tuple[str, int]:
    """Split ``host[:port]``; a bracketed IPv6 literal loses its brackets."""
    if netloc.startswith("["):
        close = netloc.find("]")
        if close == -1:
            raise ValueError(f"Invalid IPv6 literal in URL {url!r}")
        host, rest = netloc[1:close], netloc[close + 1 :]
        if not rest:
            return host, default_port
        if not rest.startswith(":"):
            raise ValueError(f"Invalid URL {url!r}")
        raw_port = rest[1:]
    elif ":" in netloc:
        host, raw_port = netloc.rsplit(":", 1)
    else:
        return netloc, default_port

    if not raw_port.isdigit():
        raise ValueError(f"Invalid port in URL {url!r}")
    return host, int(raw_port)
