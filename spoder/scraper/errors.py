"""Fatal fetch failures.

Each failure is raised once, with the underlying socket/TLS exception kept
as ``cause``.  A clean EOF or a failing read is *not* an error: the fetch
loop flushes what it has and stops.
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class for fatal fetch failures."""

    category = "fetch"

    def __init__(self, target: str, cause: BaseException | None = None) -> None:
        self.target = target
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{self.category} failed for {target}{detail}")


class ResolutionError(FetchError):
    """The host name could not be resolved."""

    category = "resolution"


class ConnectError(FetchError):
    """None of the resolved addresses accepted a TCP connection."""

    category = "connect"


class HandshakeError(FetchError):
    """TLS negotiation failed."""

    category = "handshake"


class WriteError(FetchError):
    """The request could not be fully sent.

    Transient failures are not retried.
    """

    category = "write"
