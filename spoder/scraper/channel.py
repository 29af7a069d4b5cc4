"""Address resolution, TCP connect and the plain/TLS channel wrappers.

``connect`` is the only entry point the fetch loop needs: it resolves the
endpoint, opens a socket to the first reachable candidate and, when the
endpoint is secure, performs the TLS handshake.  Whatever comes back
satisfies :class:`Channel`, so the read loop never branches on transport
kind.
"""

from __future__ import annotations

import logging
import socket
import ssl
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from typing import Any, List, Optional, Protocol, Tuple

from spoder.scraper.errors import ConnectError, HandshakeError, ResolutionError
from spoder.scraper.models import Endpoint

logger = logging.getLogger(__name__)

# (family, type, proto, canonname, sockaddr) as returned by getaddrinfo
AddrInfo = Tuple[int, int, int, str, Tuple[Any, ...]]


class Channel(Protocol):
    """Bidirectional byte stream owned by exactly one fetch."""

    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        """Return up to *max_bytes*; ``b""`` means the peer closed."""
        ...

    def write(self, data: bytes, timeout: Optional[float] = None) -> None:
        ...

    def close(self) -> None:
        ...


# ---------------------------------------------------------------------------
# Channel implementations
# ---------------------------------------------------------------------------

class PlainChannel:
    """:class:`Channel` over a connected TCP socket."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        self._sock.settimeout(timeout)
        return self._sock.recv(max_bytes)

    def write(self, data: bytes, timeout: Optional[float] = None) -> None:
        self._sock.settimeout(timeout)
        self._sock.sendall(data)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._sock.close()


class TlsChannel(PlainChannel):
    """:class:`Channel` over a TLS session.

    Closing sends the TLS close_notify first and then closes the
    underlying transport, even when the shutdown itself fails.
    """

    def __init__(self, sock: ssl.SSLSocket, shutdown_timeout: Optional[float] = None) -> None:
        super().__init__(sock)
        self._shutdown_timeout = shutdown_timeout

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        transport: socket.socket = self._sock
        try:
            self._sock.settimeout(self._shutdown_timeout)
            transport = self._sock.unwrap()
        except (ssl.SSLError, OSError) as exc:
            logger.debug("TLS shutdown failed: %s", exc)
        finally:
            transport.close()
            if transport is not self._sock:
                self._sock.close()


# ---------------------------------------------------------------------------
# Resolution / connect
# ---------------------------------------------------------------------------

def resolve(
    host: str,
    port: int,
    *,
    timeout: Optional[float] = None,
    family: int = socket.AF_INET,
) -> List[AddrInfo]:
    """Resolve *host* to an ordered list of stream-socket candidates.

    ``getaddrinfo`` has no timeout of its own, so it runs on a throw-away
    worker thread and the caller waits at most *timeout* seconds.

    Raises:
        ResolutionError: If the name is unknown, nothing is returned, or the
            lookup does not finish in time.
    """
    pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix="spoder-resolve")
    try:
        future = pool.submit(
            socket.getaddrinfo, host, port, family, socket.SOCK_STREAM
        )
        infos = future.result(timeout=timeout)
    except FutureTimeout:
        raise ResolutionError(
            host, socket.timeout(f"lookup timed out after {timeout}s")
        ) from None
    except (OSError, UnicodeError) as exc:
        raise ResolutionError(host, exc) from exc
    finally:
        pool.shutdown(wait=False)

    if not infos:
        raise ResolutionError(host, OSError("no addresses returned"))

    logger.debug(
        "Resolved %s to %s", host, ", ".join(str(info[4][0]) for info in infos)
    )
    return infos


def _open_first(
    endpoint: Endpoint, candidates: List[AddrInfo], timeout: Optional[float]
) -> socket.socket:
    """Connect to the first candidate that accepts; single pass, no retry."""
    last_error: Optional[OSError] = None
    for family, socktype, proto, _canon, sockaddr in candidates:
        try:
            sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            last_error = exc
            continue
        try:
            sock.settimeout(timeout)
            sock.connect(sockaddr)
        except OSError as exc:
            logger.debug("Connect to %s failed: %s", sockaddr, exc)
            last_error = exc
            sock.close()
            continue
        logger.debug("Connected to %s", sockaddr)
        return sock

    raise ConnectError(str(endpoint), last_error)


def _handshake(
    sock: socket.socket,
    endpoint: Endpoint,
    timeout: Optional[float],
    ssl_context: Optional[ssl.SSLContext],
) -> TlsChannel:
    context = ssl_context or ssl.create_default_context()
    sock.settimeout(timeout)
    try:
        tls = context.wrap_socket(sock, server_hostname=endpoint.host)
    except (ssl.SSLError, OSError) as exc:
        sock.close()
        raise HandshakeError(str(endpoint), exc) from exc
    logger.debug("TLS established with %s (%s)", endpoint.host, tls.version())
    return TlsChannel(tls, shutdown_timeout=timeout)


def connect(
    endpoint: Endpoint,
    *,
    timeout: Optional[float] = None,
    ssl_context: Optional[ssl.SSLContext] = None,
    family: int = socket.AF_INET,
) -> PlainChannel:
    """Open a :class:`Channel` to *endpoint*.

    Every blocking step (lookup, connect, handshake) is bounded by
    *timeout* seconds.

    Raises:
        ResolutionError: The host name cannot be resolved.
        ConnectError: No candidate address accepted the connection.
        HandshakeError: ``endpoint.secure`` and TLS negotiation failed.
    """
    candidates = resolve(endpoint.host, endpoint.port, timeout=timeout, family=family)
    sock = _open_first(endpoint, candidates, timeout)
    if endpoint.secure:
        return _handshake(sock, endpoint, timeout, ssl_context)
    return PlainChannel(sock)
