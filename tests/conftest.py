"""Shared fixtures: a one-shot loopback TCP server and a scripted channel."""

from __future__ import annotations

import socket
import ssl
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

import pytest

DATA_DIR = Path(__file__).resolve().parent / "data"
CERT_FILE = DATA_DIR / "localhost-cert.pem"
KEY_FILE = DATA_DIR / "localhost-key.pem"


class LoopbackServer:
    """Accept one connection, read the request head, send *chunks*, close.

    With ``hold_open=True`` the server keeps the connection open (without
    sending more) until the test finishes, to simulate a stalled peer.
    With *tls_context* the connection is wrapped server-side before the
    request is read.
    """

    def __init__(
        self,
        chunks: Iterable[bytes],
        hold_open: bool = False,
        close_immediately: bool = False,
        tls_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        self.chunks = list(chunks)
        self.hold_open = hold_open
        self.close_immediately = close_immediately
        self.tls_context = tls_context
        self.received = b""
        self._release = threading.Event()
        self._sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(1)
        self._sock.settimeout(10)
        self.port = self._sock.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)
        self._thread.start()

    def _serve(self) -> None:
        try:
            conn, _ = self._sock.accept()
        except OSError:
            return
        if self.close_immediately:
            conn.close()
            return
        conn.settimeout(10)
        if self.tls_context is not None:
            try:
                conn = self.tls_context.wrap_socket(conn, server_side=True)
            except OSError:
                # Client rejected the certificate or hung up mid-handshake.
                conn.close()
                return
        with conn:
            data = b""
            try:
                while b"\r\n\r\n" not in data:
                    part = conn.recv(1024)
                    if not part:
                        break
                    data += part
                self.received = data
                for chunk in self.chunks:
                    conn.sendall(chunk)
            except OSError:
                return
            if self.hold_open:
                self._release.wait(10)

    def stop(self) -> None:
        self._release.set()
        self._sock.close()
        self._thread.join(timeout=10)


@pytest.fixture()
def loopback_server() -> Iterable[Callable[..., LoopbackServer]]:
    """Factory fixture; every server started through it is stopped afterwards."""
    servers: List[LoopbackServer] = []

    def _start(chunks: Iterable[bytes] = (), **kwargs) -> LoopbackServer:
        server = LoopbackServer(chunks, **kwargs)
        servers.append(server)
        return server

    yield _start

    for server in servers:
        server.stop()


class ScriptedChannel:
    """In-memory :class:`Channel` replaying a list of reads.

    Each item is either ``bytes`` (returned by ``read``) or an exception
    instance (raised by ``read``).  After the script runs out, reads return
    ``b""`` (EOF).
    """

    def __init__(
        self,
        script: Iterable[Union[bytes, BaseException]] = (),
        write_error: Optional[BaseException] = None,
    ) -> None:
        self.script = list(script)
        self.write_error = write_error
        self.written = b""
        self.reads = 0
        self.closed = False

    def read(self, max_bytes: int, timeout: Optional[float] = None) -> bytes:
        self.reads += 1
        if not self.script:
            return b""
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def write(self, data: bytes, timeout: Optional[float] = None) -> None:
        if self.write_error is not None:
            raise self.write_error
        self.written += data

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def scripted_channel() -> Callable[..., ScriptedChannel]:
    return ScriptedChannel


@pytest.fixture()
def server_tls_context() -> ssl.SSLContext:
    """Server context using the self-signed ``localhost`` certificate."""
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
    context.load_cert_chain(CERT_FILE, KEY_FILE)
    return context


@pytest.fixture()
def client_tls_context() -> ssl.SSLContext:
    """Verifying client context that trusts only the test certificate."""
    return ssl.create_default_context(cafile=str(CERT_FILE))
