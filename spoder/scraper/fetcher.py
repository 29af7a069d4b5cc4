"""Fetch one resource and stream its visible text.

``fetch_segments`` is the single fetch entry point: connect, send one GET,
then feed every chunk read from the channel into a :class:`TextExtractor`
until the peer closes, a read fails, or the caller cancels.
"""

from __future__ import annotations

import logging
import socket
import ssl
from typing import Iterator, List, Optional, Protocol

from spoder.config import Settings
from spoder.scraper.channel import connect
from spoder.scraper.errors import WriteError
from spoder.scraper.extractor import TextExtractor
from spoder.scraper.models import Endpoint, TextSegment
from spoder.scraper.request import build_request

logger = logging.getLogger(__name__)


class CancelToken(Protocol):
    """Anything with ``is_set()``, e.g. :class:`threading.Event`."""

    def is_set(self) -> bool:
        ...


def fetch_segments(
    endpoint: Endpoint,
    path: str = "/",
    *,
    settings: Optional[Settings] = None,
    cancel: Optional[CancelToken] = None,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> Iterator[TextSegment]:
    """Yield the text segments of ``GET path`` on *endpoint* in document order.

    The generator is lazy and single-use.  Nothing touches the network until
    the first ``next()``.  The channel is closed when the loop ends, when a
    fatal error propagates, or when the consumer stops iterating early.

    A read error (including a read timeout) is not fatal: it ends the
    stream like EOF, and whatever text was buffered is still flushed.
    *cancel* is checked once per read; once set, the loop stops the same
    way.

    Raises:
        ResolutionError, ConnectError, HandshakeError: From :func:`connect`.
        WriteError: The request could not be sent.
    """
    settings = settings or Settings()
    timeout = settings.request_timeout
    # An IPv6 literal cannot resolve under AF_INET.
    ipv6 = settings.ipv6 or ":" in endpoint.host
    family = socket.AF_UNSPEC if ipv6 else socket.AF_INET

    channel = connect(
        endpoint, timeout=timeout, ssl_context=ssl_context, family=family
    )

    try:
        request = build_request(endpoint.host, path, settings.user_agent)
        try:
            channel.write(request, timeout=timeout)
        except OSError as exc:
            raise WriteError(str(endpoint), exc) from exc
        logger.debug("Sent %d byte request for %s%s", len(request), endpoint, path)

        extractor = TextExtractor(settings.buffer_increment)
        total = 0
        while True:
            if cancel is not None and cancel.is_set():
                logger.info("Fetch of %s cancelled after %d bytes", endpoint, total)
                break
            try:
                chunk = channel.read(settings.read_size, timeout=timeout)
            except OSError as exc:
                logger.warning("Read from %s ended with error: %s", endpoint, exc)
                break
            if not chunk:
                break
            total += len(chunk)
            yield from extractor.feed(chunk)

        logger.debug("Read %d bytes from %s", total, endpoint)
        tail = extractor.finish()
        if tail is not None:
            yield tail
    finally:
        channel.close()


def fetch_text(
    endpoint: Endpoint,
    path: str = "/",
    *,
    settings: Optional[Settings] = None,
    cancel: Optional[CancelToken] = None,
    ssl_context: Optional[ssl.SSLContext] = None,
) -> List[str]:
    """Eager variant of :func:`fetch_segments` returning decoded strings."""
    return [
        segment.text
        for segment in fetch_segments(
            endpoint, path, settings=settings, cancel=cancel, ssl_context=ssl_context
        )
    ]
