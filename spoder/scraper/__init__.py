"""Scraper package — connect, request and strip markup from one resource."""

from spoder.scraper.channel import Channel, connect, resolve
from spoder.scraper.errors import (
    ConnectError,
    FetchError,
    HandshakeError,
    ResolutionError,
    WriteError,
)
from spoder.scraper.extractor import ExtractionState, TextExtractor, extract_text
from spoder.scraper.fetcher import fetch_segments, fetch_text
from spoder.scraper.models import Endpoint, TextSegment
from spoder.scraper.request import build_request
from spoder.scraper.url import parse_url

__all__ = [
    "Channel",
    "ConnectError",
    "Endpoint",
    "ExtractionState",
    "FetchError",
    "HandshakeError",
    "ResolutionError",
    "TextExtractor",
    "TextSegment",
    "WriteError",
    "build_request",
    "connect",
    "extract_text",
    "fetch_segments",
    "fetch_text",
    "parse_url",
    "resolve",
]
