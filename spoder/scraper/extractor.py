"""Streaming tag stripper: turns response chunks into :class:`TextSegment`s.

The extractor only knows two states, inside or outside a tag.  Tag bytes are
never copied anywhere, so a tag spanning many chunks costs nothing but the
state flag; memory is bounded by the longest run of text between two tags.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, Iterator, List, Optional

from spoder.scraper.models import TextSegment

logger = logging.getLogger(__name__)

DEFAULT_INCREMENT = 1024

_LT = 0x3C  # <
_GT = 0x3E  # >
_SPACE = 0x20
_DROPPED = frozenset((0x09, 0x0D))  # \t \r
_BLANK = frozenset((_SPACE, 0x0A))  # space \n


class ExtractionState(enum.Enum):
    OUTSIDE_TAG = "outside"
    INSIDE_TAG = "inside"


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------

class Accumulator:
    """Growable byte buffer for text not yet emitted.

    Capacity grows in fixed steps of *increment* bytes whenever an append
    would overflow it.  ``take`` copies the content out and resets the
    length and the blank flag; capacity is kept for the next run.
    """

    def __init__(self, increment: int = DEFAULT_INCREMENT) -> None:
        if increment <= 0:
            raise ValueError(f"increment must be positive, got {increment}")
        self._increment = increment
        self._buf = bytearray(increment)
        self._used = 0
        self.last_was_blank = False

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def __len__(self) -> int:
        return self._used

    def __bool__(self) -> bool:
        return self._used > 0

    def append(self, byte: int) -> None:
        if self._used >= len(self._buf):
            self._buf.extend(bytes(self._increment))
        self._buf[self._used] = byte
        self._used += 1

    def peek(self) -> bytes:
        return bytes(self._buf[: self._used])

    def take(self) -> bytes:
        data = bytes(self._buf[: self._used])
        self._used = 0
        self.last_was_blank = False
        return data


# ---------------------------------------------------------------------------
# Automaton
# ---------------------------------------------------------------------------

class TextExtractor:
    """Incremental tag-stripping automaton for one fetch.

    Call :meth:`feed` once per chunk read from the channel and
    :meth:`finish` once at end of stream.  State carries across ``feed``
    calls, so the output does not depend on where the chunks are split.
    """

    def __init__(self, increment: int = DEFAULT_INCREMENT) -> None:
        self.state = ExtractionState.OUTSIDE_TAG
        self.accumulator = Accumulator(increment)
        self._finished = False

    @property
    def truncated_tag(self) -> bool:
        """``True`` when the stream ended (or currently sits) inside a tag."""
        return self.state is ExtractionState.INSIDE_TAG

    def feed(self, chunk: bytes) -> List[TextSegment]:
        if self._finished:
            raise RuntimeError("feed() called after finish()")

        segments: List[TextSegment] = []
        acc = self.accumulator
        pos = 0
        end = len(chunk)

        while pos < end:
            if self.state is ExtractionState.INSIDE_TAG:
                close = chunk.find(b">", pos)
                if close == -1:
                    # Rest of the chunk is tag content; drop it.
                    return segments
                self.state = ExtractionState.OUTSIDE_TAG
                pos = close + 1
                continue

            byte = chunk[pos]
            pos += 1

            if byte == _LT:
                if acc:
                    segments.append(TextSegment(acc.take()))
                self.state = ExtractionState.INSIDE_TAG
            elif byte in _DROPPED:
                continue
            elif byte in _BLANK:
                if not acc.last_was_blank:
                    acc.append(_SPACE)
                    acc.last_was_blank = True
            else:
                acc.append(byte)
                acc.last_was_blank = False

        return segments

    def finish(self) -> Optional[TextSegment]:
        if self._finished:
            return None
        self._finished = True

        if self.truncated_tag:
            logger.debug("Stream ended inside a tag; discarding the fragment")

        if self.accumulator:
            return TextSegment(self.accumulator.take())
        return None


def extract_text(
    chunks: Iterable[bytes], increment: int = DEFAULT_INCREMENT
) -> Iterator[TextSegment]:
    """Run one :class:`TextExtractor` over *chunks* and yield every segment."""
    extractor = TextExtractor(increment)
    for chunk in chunks:
        yield from extractor.feed(chunk)
    tail = extractor.finish()
    if tail is not None:
        yield tail
