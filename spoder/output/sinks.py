"""Sinks: the only place extracted text is written anywhere.

A sink receives segments one at a time, in document order, and must not
assume anything about how many there are or how long they get.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import IO, Iterable, List, Optional, Protocol, Union

from spoder.scraper.models import TextSegment

Text = Union[TextSegment, str]


class Sink(Protocol):
    def write(self, segment: Text) -> None:
        ...

    def close(self) -> None:
        ...


class PrintSink:
    """Write each segment followed by *separator* to a text stream."""

    def __init__(self, stream: Optional[IO[str]] = None, separator: str = "\n") -> None:
        self._stream = stream
        self.separator = separator

    @property
    def stream(self) -> IO[str]:
        # Resolved lazily so a swapped sys.stdout (tests, redirection) is honoured.
        return self._stream if self._stream is not None else sys.stdout

    def write(self, segment: Text) -> None:
        self.stream.write(str(segment) + self.separator)

    def close(self) -> None:
        self.stream.flush()


class FileSink(PrintSink):
    """Write segments to *path* as UTF-8 text, one per line."""

    def __init__(self, path: Union[str, Path], separator: str = "\n") -> None:
        self.path = Path(path)
        super().__init__(self.path.open("w", encoding="utf-8"), separator)

    def close(self) -> None:
        if not self.stream.closed:
            self.stream.close()

    def __enter__(self) -> FileSink:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class CollectingSink:
    """Keep every segment in memory, e.g. for sorting or filtering later."""

    def __init__(self) -> None:
        self.segments: List[str] = []

    def write(self, segment: Text) -> None:
        self.segments.append(str(segment))

    def close(self) -> None:
        pass

    @property
    def text(self) -> str:
        return "".join(self.segments)


def drain(segments: Iterable[Text], sink: Sink) -> int:
    """Push every segment from *segments* into *sink*; return how many."""
    count = 0
    for segment in segments:
        sink.write(segment)
        count += 1
    return count
