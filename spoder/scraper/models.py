"""Data models for the fetch-and-extract pipeline."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Endpoint:
    """Where to connect: host, TCP port and whether to speak TLS."""

    host: str
    port: int
    secure: bool = False

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("Endpoint host must not be empty")
        if not 0 <= self.port <= 65535:
            raise ValueError(
                f"Port must be an integer between 0 and 65535, got {self.port}"
            )

    def __str__(self) -> str:
        scheme = "https" if self.secure else "http"
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{scheme}://{host}:{self.port}"


@dataclass(frozen=True)
class TextSegment:
    """One run of tag-free, whitespace-normalised text.

    Segments split only at ``<``, so a UTF-8 sequence is never cut in two.
    """

    data: bytes

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", errors="replace")

    def __len__(self) -> int:
        return len(self.data)

    def __str__(self) -> str:
        return self.text
