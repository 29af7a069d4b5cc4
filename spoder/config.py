"""Runtime settings for spoder.

Values can be overridden via environment variables or a `.env` file in the
project root (loaded automatically when this module is imported).

There is no module-level ``settings`` instance: the CLI builds
a :class:`Settings` per invocation and passes it down to the fetch loop.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    # ------------------------------------------------------------------
    # Network
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SPODER_TIMEOUT", "30.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SPODER_USER_AGENT", "spoder/0.1")
    )
    ipv6: bool = field(default_factory=lambda: _env_bool("SPODER_IPV6", "false"))

    # ------------------------------------------------------------------
    # Read loop / extraction
    # ------------------------------------------------------------------
    read_size: int = field(
        default_factory=lambda: int(os.environ.get("SPODER_READ_SIZE", "4096"))
    )
    buffer_increment: int = field(
        default_factory=lambda: int(os.environ.get("SPODER_BUFFER_INCREMENT", "1024"))
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("SPODER_LOG_LEVEL", "WARNING")
    )

    def __post_init__(self) -> None:
        if self.read_size <= 0:
            raise ValueError(f"read_size must be positive, got {self.read_size}")
        if self.buffer_increment <= 0:
            raise ValueError(
                f"buffer_increment must be positive, got {self.buffer_increment}"
            )
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError(
                f"request_timeout must be positive, got {self.request_timeout}"
            )

    def with_overrides(self, **overrides) -> Settings:
        """Return a copy with *overrides* applied; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
