"""
Configuration for mock streams.

Environment-level defaults are read once at import time. Per-mock settings
live on `MockConfig`, which every `Mock`/`Handle` pair shares.
"""

import os
from typing import Final

from pydantic import BaseModel, ConfigDict

_DEFAULT_PREVIEW_BYTES: Final = 64
"""Payload bytes rendered in diagnostics when the environment does not say otherwise."""


def _preview_bytes_from_env() -> int:
    raw = os.environ.get("MOCK_IO_PREVIEW_BYTES", str(_DEFAULT_PREVIEW_BYTES))
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(
            f"Invalid MOCK_IO_PREVIEW_BYTES environment variable: '{raw}'. Expected an integer."
        ) from None
    if value < 0:
        raise ValueError(f"MOCK_IO_PREVIEW_BYTES must not be negative, got {value}")
    return value


PREVIEW_BYTES: Final = _preview_bytes_from_env()
"""Maximum bytes of a payload shown in log lines and failure messages."""


class StrictBaseModel(BaseModel):
    """A strict, immutable pydantic base model."""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        strict=True,
        validate_default=True,
    )


class MockConfig(StrictBaseModel):
    """Runtime configuration for a mock stream pair."""

    name: str = "mock"
    """Label used in log lines and failure messages to tell mocks apart."""

    preview_bytes: int = PREVIEW_BYTES
    """Payloads longer than this are truncated in diagnostics."""

    verify_unused: bool = True
    """Raise `UnusedAction` on dispose when scripted actions were never consumed."""

    def preview(self, data: bytes) -> str:
        """
        Render a payload for a diagnostic message.

        Long payloads are cut to `preview_bytes` and annotated with their full length.
        """
        if len(data) <= self.preview_bytes:
            return repr(bytes(data))
        head = bytes(data[: self.preview_bytes])
        return f"{head!r}... ({len(data)} bytes)"
