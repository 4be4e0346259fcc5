"""Exception hierarchy for band rendering."""

from __future__ import annotations

from typing import Optional


class MandelbandsError(Exception):
    """Base class for every error raised by :mod:`mandelbands`."""


class ConfigurationError(MandelbandsError, ValueError):
    """Invalid render configuration, detected before any work starts."""


class PartitionOverrunError(MandelbandsError):
    """A tile claims more pixels than its backing slice holds."""


class RenderCancelled(MandelbandsError):
    """A tile stopped early because its cancel event was set."""


class RenderError(MandelbandsError):
    """A worker failed; the output buffer must not be used."""

    def __init__(self, message: str, failed_tile: Optional[object] = None) -> None:
        super().__init__(message)
        self.failed_tile = failed_tile
