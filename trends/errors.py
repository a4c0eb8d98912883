from __future__ import annotations


class TrendsError(Exception):
    """Base class for errors raised by the trends core."""


class InvalidConfiguration(TrendsError, ValueError):
    """A caller asked for something that can never be computed (e.g. an even centered window)."""


class InsufficientData(TrendsError, ValueError):
    """Not enough usable observations to compute a value."""


class MalformedUpstreamData(TrendsError, ValueError):
    """Upstream payload does not have the expected shape."""
