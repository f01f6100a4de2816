"""Exception types raised by chartkit toolkits.

Every failure is local to the call that raised it. Shared state (the gate
counter, charted grids) is left consistent, so callers can catch, decide and
carry on. Unreachable destinations are not errors: path queries return None.
"""

from __future__ import annotations

from typing import Any, Optional


class ChartingError(Exception):
    """Base class for all chartkit errors."""


class CapacityExceeded(ChartingError):
    """The admission gate has no free slot.

    Recoverable: the caller decides whether to back off and retry (see
    ``AdmissionGate.acquire_with_retry``) or give up.
    """

    def __init__(self, limit: int, outstanding: int):
        self.limit = limit
        self.outstanding = outstanding
        super().__init__(
            f"Admission gate saturated: {outstanding}/{limit} charting tools already alive"
        )


class OutOfBounds(ChartingError, IndexError):
    """A coordinate or window lies outside the charted grid."""

    def __init__(self, coordinate: Any, size: int):
        self.coordinate = coordinate
        self.size = size
        super().__init__(f"Coordinate {coordinate} is outside a {size}x{size} grid")


class TileOccupied(ChartingError):
    """``set`` was called on a coordinate that already holds a tile."""

    def __init__(self, coordinate: Any, existing: Any):
        self.coordinate = coordinate
        self.existing = existing
        super().__init__(
            f"Tile at {coordinate} is already charted; use overwrite() to replace it"
        )


class SlotReleasedError(ChartingError, RuntimeError):
    """A gate slot was returned twice, or to a gate that did not issue it."""


class ToolClosedError(ChartingError, RuntimeError):
    """An operation was attempted on a toolkit that already gave back its slot."""

    def __init__(self, tool_name: str):
        self.tool_name = tool_name
        super().__init__(f"{tool_name} is closed")


class DiscoveryError(ChartingError):
    """The host world refused to reveal a tile (budget spent, energy low, ...)."""

    def __init__(self, message: str, coordinate: Optional[Any] = None):
        self.coordinate = coordinate
        super().__init__(message)
