"""Factory that builds any charting toolkit against one admission gate.

    tools = ChartingTools(gate)
    world = tools.new(ChartedWorld, 32)
    paths = tools.new(ChartedPaths, world, connectivity=8)

Toolkits do not share a base class; anything whose constructor takes the gate
as its first argument can be built this way.
"""

from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from .gate import AdmissionGate

ToolT = TypeVar("ToolT")


class ChartingTools:
    """Binds a gate so callers do not thread it through every constructor."""

    def __init__(self, gate: Optional[AdmissionGate] = None):
        self.gate = gate if gate is not None else AdmissionGate()

    def new(self, tool_type: Type[ToolT], *args: Any, **kwargs: Any) -> ToolT:
        """Construct ``tool_type(gate, *args, **kwargs)``; raises ``CapacityExceeded`` when full."""
        return tool_type(self.gate, *args, **kwargs)

    def active(self) -> int:
        """Number of toolkits currently holding a slot (advisory)."""
        return self.gate.current_count()
