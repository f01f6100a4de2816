"""
Chartkit - charting tools for exploring agents.

Keep a private, mutable chart of a tile world, index points of interest in
it, reveal new tiles, and compute shortest routes over what has been charted.

Every toolkit holds one slot of an explicit, shared AdmissionGate for as long
as it is alive. No global state: create a gate and pass it in.
"""

__version__ = "0.1.0"

# Admission control
from .gate import AdmissionGate, GateSlot
from .toolbox import ChartingTools

# Toolkits
from .environment import (
    ChartedWorld,
    GridSnapshot,
    GridStore,
    InMemoryWorld,
    WorldOracle,
    TileGraph,
    build_graph,
    shortest_path,
    shortest_path_cost,
    nearest,
    path_costs,
    coordinates_to_direction,
    path_to_directions,
)
from .paths import ChartedPaths
from .poi import ChartedMap
from .bot import ChartingBot, line_coordinates

# Core schemas
from .schemas import (
    Content,
    ContentKind,
    Coordinate,
    Direction,
    PathResult,
    TileKind,
    TileProperties,
    TileRecord,
)

# Errors
from .errors import (
    CapacityExceeded,
    ChartingError,
    DiscoveryError,
    OutOfBounds,
    SlotReleasedError,
    TileOccupied,
    ToolClosedError,
)

__all__ = [
    # Admission control
    "AdmissionGate",
    "GateSlot",
    "ChartingTools",
    # Toolkits
    "ChartedWorld",
    "ChartedPaths",
    "ChartedMap",
    "ChartingBot",
    # Grid and world interfaces
    "GridSnapshot",
    "GridStore",
    "InMemoryWorld",
    "WorldOracle",
    # Graphs and searches
    "TileGraph",
    "build_graph",
    "shortest_path",
    "shortest_path_cost",
    "nearest",
    "path_costs",
    "coordinates_to_direction",
    "path_to_directions",
    "line_coordinates",
    # Schemas
    "Content",
    "ContentKind",
    "Coordinate",
    "Direction",
    "PathResult",
    "TileKind",
    "TileProperties",
    "TileRecord",
    # Errors
    "CapacityExceeded",
    "ChartingError",
    "DiscoveryError",
    "OutOfBounds",
    "SlotReleasedError",
    "TileOccupied",
    "ToolClosedError",
]
