"""Charted grids, host oracles, tile graphs and route searches."""

from .oracle import InMemoryWorld, WorldOracle
from .grid import ChartedWorld, GridSnapshot, GridStore
from .graph import TileGraph, build_graph
from .helpers import (
    shortest_path,
    shortest_path_cost,
    nearest,
    path_costs,
    coordinates_to_direction,
    path_to_directions,
)

__all__ = [
    "InMemoryWorld",
    "WorldOracle",
    "ChartedWorld",
    "GridSnapshot",
    "GridStore",
    "TileGraph",
    "build_graph",
    "shortest_path",
    "shortest_path_cost",
    "nearest",
    "path_costs",
    "coordinates_to_direction",
    "path_to_directions",
]
