"""Weighted tile graphs built from charted grids.

A ``TileGraph`` is a value: nodes are the revealed, traversable tiles inside
a rectangular window, and every edge weight is the cost of *entering* the
destination tile. Uncharted tiles are simply absent, so no route can cross
territory the agent has not seen. Graphs are rebuilt from the current grid
content whenever they are requested and never write back to the grid.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Optional, Tuple

from ..config import Config
from ..errors import OutOfBounds
from ..logging_utils import log_debug
from ..schemas import Coordinate, TileKind, TileRecord
from .grid import GridStore


ORTHOGONAL_OFFSETS = ((-1, 0), (0, -1), (0, 1), (1, 0))
DIAGONAL_OFFSETS = ((-1, -1), (-1, 1), (1, -1), (1, 1))
CONNECTIVITY_OFFSETS = {
    4: ORTHOGONAL_OFFSETS,
    8: ORTHOGONAL_OFFSETS + DIAGONAL_OFFSETS,
}

Edge = Tuple[Coordinate, float]


@dataclass(frozen=True)
class TileGraph:
    """Directed adjacency over charted coordinates.

    ``edges`` holds ``(node, ((neighbor, weight), ...))`` pairs with nodes and
    neighbors both sorted, so two graphs built from the same grid and
    parameters compare equal and hash alike.
    """

    nodes: FrozenSet[Coordinate]
    edges: Tuple[Tuple[Coordinate, Tuple[Edge, ...]], ...]
    connectivity: int
    window: Tuple[Coordinate, Coordinate]
    _adjacency: Dict[Coordinate, Tuple[Edge, ...]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_adjacency", dict(self.edges))

    def neighbors(self, node: Coordinate) -> Tuple[Edge, ...]:
        return self._adjacency.get(node, ())

    def has_node(self, node: Coordinate) -> bool:
        return node in self.nodes

    def weight(self, source: Coordinate, target: Coordinate) -> Optional[float]:
        """Weight of the edge source -> target, or None when they are not linked."""
        for neighbor, weight in self.neighbors(source):
            if neighbor == target:
                return weight
        return None

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for _, edges in self.edges)

    def __contains__(self, node: object) -> bool:
        return node in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)


def _window_corner(value, fallback: Coordinate, size: int) -> Coordinate:
    if value is None:
        return fallback
    try:
        corner = Coordinate.of(value)
    except ValueError as exc:
        raise OutOfBounds(value, size) from exc
    if corner.row >= size or corner.col >= size:
        raise OutOfBounds(corner, size)
    return corner


def build_graph(
    store: GridStore,
    top_left: Optional[Coordinate] = None,
    bottom_right: Optional[Coordinate] = None,
    *,
    connectivity: Optional[int] = None,
    teleport_cost: Optional[float] = None,
    link_teleports: bool = True,
) -> TileGraph:
    """Build the graph of revealed, traversable tiles inside a window.

    Args:
        store: Charted grid to read (never modified)
        top_left: Inclusive top-left corner; defaults to the grid origin
        bottom_right: Inclusive bottom-right corner; defaults to the far corner
        connectivity: 4 (orthogonal) or 8 (orthogonal + diagonal) neighbors
        teleport_cost: Weight of links between teleport tiles
        link_teleports: When False, teleports behave like ordinary tiles

    Raises:
        OutOfBounds: a window corner lies outside the grid
        ValueError: inverted window, unknown connectivity or negative teleport cost
    """

    connectivity = Config.CONNECTIVITY if connectivity is None else connectivity
    if connectivity not in CONNECTIVITY_OFFSETS:
        raise ValueError(f"connectivity must be 4 or 8, got {connectivity!r}")
    teleport_cost = Config.TELEPORT_COST if teleport_cost is None else teleport_cost
    if teleport_cost < 0:
        raise ValueError("teleport_cost cannot be negative")

    size = store.size
    origin, far_corner = store.bounds()
    top_left = _window_corner(top_left, origin, size)
    bottom_right = _window_corner(bottom_right, far_corner, size)
    if top_left.row > bottom_right.row or top_left.col > bottom_right.col:
        raise ValueError(f"Window corners are inverted: {tuple(top_left)} > {tuple(bottom_right)}")

    tiles: Dict[Coordinate, TileRecord] = {}
    for row in range(top_left.row, bottom_right.row + 1):
        for col in range(top_left.col, bottom_right.col + 1):
            coordinate = Coordinate(row, col)
            tile = store.get(coordinate)
            if tile is not None and tile.traversable:
                tiles[coordinate] = tile

    adjacency: Dict[Coordinate, Dict[Coordinate, float]] = {node: {} for node in tiles}
    offsets = CONNECTIVITY_OFFSETS[connectivity]
    for node, links in adjacency.items():
        for drow, dcol in offsets:
            neighbor = Coordinate(node.row + drow, node.col + dcol)
            destination = tiles.get(neighbor)
            if destination is not None:
                links[neighbor] = destination.cost

    if link_teleports:
        teleports = sorted(node for node, tile in tiles.items() if tile.kind is TileKind.TELEPORT)
        for source in teleports:
            links = adjacency[source]
            for target in teleports:
                if target == source:
                    continue
                # An adjacent teleport may already be one step away; keep the cheaper link.
                links[target] = min(links.get(target, teleport_cost), teleport_cost)

    edges = tuple((node, tuple(sorted(adjacency[node].items()))) for node in sorted(adjacency))
    graph = TileGraph(
        nodes=frozenset(tiles),
        edges=edges,
        connectivity=connectivity,
        window=(top_left, bottom_right),
    )
    log_debug(
        f"[Graph] Built {connectivity}-connected graph over "
        f"{tuple(top_left)}..{tuple(bottom_right)}: {len(graph)} nodes, {graph.edge_count} edges"
    )
    return graph
