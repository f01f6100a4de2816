"""
ChartedPaths: shortest routes across the charted part of the world.

ChartedPaths answers "how expensive is it to get from here to there, and
which tiles do I walk?" using only tiles the agent has already charted.
Routes never cross uncharted tiles, even if those might turn out to be free.

The graph is rebuilt from the grid on every query, because the charted copy
changes quickly while an agent explores. Callers that issue many queries
against an unchanged grid can build once with ``build_graph()`` and pass the
result as ``graph=`` to skip rebuilding.

Usage pattern:
    gate = AdmissionGate()
    world = ChartedWorld(gate, size=64)
    ...  # chart some tiles

    with ChartedPaths(gate, world, connectivity=4) as paths:
        route = paths.shortest_path(robot_at, (10, 12))
        if route is None:
            ...  # not reachable through charted tiles
        else:
            moves = path_to_directions(route.path)
"""

from __future__ import annotations

from typing import Iterable, Optional

from .environment.graph import TileGraph, build_graph
from .environment.grid import GridStore
from .environment import helpers
from .errors import OutOfBounds, ToolClosedError
from .gate import AdmissionGate
from .schemas import Coordinate, PathResult


class ChartedPaths:
    """Path engine over a charted grid. Holds one admission slot while open."""

    def __init__(
        self,
        gate: AdmissionGate,
        store: GridStore,
        *,
        connectivity: Optional[int] = None,
        teleport_cost: Optional[float] = None,
        link_teleports: bool = True,
    ):
        if connectivity is not None and connectivity not in (4, 8):
            raise ValueError(f"connectivity must be 4 or 8, got {connectivity!r}")
        self._store = store
        self._connectivity = connectivity
        self._teleport_cost = teleport_cost
        self._link_teleports = link_teleports
        self._slot = gate.acquire(owner=self)

    @property
    def closed(self) -> bool:
        return self._slot.released

    def close(self) -> None:
        if not self._slot.released:
            self._slot.release()

    def __enter__(self) -> "ChartedPaths":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self.closed:
            raise ToolClosedError(type(self).__name__)

    def _check_endpoint(self, coordinate) -> Coordinate:
        size = self._store.size
        try:
            checked = Coordinate.of(coordinate)
        except ValueError as exc:
            raise OutOfBounds(coordinate, size) from exc
        if checked.row >= size or checked.col >= size:
            raise OutOfBounds(checked, size)
        return checked

    def build_graph(
        self,
        top_left: Optional[Coordinate] = None,
        bottom_right: Optional[Coordinate] = None,
    ) -> TileGraph:
        """Build a graph from the grid's current content."""
        self._ensure_open()
        return build_graph(
            self._store,
            top_left,
            bottom_right,
            connectivity=self._connectivity,
            teleport_cost=self._teleport_cost,
            link_teleports=self._link_teleports,
        )

    def _graph_for(self, graph, top_left, bottom_right) -> TileGraph:
        if graph is not None:
            return graph
        return self.build_graph(top_left, bottom_right)

    def shortest_path(
        self,
        source,
        destination,
        *,
        graph: Optional[TileGraph] = None,
        top_left: Optional[Coordinate] = None,
        bottom_right: Optional[Coordinate] = None,
    ) -> Optional[PathResult]:
        """Cheapest charted route from source to destination, or None.

        Endpoints outside the grid raise ``OutOfBounds``. Endpoints that are
        uncharted, untraversable or outside the window give None.
        """
        self._ensure_open()
        if graph is None:
            source = self._check_endpoint(source)
            destination = self._check_endpoint(destination)
        return helpers.shortest_path(self._graph_for(graph, top_left, bottom_right), source, destination)

    def shortest_path_cost(
        self,
        source,
        destination,
        *,
        graph: Optional[TileGraph] = None,
        top_left: Optional[Coordinate] = None,
        bottom_right: Optional[Coordinate] = None,
    ) -> Optional[float]:
        result = self.shortest_path(
            source, destination, graph=graph, top_left=top_left, bottom_right=bottom_right
        )
        return None if result is None else result.cost

    def nearest(
        self,
        source,
        targets: Iterable,
        *,
        graph: Optional[TileGraph] = None,
        top_left: Optional[Coordinate] = None,
        bottom_right: Optional[Coordinate] = None,
    ) -> Optional[PathResult]:
        """Cheapest route to whichever of ``targets`` is cheapest to reach.

        Pairs well with ``ChartedMap.query``: pass the coordinates of every
        known water tile and get the route to the closest reachable one.
        """
        self._ensure_open()
        if graph is None:
            source = self._check_endpoint(source)
        targets = [_target_coordinate(target) for target in targets]
        return helpers.nearest(self._graph_for(graph, top_left, bottom_right), source, targets)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ChartedPaths(connectivity={self._connectivity or 'default'}, {state})"


def _target_coordinate(target) -> Coordinate:
    """Accept a bare coordinate or a ``(coordinate, count)`` pair from ChartedMap."""
    if isinstance(target, Coordinate):
        return target
    if isinstance(target[0], tuple):
        return Coordinate(*target[0])
    return Coordinate(*target)
