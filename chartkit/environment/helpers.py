"""Route searches over tile graphs."""

from __future__ import annotations

import heapq
import math
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..logging_utils import log_debug
from ..schemas import Coordinate, Direction, PathResult
from .graph import TileGraph


def _uniform_cost(
    graph: TileGraph,
    source: Coordinate,
    goals: Optional[Set[Coordinate]] = None,
) -> Tuple[Dict[Coordinate, float], Dict[Coordinate, Optional[Coordinate]], Optional[Coordinate]]:
    """Dijkstra from ``source``, stopping at the first goal settled.

    The frontier is ordered by (cost, coordinate), so among equally cheap
    candidates the smaller coordinate is always settled first. Returns the
    settled costs, the predecessor map and the goal reached (if any).
    """

    settled: Dict[Coordinate, float] = {}
    best: Dict[Coordinate, float] = {source: 0}
    came_from: Dict[Coordinate, Optional[Coordinate]] = {source: None}
    frontier: List[Tuple[float, Coordinate]] = [(0, source)]

    while frontier:
        cost, node = heapq.heappop(frontier)
        # Stale heap entry: node already settled with a cheaper cost
        if node in settled:
            continue
        settled[node] = cost
        if goals is not None and node in goals:
            return settled, came_from, node
        for neighbor, weight in graph.neighbors(node):
            if neighbor in settled:
                continue
            candidate = cost + weight
            if candidate < best.get(neighbor, math.inf):
                best[neighbor] = candidate
                came_from[neighbor] = node
                heapq.heappush(frontier, (candidate, neighbor))

    return settled, came_from, None


def _reconstruct(came_from: Dict[Coordinate, Optional[Coordinate]], goal: Coordinate) -> Tuple[Coordinate, ...]:
    path: List[Coordinate] = [goal]
    step = came_from[goal]
    while step is not None:
        path.append(step)
        step = came_from[step]
    path.reverse()
    return tuple(path)


def shortest_path(graph: TileGraph, source, destination) -> Optional[PathResult]:
    """Return the cheapest route from source to destination, or None.

    ``None`` is the ordinary "no route" answer: either endpoint is not a node
    (uncharted or not traversable) or the destination sits in another
    component. The path includes both endpoints.
    """

    source = Coordinate(*source)
    destination = Coordinate(*destination)
    if source not in graph or destination not in graph:
        log_debug(f"[Path] No route {tuple(source)} -> {tuple(destination)}: endpoint not charted/traversable")
        return None

    # Trivial case: already there
    if source == destination:
        return PathResult(path=(source,), cost=0)

    settled, came_from, reached = _uniform_cost(graph, source, {destination})
    if reached is None:
        log_debug(f"[Path] No route {tuple(source)} -> {tuple(destination)} ({len(settled)} tiles explored)")
        return None

    result = PathResult(path=_reconstruct(came_from, reached), cost=settled[reached])
    log_debug(f"[Path] Route {tuple(source)} -> {tuple(destination)}: cost {result.cost}, {result.steps} steps")
    return result


def shortest_path_cost(graph: TileGraph, source, destination) -> Optional[float]:
    """Cost of the cheapest route, or None when there is no route."""
    result = shortest_path(graph, source, destination)
    return None if result is None else result.cost


def nearest(graph: TileGraph, source, targets: Iterable) -> Optional[PathResult]:
    """Cheapest route from source to whichever target is cheapest to reach.

    Targets that are not graph nodes are ignored. Ties go to the smaller
    target coordinate.
    """

    source = Coordinate(*source)
    goals = {Coordinate(*target) for target in targets}
    goals = {goal for goal in goals if goal in graph}
    if source not in graph or not goals:
        return None
    if source in goals:
        return PathResult(path=(source,), cost=0)

    settled, came_from, reached = _uniform_cost(graph, source, goals)
    if reached is None:
        return None
    return PathResult(path=_reconstruct(came_from, reached), cost=settled[reached])


def path_costs(graph: TileGraph, source) -> Dict[Coordinate, float]:
    """Cost of the cheapest route from source to every reachable node."""
    source = Coordinate(*source)
    if source not in graph:
        return {}
    settled, _, _ = _uniform_cost(graph, source)
    return settled


def coordinates_to_direction(origin, target) -> Direction:
    """Direction that moves a robot from ``origin`` onto an adjacent ``target``."""
    origin = Coordinate(*origin)
    target = Coordinate(*target)
    if not origin.is_adjacent(target):
        raise ValueError(
            f"{tuple(origin)} -> {tuple(target)} is not a single orthogonal step"
        )
    if target.col < origin.col:
        return Direction.LEFT
    if target.col > origin.col:
        return Direction.RIGHT
    if target.row < origin.row:
        return Direction.UP
    return Direction.DOWN


def path_to_directions(path: Sequence) -> List[Direction]:
    """Translate a coordinate path into the moves that walk it."""
    return [coordinates_to_direction(a, b) for a, b in zip(path, path[1:])]
