"""
ChartingBot: reveal new tiles and copy them into a charted world.

The bot is a virtual scout. It starts at the robot's position, walks over
the grid without moving the real robot, and asks the host oracle for the
tiles in strips around it. Revealed tiles are written into the agent's
``ChartedWorld``; tiles already charted are skipped so they are never paid
for twice.

Strip geometry: a strip starts on the bot's own row (moving up/down) or
column (moving left/right), extends ``length`` tiles in the direction of
travel and ``width`` tiles across, centred on the bot. Even widths round up
to the next odd number. Strips are clipped at the grid edges.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Sequence

from .environment.grid import ChartedWorld, _check
from .environment.helpers import coordinates_to_direction
from .environment.oracle import WorldOracle
from .errors import OutOfBounds, ToolClosedError
from .gate import AdmissionGate
from .logging_utils import log_info
from .schemas import Coordinate, Direction


def line_coordinates(
    position: Coordinate,
    direction: Direction,
    length: int,
    width: int,
    size: int,
) -> Iterator[Coordinate]:
    """Yield the coordinates of a strip, nearest rows/columns first.

    Across the direction of travel coordinates are yielded in ascending order.
    """
    if length < 1 or width < 1:
        raise ValueError("length and width must both be at least 1")
    half = width // 2
    drow, dcol = direction.delta
    along = range(length)

    if direction.is_vertical:
        cross = range(max(0, position.col - half), min(size - 1, position.col + half) + 1)
        for distance in along:
            row = position.row + drow * distance
            if not 0 <= row < size:
                break
            for col in cross:
                yield Coordinate(row, col)
    else:
        cross = range(max(0, position.row - half), min(size - 1, position.row + half) + 1)
        for distance in along:
            col = position.col + dcol * distance
            if not 0 <= col < size:
                break
            for row in cross:
                yield Coordinate(row, col)


class ChartingBot:
    """Discovery scout writing into a ``ChartedWorld``. Holds one admission slot."""

    def __init__(self, gate: AdmissionGate, world: ChartedWorld, oracle: WorldOracle):
        self._world = world
        self._oracle = oracle
        self._position = _check(oracle.robot_position(), world.size)
        self._slot = gate.acquire(owner=self)

    @property
    def closed(self) -> bool:
        return self._slot.released

    def close(self) -> None:
        if not self._slot.released:
            self._slot.release()

    def __enter__(self) -> "ChartingBot":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self.closed:
            raise ToolClosedError(type(self).__name__)

    @property
    def position(self) -> Coordinate:
        return self._position

    def init(self) -> Coordinate:
        """Put the bot back on the robot's current position.

        Raises ``OutOfBounds`` (leaving the bot where it was) when the robot
        stands outside the charted grid.
        """
        self._ensure_open()
        self._position = _check(self._oracle.robot_position(), self._world.size)
        return self._position

    def move(self, direction: Direction) -> Coordinate:
        """Step the bot one tile. Stepping off the grid raises ``OutOfBounds``."""
        self._ensure_open()
        target = self._position.step(direction)
        size = self._world.size
        if not (0 <= target.row < size and 0 <= target.col < size):
            raise OutOfBounds(tuple(target), size)
        self._position = target
        return target

    def _reveal(self, coordinates: Iterable[Coordinate]) -> int:
        revealed = 0
        for coordinate in coordinates:
            if self._world.get(coordinate) is not None:
                continue
            # DiscoveryError propagates; tiles revealed so far stay charted
            self._world.set(coordinate, self._oracle.tile_at(coordinate))
            revealed += 1
        return revealed

    def discover_line(self, length: int, width: int, direction: Direction) -> int:
        """Reveal a strip from the bot's position. Returns newly charted tiles."""
        self._ensure_open()
        revealed = self._reveal(
            line_coordinates(self._position, direction, length, width, self._world.size)
        )
        log_info(
            f"[Bot] Line {direction.name.lower()} from {tuple(self._position)} "
            f"({length}x{width}): {revealed} new tiles"
        )
        return revealed

    def discover_path(self, width: int, directions: Sequence[Direction]) -> int:
        """Walk ``directions`` one step each, revealing a strip across every new position.

        Returns the total number of newly charted tiles.
        """
        self._ensure_open()
        revealed = 0
        for direction in directions:
            self.move(direction)
            revealed += self._reveal(
                line_coordinates(self._position, direction, 1, width, self._world.size)
            )
        log_info(f"[Bot] Path of {len(directions)} steps to {tuple(self._position)}: {revealed} new tiles")
        return revealed

    def discover_route(self, width: int, route: Sequence) -> int:
        """Follow a coordinate route (e.g. ``PathResult.path``) starting at the bot."""
        waypoints: List[Coordinate] = [Coordinate.of(c) for c in route]
        if waypoints and waypoints[0] == self._position:
            waypoints = waypoints[1:]
        directions = []
        previous = self._position
        for waypoint in waypoints:
            directions.append(coordinates_to_direction(previous, waypoint))
            previous = waypoint
        return self.discover_path(width, directions)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ChartingBot(position={tuple(self._position)}, {state})"
