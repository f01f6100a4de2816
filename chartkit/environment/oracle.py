"""Read-only view of the host simulation.

Charting toolkits never hold on to the live world: discovery procedures ask a
``WorldOracle`` for tiles and copy the answers into a ``ChartedWorld``.
``InMemoryWorld`` is a complete oracle backed by a tile matrix, useful for
tests, examples and offline experiments.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, Set

from ..errors import DiscoveryError, OutOfBounds
from ..schemas import Coordinate, TileKind, TileRecord


class WorldOracle(Protocol):
    """What charting needs from the host robot/world API."""

    @property
    def size(self) -> int: ...

    def robot_position(self) -> Coordinate: ...

    def tile_kind_at(self, coordinate: Coordinate) -> TileKind: ...

    def tile_at(self, coordinate: Coordinate) -> TileRecord: ...


class InMemoryWorld:
    """Oracle over a fully known square tile matrix.

    ``discovery_budget`` caps how many distinct tiles may be revealed through
    ``tile_at``; once spent, further new tiles raise ``DiscoveryError``.
    Re-reading a tile that was already revealed is free.
    """

    def __init__(
        self,
        rows: Sequence[Sequence[TileRecord]],
        *,
        robot: Coordinate = Coordinate(0, 0),
        discovery_budget: Optional[int] = None,
    ):
        size = len(rows)
        if size == 0 or any(len(row) != size for row in rows):
            raise ValueError("InMemoryWorld expects a non-empty square matrix")
        self._rows = [list(row) for row in rows]
        self._size = size
        self._robot = self._check(robot)
        self._budget = discovery_budget
        self._revealed: Set[Coordinate] = set()

    @classmethod
    def uniform(cls, size: int, kind: TileKind = TileKind.GRASS, **kwargs) -> "InMemoryWorld":
        tile = TileRecord(kind=kind)
        return cls([[tile] * size for _ in range(size)], **kwargs)

    @property
    def size(self) -> int:
        return self._size

    @property
    def discoveries(self) -> int:
        return len(self._revealed)

    def _check(self, coordinate) -> Coordinate:
        try:
            coordinate = Coordinate.of(coordinate)
        except ValueError as exc:
            raise OutOfBounds(coordinate, self._size) from exc
        if coordinate.row >= self._size or coordinate.col >= self._size:
            raise OutOfBounds(coordinate, self._size)
        return coordinate

    def robot_position(self) -> Coordinate:
        return self._robot

    def move_robot(self, coordinate: Coordinate) -> None:
        self._robot = self._check(coordinate)

    def tile_kind_at(self, coordinate: Coordinate) -> TileKind:
        row, col = self._check(coordinate)
        return self._rows[row][col].kind

    def tile_at(self, coordinate: Coordinate) -> TileRecord:
        coordinate = self._check(coordinate)
        if coordinate not in self._revealed:
            if self._budget is not None and len(self._revealed) >= self._budget:
                raise DiscoveryError(
                    f"Discovery budget of {self._budget} tiles exhausted", coordinate
                )
            self._revealed.add(coordinate)
        return self._rows[coordinate.row][coordinate.col]

    def place(self, coordinate: Coordinate, tile: TileRecord) -> None:
        """Change the live world (the charted copy does not follow)."""
        row, col = self._check(coordinate)
        self._rows[row][col] = tile
