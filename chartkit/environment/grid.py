"""Charted grid storage.

``ChartedWorld`` is the agent's private, mutable copy of the tiles it has
seen. It starts empty and only changes through explicit writes (usually from
a ``ChartingBot`` or ``update_from``); it keeps no reference to the live
world. ``GridSnapshot`` is a frozen copy for readers that need a consistent
view while a writer keeps charting.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol, Sequence, Tuple

from ..errors import OutOfBounds, TileOccupied, ToolClosedError
from ..gate import AdmissionGate
from ..schemas import Coordinate, TileRecord
from .oracle import WorldOracle


class GridStore(Protocol):
    """Read access every graph build needs."""

    @property
    def size(self) -> int: ...

    def get(self, coordinate: Coordinate) -> Optional[TileRecord]: ...

    def bounds(self) -> Tuple[Coordinate, Coordinate]: ...


def _check(coordinate, size: int) -> Coordinate:
    try:
        coordinate = Coordinate.of(coordinate)
    except ValueError as exc:
        raise OutOfBounds(coordinate, size) from exc
    if coordinate.row >= size or coordinate.col >= size:
        raise OutOfBounds(coordinate, size)
    return coordinate


@dataclass(frozen=True)
class GridSnapshot:
    """Immutable copy of a charted grid at one instant."""

    size: int
    rows: Tuple[Tuple[Optional[TileRecord], ...], ...]

    def get(self, coordinate: Coordinate) -> Optional[TileRecord]:
        row, col = _check(coordinate, self.size)
        return self.rows[row][col]

    def bounds(self) -> Tuple[Coordinate, Coordinate]:
        return Coordinate(0, 0), Coordinate(self.size - 1, self.size - 1)


class ChartedWorld:
    """Square matrix of optional tiles, indexed by (row, col).

    ``None`` means the tile has not been charted yet. Holds one admission
    slot for as long as it is open.
    """

    def __init__(self, gate: AdmissionGate, size: int):
        if size < 1:
            raise ValueError("ChartedWorld size must be at least 1")
        self._size = size
        self._tiles: List[List[Optional[TileRecord]]] = [[None] * size for _ in range(size)]
        self._slot = gate.acquire(owner=self)

    @classmethod
    def from_rows(
        cls, gate: AdmissionGate, rows: Sequence[Sequence[Optional[TileRecord]]]
    ) -> "ChartedWorld":
        """Build a world pre-charted with a square matrix (``None`` = unknown)."""
        size = len(rows)
        if size == 0 or any(len(row) != size for row in rows):
            raise ValueError("ChartedWorld.from_rows expects a non-empty square matrix")
        world = cls(gate, size)
        for r, row in enumerate(rows):
            world._tiles[r] = list(row)
        return world

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def closed(self) -> bool:
        return self._slot.released

    def close(self) -> None:
        """Give the admission slot back. Further calls do nothing."""
        if not self._slot.released:
            self._slot.release()

    def __enter__(self) -> "ChartedWorld":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self.closed:
            raise ToolClosedError(type(self).__name__)

    # ------------------------------------------------------------------
    # Grid access
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    def bounds(self) -> Tuple[Coordinate, Coordinate]:
        return Coordinate(0, 0), Coordinate(self._size - 1, self._size - 1)

    def in_bounds(self, coordinate) -> bool:
        try:
            _check(coordinate, self._size)
        except OutOfBounds:
            return False
        return True

    def get(self, coordinate) -> Optional[TileRecord]:
        self._ensure_open()
        row, col = _check(coordinate, self._size)
        return self._tiles[row][col]

    def set(self, coordinate, tile: TileRecord) -> None:
        """Chart ``tile`` at an uncharted coordinate.

        Raises:
            TileOccupied: a tile is already charted there (use ``overwrite``)
            OutOfBounds: the coordinate is outside the grid
        """
        self._ensure_open()
        row, col = _check(coordinate, self._size)
        existing = self._tiles[row][col]
        if existing is not None:
            raise TileOccupied(Coordinate(row, col), existing)
        self._tiles[row][col] = tile

    def overwrite(self, coordinate, tile: TileRecord) -> None:
        """Replace whatever is charted at ``coordinate``."""
        self._ensure_open()
        row, col = _check(coordinate, self._size)
        self._tiles[row][col] = tile

    def set_multiple(self, items: Iterable[Tuple[Coordinate, TileRecord]]) -> None:
        """Chart several tiles at once; nothing is written unless all can be."""
        self._ensure_open()
        staged = []
        seen = set()
        for coordinate, tile in items:
            checked = _check(coordinate, self._size)
            existing = self._tiles[checked.row][checked.col]
            if existing is not None:
                raise TileOccupied(checked, existing)
            if checked in seen:
                raise TileOccupied(checked, tile)
            seen.add(checked)
            staged.append((checked, tile))
        for (row, col), tile in staged:
            self._tiles[row][col] = tile

    def forget(self, coordinate) -> Optional[TileRecord]:
        """Un-chart a coordinate, returning the tile that was there."""
        self._ensure_open()
        row, col = _check(coordinate, self._size)
        previous = self._tiles[row][col]
        self._tiles[row][col] = None
        return previous

    def clear(self) -> None:
        self._ensure_open()
        self._tiles = [[None] * self._size for _ in range(self._size)]

    def revealed(self) -> Iterator[Tuple[Coordinate, TileRecord]]:
        """Yield charted tiles in row-major order."""
        self._ensure_open()
        for r, row in enumerate(self._tiles):
            for c, tile in enumerate(row):
                if tile is not None:
                    yield Coordinate(r, c), tile

    def revealed_count(self) -> int:
        return sum(1 for _ in self.revealed())

    def snapshot(self) -> GridSnapshot:
        self._ensure_open()
        return GridSnapshot(size=self._size, rows=tuple(tuple(row) for row in self._tiles))

    def update_from(self, oracle: WorldOracle, coordinates: Iterable[Coordinate]) -> int:
        """Copy the host's tiles at ``coordinates``, replacing divergent ones.

        Returns the number of coordinates whose charted tile changed.
        """
        self._ensure_open()
        changed = 0
        for coordinate in coordinates:
            row, col = _check(coordinate, self._size)
            tile = oracle.tile_at(Coordinate(row, col))
            if self._tiles[row][col] != tile:
                self._tiles[row][col] = tile
                changed += 1
        return changed

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{self.revealed_count()} charted"
        return f"ChartedWorld(size={self._size}, {state})"
