"""
Value types shared by every chartkit toolkit.

Design Philosophy:
- Coordinates are plain (row, col) tuples with names, so they sort, hash and
  compare by value and can be used directly as dict keys
- Tiles are immutable pydantic models; changing a charted tile means
  replacing the record, never mutating it
- Terrain costs live next to the terrain enum so every component reads the
  same lookup table
"""

from __future__ import annotations

import operator
from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Tuple

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Coordinates and directions
# ============================================================================


class Coordinate(NamedTuple):
    """A (row, col) position on a square grid.

    Ordering is lexicographic by (row, col), which is the tie-break order used
    by path searches and point-of-interest lookups.
    """

    row: int
    col: int

    @classmethod
    def of(cls, value: Any) -> "Coordinate":
        """Coerce a Coordinate or a (row, col) pair of integers, rejecting negatives."""
        # operator.index accepts any integer type and refuses floats
        try:
            row, col = value
            coordinate = cls(operator.index(row), operator.index(col))
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Expected a (row, col) pair of integers, got {value!r}") from exc
        if coordinate.row < 0 or coordinate.col < 0:
            raise ValueError(f"Coordinates cannot be negative, got {tuple(coordinate)}")
        return coordinate

    def offset(self, drow: int, dcol: int) -> "Coordinate":
        """Return the coordinate shifted by (drow, dcol). May produce negatives."""
        return Coordinate(self.row + drow, self.col + dcol)

    def step(self, direction: "Direction") -> "Coordinate":
        drow, dcol = direction.delta
        return self.offset(drow, dcol)

    def manhattan(self, other: "Coordinate") -> int:
        return abs(self.row - other[0]) + abs(self.col - other[1])

    def is_adjacent(self, other: "Coordinate", *, diagonal: bool = False) -> bool:
        """True when ``other`` is one step away (orthogonal, or diagonal if allowed)."""
        drow = abs(self.row - other[0])
        dcol = abs(self.col - other[1])
        if diagonal:
            return max(drow, dcol) == 1
        return drow + dcol == 1

    def __str__(self) -> str:
        return f"{self.row}, {self.col}"


class Direction(Enum):
    """Orthogonal moves, as the host robot API understands them."""

    UP = (-1, 0)
    DOWN = (1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @property
    def is_vertical(self) -> bool:
        return self.value[1] == 0


# ============================================================================
# Terrain
# ============================================================================


@dataclass(frozen=True)
class TileProperties:
    """Traversal facts for a terrain kind."""

    cost: int
    walkable: bool


class TileKind(str, Enum):
    """Terrain categories reported by the host world."""

    DEEP_WATER = "deep_water"
    SHALLOW_WATER = "shallow_water"
    SAND = "sand"
    GRASS = "grass"
    STREET = "street"
    HILL = "hill"
    MOUNTAIN = "mountain"
    SNOW = "snow"
    LAVA = "lava"
    TELEPORT = "teleport"
    WALL = "wall"

    def properties(self) -> TileProperties:
        return TILE_PROPERTIES[self]

    @property
    def traversable(self) -> bool:
        return TILE_PROPERTIES[self].walkable

    @property
    def cost(self) -> int:
        """Cost of stepping onto a tile of this kind."""
        return TILE_PROPERTIES[self].cost


# Non-walkable kinds carry cost 0; they never become graph nodes so the value is unused.
TILE_PROPERTIES = {
    TileKind.DEEP_WATER: TileProperties(cost=0, walkable=False),
    TileKind.SHALLOW_WATER: TileProperties(cost=4, walkable=True),
    TileKind.SAND: TileProperties(cost=2, walkable=True),
    TileKind.GRASS: TileProperties(cost=1, walkable=True),
    TileKind.STREET: TileProperties(cost=1, walkable=True),
    TileKind.HILL: TileProperties(cost=5, walkable=True),
    TileKind.MOUNTAIN: TileProperties(cost=10, walkable=True),
    TileKind.SNOW: TileProperties(cost=3, walkable=True),
    TileKind.LAVA: TileProperties(cost=0, walkable=False),
    TileKind.TELEPORT: TileProperties(cost=1, walkable=True),
    TileKind.WALL: TileProperties(cost=0, walkable=False),
}


class ContentKind(str, Enum):
    """Things that can sit on a tile."""

    NONE = "none"
    ROCK = "rock"
    TREE = "tree"
    GARBAGE = "garbage"
    FIRE = "fire"
    COIN = "coin"
    BIN = "bin"
    CRATE = "crate"
    BANK = "bank"
    WATER = "water"
    MARKET = "market"
    FISH = "fish"


# Kinds whose quantity is a capacity rather than an amount; they count as one point of interest.
SINGULAR_CONTENT = frozenset({ContentKind.FIRE, ContentKind.BIN, ContentKind.CRATE, ContentKind.BANK})


class Content(BaseModel):
    """Optional payload on a tile (a stack of coins, a bin, a fire...)."""

    model_config = ConfigDict(frozen=True)

    kind: ContentKind = ContentKind.NONE
    quantity: int = Field(0, ge=0, description="Amount held or capacity, depending on kind")

    @classmethod
    def none(cls) -> "Content":
        return cls()

    def stripped(self) -> "Content":
        """Same kind with the quantity zeroed; used as an index key."""
        return Content(kind=self.kind)

    @property
    def count(self) -> int:
        """How many points of interest this content represents."""
        if self.kind is ContentKind.NONE:
            return 0
        if self.kind in SINGULAR_CONTENT:
            return 1
        return self.quantity


class TileRecord(BaseModel):
    """A charted tile. Immutable once placed; replace it to change it."""

    model_config = ConfigDict(frozen=True)

    kind: TileKind
    content: Content = Field(default_factory=Content)
    elevation: int = Field(0, description="Height reported by the host world")

    @property
    def traversable(self) -> bool:
        return self.kind.traversable

    @property
    def cost(self) -> int:
        return self.kind.cost


# ============================================================================
# Path results
# ============================================================================


class PathResult(BaseModel):
    """An optimal route, source and destination included, with its total cost."""

    model_config = ConfigDict(frozen=True)

    path: Tuple[Coordinate, ...] = Field(..., min_length=1)
    cost: float = Field(..., ge=0)

    @property
    def source(self) -> Coordinate:
        return self.path[0]

    @property
    def destination(self) -> Coordinate:
        return self.path[-1]

    @property
    def steps(self) -> int:
        return len(self.path) - 1
