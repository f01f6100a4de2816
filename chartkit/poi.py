"""
ChartedMap: remember where points of interest were found.

An agent records tiles as it sees them; the map files each one under a key
(its content kind, its terrain kind, or the whole tile) together with how
many points of interest it holds. Later the agent asks "where did I see
coins?" and gets every coordinate with its count, or just the richest or
the closest one.

Key modes:
- "content": key is the ContentKind (coins of any amount share one key)
- "tile_kind": key is the TileKind; each tile counts once
- "tile": key is the tile itself with content quantity stripped
"""

from __future__ import annotations

from typing import Dict, Iterator, List, Optional, Tuple, Union

from .environment.grid import GridStore
from .errors import ToolClosedError
from .gate import AdmissionGate
from .schemas import Content, ContentKind, Coordinate, TileKind, TileRecord

PoiKey = Union[ContentKind, TileKind, TileRecord]
Sighting = Tuple[Coordinate, int]

KEY_MODES = ("content", "tile_kind", "tile")


class ChartedMap:
    """Point-of-interest index keyed by content, terrain or whole tile."""

    def __init__(self, gate: AdmissionGate, key: str = "content"):
        if key not in KEY_MODES:
            raise ValueError(f"key must be one of {', '.join(KEY_MODES)}, got {key!r}")
        self._mode = key
        self._sightings: Dict[PoiKey, List[Sighting]] = {}
        self._slot = gate.acquire(owner=self)

    @classmethod
    def from_world(cls, gate: AdmissionGate, store: GridStore, key: str = "content") -> "ChartedMap":
        """Index every charted tile of ``store``."""
        poi = cls(gate, key)
        size = store.size
        for row in range(size):
            for col in range(size):
                coordinate = Coordinate(row, col)
                tile = store.get(coordinate)
                if tile is not None:
                    poi.record(coordinate, tile)
        return poi

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def closed(self) -> bool:
        return self._slot.released

    def close(self) -> None:
        if not self._slot.released:
            self._slot.release()

    def __enter__(self) -> "ChartedMap":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _ensure_open(self) -> None:
        if self.closed:
            raise ToolClosedError(type(self).__name__)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def key_for(self, value) -> PoiKey:
        """Normalize a tile, content or kind to this map's key."""
        if self._mode == "content":
            if isinstance(value, TileRecord):
                return value.content.kind
            if isinstance(value, Content):
                return value.kind
            if isinstance(value, ContentKind):
                return value
        elif self._mode == "tile_kind":
            if isinstance(value, TileRecord):
                return value.kind
            if isinstance(value, TileKind):
                return value
        elif isinstance(value, TileRecord):
            return TileRecord(kind=value.kind, content=value.content.stripped(), elevation=value.elevation)
        raise TypeError(f"{type(value).__name__} cannot be used as a {self._mode!r} key")

    def _count_for(self, tile: TileRecord) -> int:
        if self._mode == "tile_kind":
            return 1
        return tile.content.count

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record(self, coordinate, tile: TileRecord) -> None:
        """File ``tile`` under its key with its point-of-interest count."""
        self.save(self.key_for(tile), coordinate, self._count_for(tile))

    def save(self, key, coordinate, quantity: int = 1) -> None:
        """Low-level insertion of a sighting under ``key``."""
        self._ensure_open()
        if quantity < 0:
            raise ValueError("quantity cannot be negative")
        self._sightings.setdefault(self.key_for(key), []).append((Coordinate.of(coordinate), quantity))

    def forget(self, key, coordinate=None) -> int:
        """Drop sightings for ``key`` (only at ``coordinate`` if given). Returns how many."""
        self._ensure_open()
        key = self.key_for(key)
        sightings = self._sightings.get(key)
        if not sightings:
            return 0
        if coordinate is None:
            del self._sightings[key]
            return len(sightings)
        target = Coordinate.of(coordinate)
        kept = [s for s in sightings if s[0] != target]
        removed = len(sightings) - len(kept)
        if kept:
            self._sightings[key] = kept
        else:
            del self._sightings[key]
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query(self, key) -> List[Sighting]:
        """Every (coordinate, count) recorded under ``key``, oldest first."""
        self._ensure_open()
        return list(self._sightings.get(self.key_for(key), ()))

    def most(self, key) -> Optional[Sighting]:
        """Sighting with the largest count; ties go to the smaller coordinate."""
        sightings = self.query(key)
        if not sightings:
            return None
        return min(sightings, key=lambda s: (-s[1], s[0]))

    def closest(self, key, position) -> Optional[Coordinate]:
        """Recorded coordinate nearest to ``position`` by Manhattan distance.

        Straight-line nearness only; use ``ChartedPaths.nearest`` for the
        cheapest reachable one.
        """
        sightings = self.query(key)
        if not sightings:
            return None
        origin = Coordinate.of(position)
        return min((s[0] for s in sightings), key=lambda c: (origin.manhattan(c), c))

    def keys(self) -> List[PoiKey]:
        self._ensure_open()
        return list(self._sightings)

    def __len__(self) -> int:
        self._ensure_open()
        return sum(len(s) for s in self._sightings.values())

    def __contains__(self, key) -> bool:
        self._ensure_open()
        try:
            return self.key_for(key) in self._sightings
        except TypeError:
            return False

    def __iter__(self) -> Iterator[Tuple[PoiKey, List[Sighting]]]:
        self._ensure_open()
        for key, sightings in self._sightings.items():
            yield key, list(sightings)

    def __str__(self) -> str:
        lines = ["The charted map contains:"]
        for key, sightings in self._sightings.items():
            label = key.value if isinstance(key, (ContentKind, TileKind)) else repr(key)
            lines.append(f"Item: {label}")
            for coordinate, quantity in sightings:
                lines.append(f"  at {coordinate} with quantity {quantity}")
        return "\n".join(lines)
