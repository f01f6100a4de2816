"""Tests for the ChartedMap point-of-interest index."""

import pytest

from chartkit import (
    AdmissionGate,
    ChartedMap,
    ChartedWorld,
    Content,
    ContentKind,
    Coordinate,
    TileKind,
    TileRecord,
    ToolClosedError,
)


def _tile(kind=TileKind.GRASS, content=ContentKind.NONE, quantity=0) -> TileRecord:
    return TileRecord(kind=kind, content=Content(kind=content, quantity=quantity))


def test_content_mode_groups_by_kind_with_counts():
    poi = ChartedMap(AdmissionGate())
    poi.record((12, 21), _tile(content=ContentKind.ROCK, quantity=12))
    poi.record((1, 2), _tile(content=ContentKind.COIN, quantity=11))
    poi.record((4, 44), _tile(kind=TileKind.SAND, content=ContentKind.COIN, quantity=10))

    # Any amount of coins is the same point of interest
    assert poi.query(ContentKind.COIN) == [(Coordinate(1, 2), 11), (Coordinate(4, 44), 10)]
    assert poi.query(Content(kind=ContentKind.COIN, quantity=99)) == poi.query(ContentKind.COIN)
    assert poi.query(ContentKind.FISH) == []
    assert len(poi) == 3
    assert ContentKind.ROCK in poi
    assert TileKind.GRASS not in poi


def test_singular_content_counts_once():
    poi = ChartedMap(AdmissionGate())
    poi.record((0, 0), _tile(content=ContentKind.BIN, quantity=20))
    poi.record((0, 1), _tile(content=ContentKind.FIRE))
    assert poi.query(ContentKind.BIN) == [(Coordinate(0, 0), 1)]
    assert poi.query(ContentKind.FIRE) == [(Coordinate(0, 1), 1)]


def test_tile_kind_mode():
    poi = ChartedMap(AdmissionGate(), key="tile_kind")
    poi.record((0, 0), _tile(kind=TileKind.SHALLOW_WATER, content=ContentKind.FISH, quantity=3))
    poi.record((2, 3), _tile(kind=TileKind.SHALLOW_WATER))

    assert poi.query(TileKind.SHALLOW_WATER) == [(Coordinate(0, 0), 1), (Coordinate(2, 3), 1)]
    with pytest.raises(TypeError):
        poi.query(ContentKind.FISH)


def test_tile_mode_strips_quantity():
    poi = ChartedMap(AdmissionGate(), key="tile")
    poi.record((1, 1), _tile(kind=TileKind.STREET, content=ContentKind.COIN, quantity=5))
    poi.record((2, 2), _tile(kind=TileKind.STREET, content=ContentKind.COIN, quantity=1))
    poi.record((3, 3), _tile(kind=TileKind.GRASS, content=ContentKind.COIN, quantity=1))

    street_coins = _tile(kind=TileKind.STREET, content=ContentKind.COIN, quantity=42)
    assert poi.query(street_coins) == [(Coordinate(1, 1), 5), (Coordinate(2, 2), 1)]
    assert len(poi.keys()) == 2


def test_most_and_closest_tie_breaks():
    poi = ChartedMap(AdmissionGate())
    poi.save(ContentKind.TREE, (5, 5), 3)
    poi.save(ContentKind.TREE, (1, 9), 7)
    poi.save(ContentKind.TREE, (0, 9), 7)
    poi.save(ContentKind.TREE, (2, 2), 1)

    assert poi.most(ContentKind.TREE) == (Coordinate(0, 9), 7)
    # (1, 9), (2, 2) and (5, 5) are all 4 away; the smallest coordinate wins
    assert poi.closest(ContentKind.TREE, (2, 6)) == Coordinate(1, 9)
    assert poi.closest(ContentKind.TREE, (5, 4)) == Coordinate(5, 5)
    assert poi.most(ContentKind.COIN) is None
    assert poi.closest(ContentKind.COIN, (0, 0)) is None


def test_forget():
    poi = ChartedMap(AdmissionGate())
    poi.save(ContentKind.GARBAGE, (0, 0), 2)
    poi.save(ContentKind.GARBAGE, (1, 1), 4)

    assert poi.forget(ContentKind.GARBAGE, (0, 0)) == 1
    assert poi.query(ContentKind.GARBAGE) == [(Coordinate(1, 1), 4)]
    assert poi.forget(ContentKind.GARBAGE) == 1
    assert ContentKind.GARBAGE not in poi
    assert poi.forget(ContentKind.GARBAGE) == 0


def test_from_world_indexes_charted_tiles_only():
    gate = AdmissionGate()
    coins = _tile(content=ContentKind.COIN, quantity=2)
    world = ChartedWorld.from_rows(gate, [[coins, None], [None, coins]])

    poi = ChartedMap.from_world(gate, world)
    assert poi.query(ContentKind.COIN) == [(Coordinate(0, 0), 2), (Coordinate(1, 1), 2)]
    assert len(poi) == 2


def test_text_listing():
    poi = ChartedMap(AdmissionGate())
    poi.save(ContentKind.COIN, (1, 2), 11)
    text = str(poi)
    assert "Item: coin" in text
    assert "at 1, 2 with quantity 11" in text


def test_invalid_usage():
    gate = AdmissionGate(limit=1)
    with pytest.raises(ValueError):
        ChartedMap(gate, key="elevation")
    assert gate.current_count() == 0

    poi = ChartedMap(gate)
    with pytest.raises(ValueError):
        poi.save(ContentKind.COIN, (0, 0), -1)
    with pytest.raises(ValueError):
        poi.save(ContentKind.COIN, (-1, 0), 1)

    poi.close()
    with pytest.raises(ToolClosedError):
        poi.query(ContentKind.COIN)


def test_closed_map_refuses_size_and_membership():
    poi = ChartedMap(AdmissionGate())
    poi.save(ContentKind.COIN, (0, 0), 1)
    poi.close()

    with pytest.raises(ToolClosedError):
        len(poi)
    with pytest.raises(ToolClosedError):
        ContentKind.COIN in poi
