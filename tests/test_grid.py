"""Tests for the charted grid store and the in-memory world oracle."""

import pytest

from chartkit import (
    AdmissionGate,
    ChartedWorld,
    Content,
    ContentKind,
    Coordinate,
    DiscoveryError,
    InMemoryWorld,
    OutOfBounds,
    TileKind,
    TileOccupied,
    TileRecord,
    build_graph,
)

GRASS = TileRecord(kind=TileKind.GRASS)
SAND = TileRecord(kind=TileKind.SAND)
COINS = TileRecord(kind=TileKind.STREET, content=Content(kind=ContentKind.COIN, quantity=3))


def test_new_world_is_uncharted():
    world = ChartedWorld(AdmissionGate(), 4)
    assert world.size == 4
    assert world.bounds() == (Coordinate(0, 0), Coordinate(3, 3))
    assert world.get((2, 2)) is None
    assert world.revealed_count() == 0


def test_set_then_get_and_occupied():
    world = ChartedWorld(AdmissionGate(), 3)
    world.set((1, 2), GRASS)
    assert world.get(Coordinate(1, 2)) == GRASS

    with pytest.raises(TileOccupied) as excinfo:
        world.set((1, 2), SAND)
    assert excinfo.value.existing == GRASS
    # The first tile survives a refused write
    assert world.get((1, 2)) == GRASS

    world.overwrite((1, 2), SAND)
    assert world.get((1, 2)) == SAND


def test_out_of_bounds_access():
    world = ChartedWorld(AdmissionGate(), 3)
    with pytest.raises(OutOfBounds):
        world.get((3, 0))
    with pytest.raises(OutOfBounds):
        world.set((0, -1), GRASS)
    with pytest.raises(IndexError):
        world.overwrite((5, 5), GRASS)
    assert world.in_bounds((2, 2)) is True
    assert world.in_bounds((2, 3)) is False


def test_set_multiple_is_all_or_nothing():
    world = ChartedWorld(AdmissionGate(), 3)
    world.set((0, 0), GRASS)

    with pytest.raises(TileOccupied):
        world.set_multiple([((1, 1), SAND), ((0, 0), SAND)])
    assert world.get((1, 1)) is None

    with pytest.raises(OutOfBounds):
        world.set_multiple([((1, 1), SAND), ((9, 9), SAND)])
    assert world.get((1, 1)) is None

    world.set_multiple([((1, 1), SAND), ((2, 2), COINS)])
    assert world.get((1, 1)) == SAND
    assert world.get((2, 2)) == COINS


def test_forget_and_clear():
    world = ChartedWorld(AdmissionGate(), 2)
    world.set((0, 1), GRASS)
    assert world.forget((0, 1)) == GRASS
    assert world.get((0, 1)) is None

    world.set((1, 1), SAND)
    world.clear()
    assert world.revealed_count() == 0


def test_revealed_is_row_major():
    world = ChartedWorld(AdmissionGate(), 3)
    world.set((2, 0), SAND)
    world.set((0, 2), GRASS)
    world.set((0, 1), COINS)
    assert [coordinate for coordinate, _ in world.revealed()] == [
        Coordinate(0, 1),
        Coordinate(0, 2),
        Coordinate(2, 0),
    ]


def test_snapshot_does_not_follow_later_writes():
    world = ChartedWorld(AdmissionGate(), 2)
    world.set((0, 0), GRASS)
    snapshot = world.snapshot()

    world.set((1, 1), SAND)
    world.overwrite((0, 0), SAND)

    assert snapshot.get((0, 0)) == GRASS
    assert snapshot.get((1, 1)) is None
    assert snapshot.bounds() == world.bounds()
    with pytest.raises(OutOfBounds):
        snapshot.get((2, 0))


def test_from_rows_requires_square_matrix():
    gate = AdmissionGate()
    world = ChartedWorld.from_rows(gate, [[GRASS, None], [None, SAND]])
    assert world.get((0, 0)) == GRASS
    assert world.get((1, 1)) == SAND
    assert world.revealed_count() == 2

    with pytest.raises(ValueError):
        ChartedWorld.from_rows(gate, [[GRASS, GRASS]])


def test_update_from_copies_divergent_tiles():
    oracle = InMemoryWorld.uniform(3)
    world = ChartedWorld(AdmissionGate(), 3)
    world.set((0, 0), SAND)

    changed = world.update_from(oracle, [Coordinate(0, 0), Coordinate(0, 1)])
    assert changed == 2
    assert world.get((0, 0)) == GRASS
    assert world.get((0, 1)) == GRASS

    # Already in sync: nothing changes
    assert world.update_from(oracle, [Coordinate(0, 0)]) == 0


def test_charted_copy_diverges_from_live_world():
    oracle = InMemoryWorld.uniform(2)
    world = ChartedWorld(AdmissionGate(), 2)
    world.update_from(oracle, [Coordinate(1, 1)])

    oracle.place(Coordinate(1, 1), TileRecord(kind=TileKind.LAVA))
    assert world.get((1, 1)) == GRASS
    assert oracle.tile_kind_at(Coordinate(1, 1)) is TileKind.LAVA


def test_in_memory_world_budget():
    oracle = InMemoryWorld.uniform(3, robot=Coordinate(1, 1), discovery_budget=2)
    assert oracle.robot_position() == Coordinate(1, 1)

    oracle.tile_at(Coordinate(0, 0))
    oracle.tile_at(Coordinate(0, 1))
    # Re-reading a revealed tile is free
    oracle.tile_at(Coordinate(0, 0))
    assert oracle.discoveries == 2

    with pytest.raises(DiscoveryError) as excinfo:
        oracle.tile_at(Coordinate(2, 2))
    assert excinfo.value.coordinate == Coordinate(2, 2)

    with pytest.raises(OutOfBounds):
        oracle.move_robot(Coordinate(3, 0))


def test_fractional_coordinates_are_rejected():
    world = ChartedWorld.from_rows(AdmissionGate(), [[GRASS, None], [None, None]])
    with pytest.raises(OutOfBounds):
        world.get((0.9, 0.5))
    with pytest.raises(OutOfBounds):
        world.set((1.5, 0), SAND)
    with pytest.raises(OutOfBounds):
        build_graph(world, (0, 0), (0.9, 0.5))
    # Nothing was written to the truncated position
    assert world.get((1, 0)) is None
