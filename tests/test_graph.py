"""Tests for building tile graphs from charted grids."""

import pytest

from chartkit import (
    AdmissionGate,
    ChartedWorld,
    Coordinate,
    OutOfBounds,
    TileKind,
    TileRecord,
    build_graph,
)


def _tile(kind: TileKind) -> TileRecord:
    return TileRecord(kind=kind)


def _uniform_world(size: int, kind: TileKind = TileKind.GRASS) -> ChartedWorld:
    return ChartedWorld.from_rows(
        AdmissionGate(), [[_tile(kind) for _ in range(size)] for _ in range(size)]
    )


def test_full_grid_four_and_eight_connectivity():
    world = _uniform_world(3)

    four = build_graph(world, connectivity=4)
    assert len(four) == 9
    # corners 2 + edges 3 + centre 4
    assert four.edge_count == 4 * 2 + 4 * 3 + 4
    assert [n for n, _ in four.neighbors(Coordinate(1, 1))] == [
        (0, 1),
        (1, 0),
        (1, 2),
        (2, 1),
    ]

    eight = build_graph(world, connectivity=8)
    assert eight.edge_count == 4 * 3 + 4 * 5 + 8
    assert eight.weight(Coordinate(0, 0), Coordinate(1, 1)) == 1
    assert four.weight(Coordinate(0, 0), Coordinate(1, 1)) is None


def test_unrevealed_and_blocked_tiles_are_not_nodes():
    grass = _tile(TileKind.GRASS)
    rows = [
        [grass, None, grass],
        [_tile(TileKind.DEEP_WATER), grass, _tile(TileKind.WALL)],
        [_tile(TileKind.LAVA), grass, None],
    ]
    graph = build_graph(ChartedWorld.from_rows(AdmissionGate(), rows))

    assert graph.nodes == {
        Coordinate(0, 0),
        Coordinate(0, 2),
        Coordinate(1, 1),
        Coordinate(2, 1),
    }
    # No node means no edge into it either
    for node in graph.nodes:
        for neighbor, _ in graph.neighbors(node):
            assert neighbor in graph
    assert graph.neighbors(Coordinate(0, 0)) == ()


def test_edge_weight_is_cost_of_entering():
    rows = [[_tile(TileKind.GRASS), _tile(TileKind.HILL)]] + [[None, None]]
    graph = build_graph(ChartedWorld.from_rows(AdmissionGate(), rows))

    assert graph.weight(Coordinate(0, 0), Coordinate(0, 1)) == TileKind.HILL.cost
    assert graph.weight(Coordinate(0, 1), Coordinate(0, 0)) == TileKind.GRASS.cost


def test_build_is_deterministic_regardless_of_write_order():
    kinds = [TileKind.GRASS, TileKind.SAND, TileKind.HILL, TileKind.WALL]
    cells = [
        (Coordinate(r, c), _tile(kinds[(r * 3 + c) % len(kinds)]))
        for r in range(4)
        for c in range(4)
        if (r + c) % 5 != 0
    ]

    forward = ChartedWorld(AdmissionGate(), 4)
    for coordinate, tile in cells:
        forward.set(coordinate, tile)
    backward = ChartedWorld(AdmissionGate(), 4)
    for coordinate, tile in reversed(cells):
        backward.set(coordinate, tile)

    first = build_graph(forward, connectivity=8)
    assert first == build_graph(forward, connectivity=8)
    assert first == build_graph(backward, connectivity=8)
    assert dict(first.edges) == dict(build_graph(backward, connectivity=8).edges)


def test_graph_does_not_change_the_grid_or_follow_it():
    world = _uniform_world(2)
    before = world.snapshot()
    graph = build_graph(world)
    assert world.snapshot() == before

    world.overwrite((0, 1), _tile(TileKind.WALL))
    assert Coordinate(0, 1) in graph
    assert Coordinate(0, 1) not in build_graph(world)


def test_window_limits_nodes_and_edges():
    world = _uniform_world(5)
    graph = build_graph(world, (1, 1), (2, 3))

    assert graph.window == (Coordinate(1, 1), Coordinate(2, 3))
    assert len(graph) == 6
    assert all(1 <= n.row <= 2 and 1 <= n.col <= 3 for n in graph.nodes)
    assert [n for n, _ in graph.neighbors(Coordinate(1, 1))] == [(1, 2), (2, 1)]

    single = build_graph(world, (4, 4), (4, 4))
    assert single.nodes == {Coordinate(4, 4)}
    assert single.edge_count == 0


def test_window_validation():
    world = _uniform_world(3)
    with pytest.raises(OutOfBounds):
        build_graph(world, (0, 0), (3, 2))
    with pytest.raises(OutOfBounds):
        build_graph(world, (-1, 0), (2, 2))
    with pytest.raises(ValueError):
        build_graph(world, (2, 2), (1, 2))
    with pytest.raises(ValueError):
        build_graph(world, connectivity=6)
    with pytest.raises(ValueError):
        build_graph(world, teleport_cost=-1)


def test_teleports_are_linked_to_each_other():
    world = _uniform_world(5)
    world.overwrite((0, 0), _tile(TileKind.TELEPORT))
    world.overwrite((4, 4), _tile(TileKind.TELEPORT))
    world.overwrite((0, 1), _tile(TileKind.TELEPORT))

    graph = build_graph(world, teleport_cost=30)
    assert graph.weight(Coordinate(0, 0), Coordinate(4, 4)) == 30
    assert graph.weight(Coordinate(4, 4), Coordinate(0, 1)) == 30
    # Adjacent teleports keep the cheaper walking link
    assert graph.weight(Coordinate(0, 0), Coordinate(0, 1)) == TileKind.TELEPORT.cost

    plain = build_graph(world, link_teleports=False)
    assert plain.weight(Coordinate(0, 0), Coordinate(4, 4)) is None


def test_teleports_outside_window_are_ignored():
    world = _uniform_world(5)
    world.overwrite((0, 0), _tile(TileKind.TELEPORT))
    world.overwrite((4, 4), _tile(TileKind.TELEPORT))

    graph = build_graph(world, (0, 0), (2, 2))
    assert graph.weight(Coordinate(0, 0), Coordinate(4, 4)) is None
    assert Coordinate(4, 4) not in graph


def test_build_from_snapshot():
    world = _uniform_world(3)
    snapshot = world.snapshot()
    world.close()
    # Snapshots need no slot and outlive the world they came from
    assert len(build_graph(snapshot)) == 9


def test_graphs_are_hashable_values():
    world = _uniform_world(3)
    first = build_graph(world, connectivity=8)
    second = build_graph(world, connectivity=8)

    assert hash(first) == hash(second)
    assert len({first, second, build_graph(world, connectivity=4)}) == 2
    assert dict(first.edges)[Coordinate(0, 0)] == first.neighbors(Coordinate(0, 0))
