"""
Example: Explorer - chart, index, route
=======================================

WHAT THIS SHOWS:
- One shared AdmissionGate capping how many toolkits are alive
- A ChartingBot revealing strips of an in-memory world
- A ChartedMap remembering where coins were seen
- ChartedPaths routing to the cheapest reachable coin through charted tiles
- CapacityExceeded when a fourth toolkit is requested

RUN:
    python -m examples.explorer.run
"""

from chartkit import (
    AdmissionGate,
    CapacityExceeded,
    ChartedMap,
    ChartedPaths,
    ChartedWorld,
    ChartingBot,
    Content,
    ContentKind,
    Coordinate,
    Direction,
    InMemoryWorld,
    TileKind,
    TileRecord,
    path_to_directions,
)
from chartkit.logging_utils import log_error, log_info, log_success


# ============================================================================
# STEP 1: The live world (normally owned by the host simulation)
# ============================================================================

def build_world() -> InMemoryWorld:
    grass = TileRecord(kind=TileKind.GRASS)
    rows = [[grass] * 8 for _ in range(8)]
    # A wall down column 3 with one gap at row 6
    for row in range(8):
        if row != 6:
            rows[row][3] = TileRecord(kind=TileKind.WALL)
    rows[2][5] = TileRecord(kind=TileKind.SAND, content=Content(kind=ContentKind.COIN, quantity=7))
    rows[7][1] = TileRecord(kind=TileKind.GRASS, content=Content(kind=ContentKind.COIN, quantity=2))
    rows[4][6] = TileRecord(kind=TileKind.HILL)
    return InMemoryWorld(rows, robot=Coordinate(1, 1))


def main() -> None:
    oracle = build_world()
    gate = AdmissionGate(limit=3)

    # ========================================================================
    # STEP 2: Chart the world with a discovery bot
    # ========================================================================
    world = ChartedWorld(gate, oracle.size)
    with ChartingBot(gate, world, oracle) as bot:
        bot.discover_line(length=8, width=3, direction=Direction.DOWN)
        bot.discover_path(width=8, directions=[Direction.RIGHT] * 6)
    log_info(f"Charted {world.revealed_count()} of {oracle.size ** 2} tiles")

    # ========================================================================
    # STEP 3: Index coins and route to the cheapest reachable one
    # ========================================================================
    coins = ChartedMap.from_world(gate, world, key="content")
    paths = ChartedPaths(gate, world, connectivity=4)

    try:
        ChartedPaths(gate, world)
    except CapacityExceeded as exc:
        log_error(f"Expected refusal: {exc}")

    sightings = coins.query(ContentKind.COIN)
    log_info(f"Coins seen at: {[(tuple(c), n) for c, n in sightings]}")
    route = paths.nearest(oracle.robot_position(), sightings)
    if route is None:
        log_error("No charted route to any coin")
    else:
        moves = [d.name for d in path_to_directions(route.path)]
        log_success(f"Cheapest coin at {tuple(route.destination)}, cost {route.cost}: {moves}")

    paths.close()
    coins.close()
    world.close()
    log_info(f"Slots in use after cleanup: {gate.current_count()}")


if __name__ == "__main__":
    main()
