import pytest

from roguegen.dungeon.corridors import (
    build_room_graph,
    carve_corridor,
    create_corridor,
    generate_corridors,
    generate_mst,
)
from roguegen.dungeon.tiles import new_grid
from roguegen.models import Position, Room, TileType
from roguegen.random_source import QueuedRandom, SeededRandom

ROOMS = [
    Room(0, 2, 2, 5, 4),
    Room(1, 20, 3, 6, 5),
    Room(2, 40, 10, 4, 4),
    Room(3, 5, 14, 7, 5),
    Room(4, 60, 2, 5, 5),
]


def _connected(n, edges):
    parent = list(range(n))

    def find(a):
        while parent[a] != a:
            a = parent[a]
        return a

    for e in edges:
        parent[find(e.source)] = find(e.target)
    return len({find(i) for i in range(n)}) == 1


def test_graph_is_complete_with_positive_weights():
    graph = build_room_graph(ROOMS)
    assert len(graph) == len(ROOMS)
    for node in graph:
        assert len(node.edges) == len(ROOMS) - 1
        assert all(e.weight > 0 for e in node.edges)
        assert node.room_id not in {e.target for e in node.edges}


def test_mst_has_n_minus_one_edges_and_connects_everything():
    graph = build_room_graph(ROOMS)
    tree = generate_mst(graph)
    assert len(tree) == len(ROOMS) - 1
    assert _connected(len(ROOMS), tree)
    pairs = {(e.source, e.target) for e in tree}
    assert len(pairs) == len(tree)


def test_mst_picks_minimum_total_weight():
    # Three rooms in a row: the long outer edge is never in the tree.
    rooms = [Room(0, 1, 1, 3, 3), Room(1, 10, 1, 3, 3), Room(2, 20, 1, 3, 3)]
    tree = generate_mst(build_room_graph(rooms))
    assert {(e.source, e.target) for e in tree} == {(0, 1), (1, 2)}


def test_single_room_has_no_corridors():
    assert generate_corridors([ROOMS[0]], 1.0, SeededRandom("solo")) == ([], 0)


def test_no_loops_when_loop_chance_zero():
    corridors, loops = generate_corridors(ROOMS, 0.0, SeededRandom("no-loops"))
    assert loops == 0
    assert len(corridors) == len(ROOMS) - 1


def test_every_pair_linked_when_loop_chance_one():
    n = len(ROOMS)
    corridors, loops = generate_corridors(ROOMS, 1.0, SeededRandom("all-loops"))
    assert len(corridors) == n * (n - 1) // 2
    assert loops == len(corridors) - (n - 1)


@pytest.mark.parametrize("flip", [0, 1])
def test_corridor_is_contiguous_l_path(flip):
    a, b = ROOMS[0], ROOMS[2]
    corridor = create_corridor(a, b, QueuedRandom([flip]))
    path = corridor.path
    assert path[0] == a.center and path[-1] == b.center
    assert corridor.start == a.center and corridor.end == b.center
    assert len(set(path)) == len(path)
    for p, q in zip(path, path[1:]):
        assert abs(p.x - q.x) + abs(p.y - q.y) == 1
    turns = sum(
        1
        for p, q, r in zip(path, path[1:], path[2:])
        if (q.x - p.x, q.y - p.y) != (r.x - q.x, r.y - q.y)
    )
    assert turns <= 1


def test_coin_flip_chooses_leg_order():
    a, b = ROOMS[0], ROOMS[2]
    horizontal = create_corridor(a, b, QueuedRandom([1]))
    vertical = create_corridor(a, b, QueuedRandom([0]))
    assert horizontal.path[1] == Position(a.center.x + 1, a.center.y)
    assert vertical.path[1] == Position(a.center.x, a.center.y + 1)


def test_carve_corridor_writes_floor():
    tiles = new_grid(80, 22)
    corridor = create_corridor(ROOMS[0], ROOMS[1], SeededRandom("carve"))
    carve_corridor(tiles, corridor)
    for p in corridor.path:
        assert tiles[p.y][p.x].type is TileType.FLOOR
