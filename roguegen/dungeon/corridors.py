"""Room connectivity: complete distance graph, spanning tree, loops, L-paths.

Phases (each a plain function so tests can drive them independently):
  * build_room_graph   - one node per room, an edge to every other room
                         weighted by Manhattan distance between centers.
  * generate_mst       - Kruskal with union-find over the unique room pairs.
                         Ties keep insertion order, never a random draw.
  * select_loop_edges  - every non-tree pair becomes an extra corridor with
                         probability `loop_chance`.
  * create_corridor    - L-shaped path between two centers; one coin flip
                         decides horizontal-first or vertical-first.
  * carve_corridor     - writes FLOOR along the path.

Graph nodes and edges never leave this module; only the carved tiles and the
corridor count survive into the Level.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from roguegen.models import Position, Room

from .tiles import carve_floor


@dataclass(frozen=True)
class Edge:
    source: int
    target: int
    weight: int


@dataclass
class GraphNode:
    room_id: int
    center: Position
    edges: List[Edge] = field(default_factory=list)


@dataclass(frozen=True)
class Corridor:
    path: Tuple[Position, ...]
    start: Position
    end: Position


def _distance(a: Position, b: Position) -> int:
    return abs(a.x - b.x) + abs(a.y - b.y)


def build_room_graph(rooms: Sequence[Room]) -> List[GraphNode]:
    nodes = [GraphNode(i, r.center) for i, r in enumerate(rooms)]
    for i, node in enumerate(nodes):
        for j, other in enumerate(nodes):
            if i == j:
                continue
            node.edges.append(Edge(i, j, _distance(node.center, other.center)))
    return nodes


def _unique_edges(graph: Sequence[GraphNode]) -> List[Edge]:
    # One edge per unordered pair, in node order
    return [e for node in graph for e in node.edges if e.source < e.target]


def generate_mst(graph: Sequence[GraphNode]) -> List[Edge]:
    edges = _unique_edges(graph)
    # sorted() is stable, so equal weights keep insertion order
    edges = sorted(edges, key=lambda e: e.weight)
    parent = list(range(len(graph)))

    def find(a):
        while parent[a] != a:
            parent[a] = parent[parent[a]]
            a = parent[a]
        return a

    tree: List[Edge] = []
    for edge in edges:
        ra, rb = find(edge.source), find(edge.target)
        if ra != rb:
            parent[ra] = rb
            tree.append(edge)
            if len(tree) == len(graph) - 1:
                break
    return tree


def select_loop_edges(graph: Sequence[GraphNode], tree: Sequence[Edge], loop_chance: float, rng) -> List[Edge]:
    in_tree = {(e.source, e.target) for e in tree}
    loops = []
    for edge in _unique_edges(graph):
        if (edge.source, edge.target) in in_tree:
            continue
        if rng.chance(loop_chance):
            loops.append(edge)
    return loops


def create_corridor(room_a: Room, room_b: Room, rng) -> Corridor:
    start, end = room_a.center, room_b.center
    horizontal_first = rng.chance(0.5)
    path: List[Position] = []

    def run_x(y, x0, x1):
        step = 1 if x1 >= x0 else -1
        for x in range(x0, x1 + step, step):
            path.append(Position(x, y))

    def run_y(x, y0, y1):
        step = 1 if y1 >= y0 else -1
        for y in range(y0, y1 + step, step):
            path.append(Position(x, y))

    if horizontal_first:
        run_x(start.y, start.x, end.x)
        run_y(end.x, start.y, end.y)
    else:
        run_y(start.x, start.y, end.y)
        run_x(end.y, start.x, end.x)
    # drop the repeated corner cell
    deduped: List[Position] = []
    for p in path:
        if not deduped or deduped[-1] != p:
            deduped.append(p)
    return Corridor(tuple(deduped), start, end)


def carve_corridor(tiles, corridor: Corridor) -> None:
    for p in corridor.path:
        carve_floor(tiles[p.y][p.x])


def generate_corridors(rooms: Sequence[Room], loop_chance: float, rng) -> Tuple[List[Corridor], int]:
    """Return (corridors, loop_count) for the rooms: tree edges first, then loops."""
    if len(rooms) < 2:
        return [], 0
    graph = build_room_graph(rooms)
    tree = generate_mst(graph)
    loops = select_loop_edges(graph, tree, loop_chance, rng)
    corridors = [create_corridor(rooms[e.source], rooms[e.target], rng) for e in list(tree) + loops]
    return corridors, len(loops)


__all__ = [
    "Edge",
    "GraphNode",
    "Corridor",
    "build_room_graph",
    "generate_mst",
    "select_loop_edges",
    "create_corridor",
    "carve_corridor",
    "generate_corridors",
]
