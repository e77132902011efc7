"""
Connectivity graph over a wire grid.

Nodes are identified by the linear offset of their cell; each node keeps an
ordered list of neighbour offsets. Edges are stored as two one-way links.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from connections import mask_at, opposite, step, directions_in
from wire_grid import WireGrid
from wire_types import Cell, RuleSet, TileType, TileTypeFn, WireKind

__all__ = ["WireGraph", "build_graph"]

logger = logging.getLogger(__name__)


@dataclass
class WireGraph:
    """Adjacency list keyed by cell offset (y * width + x)."""

    width: int
    height: int
    adjacency: dict[int, list[int]] = field(default_factory=dict)

    def node_id(self, cell: Cell) -> int:
        x, y = cell
        return y * self.width + x

    def cell_of(self, node_id: int) -> Cell:
        y, x = divmod(node_id, self.width)
        return (x, y)

    def contains(self, cell: Cell) -> bool:
        """Whether `cell` lies inside the grid the graph was built from."""
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def has_node(self, cell: Cell) -> bool:
        return self.contains(cell) and self.node_id(cell) in self.adjacency

    def nodes(self) -> list[Cell]:
        """Node cells in creation order."""
        return [self.cell_of(node_id) for node_id in self.adjacency]

    def neighbors(self, cell: Cell) -> list[Cell]:
        """Neighbour cells in link order. Unknown cells have none."""
        if not self.has_node(cell):
            return []
        return [self.cell_of(n) for n in self.adjacency[self.node_id(cell)]]

    def edge_count(self) -> int:
        """Number of one-way links."""
        return sum(len(links) for links in self.adjacency.values())


def build_graph(
    grid: WireGrid,
    tile_type_at: TileTypeFn,
    rules: RuleSet = RuleSet(),
) -> WireGraph:
    """
    Build the connectivity graph for the current grid contents.

    1. Every Start/End tile and every occupied cell becomes a node.
    2. A node links to an orthogonal neighbour only when its own mask opens
       towards the neighbour and the neighbour's mask opens back.
    3. Every teleport links to every other teleport, ignoring position.

    Args:
        grid: Wire storage to read
        tile_type_at: Tile-type query from the map component
        rules: RuleSet governing teleport links and terminal masks

    Returns:
        A fresh WireGraph
    """
    graph = WireGraph(grid.width, grid.height)
    adjacency = graph.adjacency

    for x, y in grid.cells():
        if tile_type_at(x, y) in (TileType.START, TileType.END) or grid.is_occupied(x, y):
            adjacency[grid.index(x, y)] = []

    for node_id, links in adjacency.items():
        x, y = graph.cell_of(node_id)
        mask = mask_at(grid, tile_type_at, x, y, rules)
        for direction in directions_in(mask):
            nx, ny = step(x, y, direction)
            if not grid.in_bounds(nx, ny):
                continue
            neighbor_id = grid.index(nx, ny)
            if neighbor_id not in adjacency:
                continue
            neighbor_mask = mask_at(grid, tile_type_at, nx, ny, rules)
            if not neighbor_mask & opposite(direction).value:
                continue
            links.append(neighbor_id)

    teleports: list[int] = []
    if rules.teleport_links:
        teleports = [
            node_id
            for node_id in adjacency
            if grid.kind_at(*graph.cell_of(node_id)) == WireKind.TELEPORT
        ]
        for a in teleports:
            for b in teleports:
                if a != b:
                    adjacency[a].append(b)

    logger.debug(
        "build_graph: %d nodes, %d links, %d teleports",
        len(adjacency),
        graph.edge_count(),
        len(teleports),
    )
    return graph
