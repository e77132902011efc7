"""
Reachability queries over a WireGraph.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

from wire_graph import WireGraph
from wire_types import Cell, TileType, TileTypeFn

__all__ = ["PathResult", "NOT_FOUND", "bfs_path", "find_terminals", "find_tile"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathResult:
    """Outcome of a Start-to-End query."""

    found: bool
    path: tuple[Cell, ...] = ()  # Start first, End last; empty when not found


NOT_FOUND = PathResult(False)


def find_tile(width: int, height: int, tile_type_at: TileTypeFn, tile_type: TileType) -> Cell | None:
    """First cell of `tile_type` in row-major order, or None."""
    matches = [
        (x, y)
        for y in range(height)
        for x in range(width)
        if tile_type_at(x, y) == tile_type
    ]
    if not matches:
        return None
    if len(matches) > 1:
        logger.warning(
            "find_tile: %d %s tiles found, using %s", len(matches), tile_type.name, matches[0]
        )
    return matches[0]


def find_terminals(width: int, height: int, tile_type_at: TileTypeFn) -> tuple[Cell | None, Cell | None]:
    """Locate the (Start, End) cells."""
    return (
        find_tile(width, height, tile_type_at, TileType.START),
        find_tile(width, height, tile_type_at, TileType.END),
    )


def bfs_path(graph: WireGraph, start: Cell, end: Cell) -> list[Cell] | None:
    """
    Breadth-first search from `start` to `end`.

    Neighbours are expanded in link order, so the result is deterministic for a
    given graph. Returns a shortest path by link count (both endpoints
    included), or None if `end` cannot be reached.
    """
    if not graph.has_node(start) or not graph.has_node(end):
        return None

    visited: set[Cell] = {start}
    parents: dict[Cell, Cell] = {}
    queue: deque[Cell] = deque([start])

    while queue:
        current = queue.popleft()
        if current == end:
            path = [current]
            while current != start:
                current = parents[current]
                path.append(current)
            path.reverse()
            return path

        for nxt in graph.neighbors(current):
            if nxt in visited:
                continue
            visited.add(nxt)
            parents[nxt] = current
            queue.append(nxt)

    return None
