"""
Circuit puzzle state: wire placement on a tile map and Start-to-End queries.

The Circuit owns the wire grid and a cached connectivity graph (with the Start
and End cells found alongside it). Every mutation that can change a cell's
kind or rotation marks the graph dirty; the next path query rebuilds it.
Mutations never raise for bad coordinates or targets, they return False (or do
nothing) instead.

Tile types are read through `tile_type_at`, which the Circuit does not own.
Edit terrain with `Circuit.set_tile_type` / `Circuit.cycle_tile_type`; code
that changes the underlying map any other way must call `invalidate()`.

Not thread-safe: callers must serialize access to a Circuit.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pathfinding import NOT_FOUND, PathResult, bfs_path, find_terminals
from wire_graph import WireGraph, build_graph
from wire_grid import EMPTY_TILE, WireGrid, decode_kind, decode_rotation, encode_tile
from wire_types import Cell, RuleSet, TileType, TileTypeFn, WireKind

if TYPE_CHECKING:
    from tile_map import TileMap

__all__ = ["Circuit", "ROTATABLE_KINDS", "needs_rotation", "next_kind"]

logger = logging.getLogger(__name__)

# Kinds whose rotation changes their connections
ROTATABLE_KINDS = frozenset({WireKind.CORNER_L, WireKind.TEE_T, WireKind.STRAIGHT_I})


def needs_rotation(kind: WireKind) -> bool:
    return kind in ROTATABLE_KINDS


def next_kind(kind: WireKind, step: int = 1) -> WireKind:
    """Cycle through the wire kinds (NONE included), wrapping at either end."""
    kinds = list(WireKind)
    return kinds[(kinds.index(kind) + step) % len(kinds)]


class Circuit:
    """Wire grid plus lazily rebuilt connectivity graph."""

    def __init__(
        self,
        width: int,
        height: int,
        tile_type_at: TileTypeFn,
        rules: RuleSet = RuleSet(),
    ) -> None:
        self.grid = WireGrid(width, height)
        self.tile_type_at = tile_type_at
        self.rules = rules
        self.tile_map: TileMap | None = None
        self.dirty = True
        self._graph: WireGraph | None = None
        self._terminals: tuple[Cell | None, Cell | None] = (None, None)

    @classmethod
    def for_map(cls, tile_map: TileMap, rules: RuleSet = RuleSet()) -> Circuit:
        """An empty circuit sized to, querying and editing `tile_map`."""
        circuit = cls(tile_map.width, tile_map.height, tile_map.tile_type_at, rules)
        circuit.tile_map = tile_map
        return circuit

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height

    def invalidate(self) -> None:
        """Drop the cached graph; the next path query rebuilds it."""
        self.dirty = True

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_kind(self, x: int, y: int) -> WireKind:
        return self.grid.kind_at(x, y)

    def get_rotation(self, x: int, y: int) -> int:
        return self.grid.rotation_at(x, y)

    def is_valid_placement(self, x: int, y: int) -> bool:
        """In bounds and on a Floor tile."""
        if not self.grid.in_bounds(x, y):
            return False
        return self.tile_type_at(x, y) == TileType.FLOOR

    def describe_tile(self, x: int, y: int) -> str:
        """Human-readable dump of one cell, also logged at DEBUG."""
        if not self.grid.in_bounds(x, y):
            logger.warning("describe_tile: invalid position (%d, %d)", x, y)
            return f"Invalid position: ({x}, {y})"
        tile = self.grid.get_tile(x, y)
        text = (
            f"Tile ({x},{y}): kind={decode_kind(tile).name}, "
            f"rotation={decode_rotation(tile) * 90}deg, raw=0x{tile:X} ({tile})"
        )
        logger.debug("describe_tile: %s", text)
        return text

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def place(self, x: int, y: int, kind: WireKind, rotation: int = 0) -> bool:
        """Put a piece on an in-bounds Floor cell, replacing whatever is there."""
        if not self.is_valid_placement(x, y):
            logger.debug("place: (%d, %d) is not a valid placement", x, y)
            return False
        self.grid.set_tile(x, y, encode_tile(kind, rotation))
        self.invalidate()
        logger.debug("place: %s r%d at (%d, %d)", kind.name, rotation % 4, x, y)
        return True

    def remove(self, x: int, y: int) -> None:
        """Clear a cell. No floor check: any existing wire can be removed."""
        if not self.grid.in_bounds(x, y):
            return
        self.grid.set_tile(x, y, EMPTY_TILE)
        self.invalidate()

    def rotate(self, x: int, y: int, clockwise: bool = True) -> None:
        """Turn the piece at (x, y) a quarter turn. Empty cells are left alone."""
        if not self.grid.in_bounds(x, y):
            return
        tile = self.grid.get_tile(x, y)
        kind = decode_kind(tile)
        if kind == WireKind.NONE:
            return
        rotation = decode_rotation(tile)
        rotation = (rotation + 1) % 4 if clockwise else (rotation + 3) % 4
        self.grid.set_tile(x, y, encode_tile(kind, rotation))
        self.invalidate()

    def set_rotation(self, x: int, y: int, rotation: int) -> None:
        """Force the rotation at (x, y) to `rotation` mod 4, keeping the kind."""
        if not self.grid.in_bounds(x, y):
            return
        kind = self.grid.kind_at(x, y)
        self.grid.set_tile(x, y, encode_tile(kind, rotation % 4))
        self.invalidate()

    def swap(self, x1: int, y1: int, x2: int, y2: int) -> bool:
        """Exchange two cells, kind and rotation together."""
        if not self.grid.in_bounds(x1, y1) or not self.grid.in_bounds(x2, y2):
            return False
        first = self.grid.get_tile(x1, y1)
        self.grid.set_tile(x1, y1, self.grid.get_tile(x2, y2))
        self.grid.set_tile(x2, y2, first)
        self.invalidate()
        return True

    def move(self, src_x: int, src_y: int, dst_x: int, dst_y: int) -> bool:
        """Move a piece onto an empty Floor cell."""
        if not self.grid.is_occupied(src_x, src_y):
            return False
        if not self.is_valid_placement(dst_x, dst_y):
            return False
        if self.grid.is_occupied(dst_x, dst_y):
            return False
        self.grid.set_tile(dst_x, dst_y, self.grid.get_tile(src_x, src_y))
        self.grid.set_tile(src_x, src_y, EMPTY_TILE)
        self.invalidate()
        return True

    # -------------------------------------------------------------------------
    # Terrain
    # -------------------------------------------------------------------------

    def set_tile_type(self, x: int, y: int, tile_type: TileType) -> bool:
        """
        Change the tile type at (x, y) on the circuit's map.

        Wires already on the cell stay where they are. Returns False when the
        circuit has no map to edit or (x, y) is out of bounds.
        """
        if self.tile_map is None:
            logger.warning("set_tile_type: circuit has no tile map to edit")
            return False
        if not self.tile_map.set_tile_type(x, y, tile_type):
            return False
        self.invalidate()
        return True

    def cycle_tile_type(self, x: int, y: int) -> TileType | None:
        """Advance the tile at (x, y) to the next type; None if nothing changed."""
        if self.tile_map is None:
            logger.warning("cycle_tile_type: circuit has no tile map to edit")
            return None
        new_type = self.tile_map.cycle_tile_type(x, y)
        if new_type is not None:
            self.invalidate()
        return new_type

    # -------------------------------------------------------------------------
    # Connectivity
    # -------------------------------------------------------------------------

    @property
    def graph(self) -> WireGraph:
        """The connectivity graph, rebuilt first if any mutation made it stale."""
        if self.dirty or self._graph is None:
            self._graph = build_graph(self.grid, self.tile_type_at, self.rules)
            self._terminals = find_terminals(self.width, self.height, self.tile_type_at)
            self.dirty = False
        return self._graph

    def find_path(self) -> PathResult:
        """Shortest Start-to-End path through connected pieces, if any."""
        graph = self.graph
        start, end = self._terminals
        if start is None or end is None:
            logger.debug("find_path: missing start (%s) or end (%s)", start, end)
            return NOT_FOUND

        path = bfs_path(graph, start, end)
        if path is None:
            logger.debug("find_path: no route from %s to %s", start, end)
            return NOT_FOUND
        logger.debug("find_path: %d-cell route from %s to %s", len(path), start, end)
        return PathResult(True, tuple(path))

    def check_win(self) -> bool:
        return self.find_path().found
