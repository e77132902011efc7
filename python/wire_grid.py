"""
Packed wire storage for a fixed-size rectangular grid.

Each cell holds one integer:

    [reserved] [2 bits: rotation] [8 bits: WireKind]

All accessors fail closed: reads outside the grid return the empty tile and
writes outside the grid are ignored.
"""

from __future__ import annotations

from typing import Iterator

from wire_types import Cell, WireKind

__all__ = [
    "EMPTY_TILE",
    "KIND_MASK",
    "ROTATION_MASK",
    "ROTATION_SHIFT",
    "WireGrid",
    "decode_kind",
    "decode_rotation",
    "encode_tile",
]

KIND_MASK = 0xFF  # bits 0-7
ROTATION_MASK = 0x300  # bits 8-9
ROTATION_SHIFT = 8

EMPTY_TILE = 0

_KNOWN_KINDS = frozenset(kind.value for kind in WireKind)


def encode_tile(kind: WireKind, rotation: int) -> int:
    """Pack a wire kind and a rotation (taken mod 4) into a tile value."""
    return (int(kind) & KIND_MASK) | ((rotation & 0x3) << ROTATION_SHIFT)


def decode_kind(tile: int) -> WireKind:
    """Kind byte of a tile. Bytes outside the enumeration read as NONE."""
    value = tile & KIND_MASK
    if value not in _KNOWN_KINDS:
        return WireKind.NONE
    return WireKind(value)


def decode_rotation(tile: int) -> int:
    return (tile & ROTATION_MASK) >> ROTATION_SHIFT


class WireGrid:
    """Flat row-major array of packed tiles."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError(
                f"Invalid grid dimensions: {width}x{height}\n"
                f"  Width and height must be non-negative"
            )
        self.width = width
        self.height = height
        self.tiles: list[int] = [EMPTY_TILE] * (width * height)

    def index(self, x: int, y: int) -> int:
        """Linear offset of (x, y). Does not check bounds."""
        return y * self.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile(self, x: int, y: int) -> int:
        if not self.in_bounds(x, y):
            return EMPTY_TILE
        return self.tiles[self.index(x, y)]

    def set_tile(self, x: int, y: int, tile: int) -> None:
        if not self.in_bounds(x, y):
            return
        self.tiles[self.index(x, y)] = tile

    def kind_at(self, x: int, y: int) -> WireKind:
        return decode_kind(self.get_tile(x, y))

    def rotation_at(self, x: int, y: int) -> int:
        return decode_rotation(self.get_tile(x, y))

    def is_occupied(self, x: int, y: int) -> bool:
        return self.kind_at(x, y) != WireKind.NONE

    def cells(self) -> Iterator[Cell]:
        """Iterate over every cell, row by row from y = 0."""
        for y in range(self.height):
            for x in range(self.width):
                yield (x, y)

    def snapshot(self) -> tuple[int, ...]:
        """Immutable copy of the packed tiles, for comparisons."""
        return tuple(self.tiles)

    def __repr__(self) -> str:
        occupied = sum(1 for tile in self.tiles if decode_kind(tile) != WireKind.NONE)
        return f"WireGrid({self.width}x{self.height}, {occupied} wires)"
