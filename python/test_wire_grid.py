"""Tests for wire_grid module."""

import pytest

from wire_grid import (
    EMPTY_TILE,
    WireGrid,
    decode_kind,
    decode_rotation,
    encode_tile,
)
from wire_types import WireKind


class TestTileEncoding:
    """Tests for packing kind and rotation into one integer."""

    @pytest.mark.parametrize("kind", list(WireKind))
    @pytest.mark.parametrize("rotation", [0, 1, 2, 3, 4, 7])
    def test_decode_recovers_kind_and_rotation(self, kind: WireKind, rotation: int) -> None:
        """Decoding returns the kind and the rotation mod 4."""
        tile = encode_tile(kind, rotation)
        assert decode_kind(tile) == kind
        assert decode_rotation(tile) == rotation % 4

    def test_bit_layout(self) -> None:
        """Kind sits in the low byte, rotation in bits 8-9."""
        assert encode_tile(WireKind.CORNER_L, 3) == 0x307
        assert encode_tile(WireKind.NONE, 0) == EMPTY_TILE

    def test_reencode_is_lossless(self) -> None:
        tile = encode_tile(WireKind.TEE_T, 2)
        assert encode_tile(decode_kind(tile), decode_rotation(tile)) == tile

    def test_unknown_kind_byte_reads_as_none(self) -> None:
        """A kind byte outside the enumeration is treated as empty."""
        assert decode_kind(0x0FE) == WireKind.NONE
        assert decode_rotation(0x1FE) == 1

    def test_reserved_bits_ignored(self) -> None:
        tile = encode_tile(WireKind.STRAIGHT_I, 1) | (1 << 12)
        assert decode_kind(tile) == WireKind.STRAIGHT_I
        assert decode_rotation(tile) == 1


class TestWireGrid:
    """Tests for bounds-checked grid storage."""

    def test_starts_empty(self) -> None:
        grid = WireGrid(3, 2)
        assert grid.snapshot() == (EMPTY_TILE,) * 6
        assert all(not grid.is_occupied(x, y) for x, y in grid.cells())

    def test_index_is_row_major(self) -> None:
        grid = WireGrid(4, 3)
        assert grid.index(0, 0) == 0
        assert grid.index(3, 0) == 3
        assert grid.index(1, 2) == 9

    def test_cells_iterate_row_by_row(self) -> None:
        grid = WireGrid(2, 2)
        assert list(grid.cells()) == [(0, 0), (1, 0), (0, 1), (1, 1)]

    @pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (3, 0), (0, 2), (5, 5)])
    def test_out_of_bounds_reads_are_empty(self, x: int, y: int) -> None:
        grid = WireGrid(3, 2)
        assert not grid.in_bounds(x, y)
        assert grid.get_tile(x, y) == EMPTY_TILE
        assert grid.kind_at(x, y) == WireKind.NONE
        assert grid.rotation_at(x, y) == 0

    def test_out_of_bounds_writes_are_ignored(self) -> None:
        """Writing outside the grid must not wrap onto another cell."""
        grid = WireGrid(3, 2)
        grid.set_tile(-1, 1, encode_tile(WireKind.NORMAL, 0))
        grid.set_tile(3, 0, encode_tile(WireKind.NORMAL, 0))
        assert grid.snapshot() == (EMPTY_TILE,) * 6

    def test_set_and_read_back(self) -> None:
        grid = WireGrid(3, 2)
        grid.set_tile(2, 1, encode_tile(WireKind.TELEPORT, 2))
        assert grid.kind_at(2, 1) == WireKind.TELEPORT
        assert grid.rotation_at(2, 1) == 2
        assert grid.tiles[5] == encode_tile(WireKind.TELEPORT, 2)

    def test_negative_dimensions_rejected(self) -> None:
        with pytest.raises(ValueError, match="Invalid grid dimensions"):
            WireGrid(-1, 3)

    def test_zero_sized_grid(self) -> None:
        grid = WireGrid(0, 0)
        assert list(grid.cells()) == []
        assert grid.get_tile(0, 0) == EMPTY_TILE
