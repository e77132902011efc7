"""Tests for the connection model."""

import pytest

from connections import (
    MASK_GLYPHS,
    ROTATION_TABLE,
    connection_mask,
    directions_in,
    mask_at,
    opposite,
    rotate_mask,
    step,
)
from tile_map import TileMap
from wire_grid import WireGrid, encode_tile
from wire_types import ALL_DIRECTIONS_MASK, Direction, RuleSet, TileType, WireKind

R, L, U, D = (d.value for d in (Direction.RIGHT, Direction.LEFT, Direction.UP, Direction.DOWN))


class TestConnectionMask:
    """Tests for connection_mask."""

    @pytest.mark.parametrize(
        "kind",
        [WireKind.NORMAL, WireKind.ENERGY_LOSS, WireKind.RECHARGE, WireKind.TELEPORT, WireKind.CROSS_X],
    )
    @pytest.mark.parametrize("rotation", [0, 1, 2, 3])
    def test_omni_kinds_open_everywhere(self, kind: WireKind, rotation: int) -> None:
        assert connection_mask(kind, rotation) == ALL_DIRECTIONS_MASK

    def test_none_has_no_connections(self) -> None:
        for rotation in range(4):
            assert connection_mask(WireKind.NONE, rotation) == 0

    def test_canonical_masks(self) -> None:
        """Rotation 0 shapes."""
        assert connection_mask(WireKind.STRAIGHT_I, 0) == U | D
        assert connection_mask(WireKind.CORNER_L, 0) == U | R
        assert connection_mask(WireKind.TEE_T, 0) == D | L | R

    def test_straight_rotations(self) -> None:
        assert connection_mask(WireKind.STRAIGHT_I, 1) == R | L
        assert connection_mask(WireKind.STRAIGHT_I, 2) == U | D
        assert connection_mask(WireKind.STRAIGHT_I, 3) == R | L

    def test_corner_turns_clockwise(self) -> None:
        """Up+Right -> Right+Down -> Down+Left -> Left+Up."""
        assert connection_mask(WireKind.CORNER_L, 1) == R | D
        assert connection_mask(WireKind.CORNER_L, 2) == D | L
        assert connection_mask(WireKind.CORNER_L, 3) == L | U

    def test_tee_rotations_drop_one_side(self) -> None:
        assert connection_mask(WireKind.TEE_T, 1) == ALL_DIRECTIONS_MASK & ~R
        assert connection_mask(WireKind.TEE_T, 2) == ALL_DIRECTIONS_MASK & ~D
        assert connection_mask(WireKind.TEE_T, 3) == ALL_DIRECTIONS_MASK & ~L

    def test_rotation_is_normalized(self) -> None:
        """Out-of-range and negative rotations wrap."""
        assert connection_mask(WireKind.CORNER_L, 5) == connection_mask(WireKind.CORNER_L, 1)
        assert connection_mask(WireKind.CORNER_L, -1) == connection_mask(WireKind.CORNER_L, 3)


class TestRotation:
    """Tests for the rotation table and helpers."""

    def test_table_cycle(self) -> None:
        """One clockwise step: Right -> Down -> Left -> Up -> Right."""
        one = ROTATION_TABLE[1]
        assert one[Direction.RIGHT] == Direction.DOWN
        assert one[Direction.DOWN] == Direction.LEFT
        assert one[Direction.LEFT] == Direction.UP
        assert one[Direction.UP] == Direction.RIGHT

    def test_table_rows_compose(self) -> None:
        """Row n is row 1 applied n times."""
        for steps in range(4):
            for d in Direction:
                expected = d
                for _ in range(steps):
                    expected = ROTATION_TABLE[1][expected]
                assert ROTATION_TABLE[steps][d] == expected

    def test_four_steps_is_identity(self) -> None:
        for mask in range(16):
            assert rotate_mask(mask, 4) == mask
            assert rotate_mask(rotate_mask(mask, 1), 3) == mask

    def test_opposites(self) -> None:
        assert opposite(Direction.RIGHT) == Direction.LEFT
        assert opposite(Direction.LEFT) == Direction.RIGHT
        assert opposite(Direction.UP) == Direction.DOWN
        assert opposite(Direction.DOWN) == Direction.UP

    def test_step_uses_up_as_positive_y(self) -> None:
        assert step(2, 2, Direction.RIGHT) == (3, 2)
        assert step(2, 2, Direction.LEFT) == (1, 2)
        assert step(2, 2, Direction.UP) == (2, 3)
        assert step(2, 2, Direction.DOWN) == (2, 1)

    def test_directions_in_scan_order(self) -> None:
        assert directions_in(ALL_DIRECTIONS_MASK) == [
            Direction.RIGHT,
            Direction.LEFT,
            Direction.UP,
            Direction.DOWN,
        ]
        assert directions_in(D | R) == [Direction.RIGHT, Direction.DOWN]
        assert directions_in(0) == []

    def test_every_piece_has_a_glyph(self) -> None:
        for kind in WireKind:
            for rotation in range(4):
                mask = connection_mask(kind, rotation)
                if mask:
                    assert mask in MASK_GLYPHS


class TestMaskAt:
    """Tests for position-level mask lookup."""

    def _setup(self) -> tuple[WireGrid, TileMap]:
        tile_map = TileMap.empty(3, 1)
        tile_map.set_tile_type(0, 0, TileType.START)
        tile_map.set_tile_type(2, 0, TileType.END)
        return WireGrid(3, 1), tile_map

    def test_terminals_connect_everywhere(self) -> None:
        grid, tile_map = self._setup()
        assert mask_at(grid, tile_map.tile_type_at, 0, 0) == ALL_DIRECTIONS_MASK
        assert mask_at(grid, tile_map.tile_type_at, 2, 0) == ALL_DIRECTIONS_MASK

    def test_terminal_ignores_wire_on_it(self) -> None:
        grid, tile_map = self._setup()
        grid.set_tile(0, 0, encode_tile(WireKind.STRAIGHT_I, 0))
        assert mask_at(grid, tile_map.tile_type_at, 0, 0) == ALL_DIRECTIONS_MASK

    def test_empty_floor_has_no_connections(self) -> None:
        grid, tile_map = self._setup()
        assert mask_at(grid, tile_map.tile_type_at, 1, 0) == 0

    def test_wire_uses_its_rotation(self) -> None:
        grid, tile_map = self._setup()
        grid.set_tile(1, 0, encode_tile(WireKind.CORNER_L, 2))
        assert mask_at(grid, tile_map.tile_type_at, 1, 0) == D | L

    def test_out_of_bounds(self) -> None:
        grid, tile_map = self._setup()
        assert mask_at(grid, tile_map.tile_type_at, -1, 0) == 0
        assert mask_at(grid, tile_map.tile_type_at, 3, 0) == 0

    def test_terminals_without_universal_rule(self) -> None:
        """With universal terminals off, an empty Start has no connections."""
        grid, tile_map = self._setup()
        rules = RuleSet(universal_terminals=False)
        assert mask_at(grid, tile_map.tile_type_at, 0, 0, rules) == 0
        grid.set_tile(0, 0, encode_tile(WireKind.STRAIGHT_I, 1))
        assert mask_at(grid, tile_map.tile_type_at, 0, 0, rules) == R | L
