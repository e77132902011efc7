"""
Connection model: which sides of a cell a wire piece opens onto.

A connection mask is a 4-bit set over Direction values. Pieces are described by
their mask at rotation 0; rotations are applied one direction bit at a time
through ROTATION_TABLE.
"""

from __future__ import annotations

from wire_grid import WireGrid
from wire_types import (
    ALL_DIRECTIONS_MASK,
    DIRECTIONS,
    Cell,
    Direction,
    RuleSet,
    TileType,
    TileTypeFn,
    WireKind,
)

__all__ = [
    "BASE_MASKS",
    "MASK_GLYPHS",
    "OMNI_KINDS",
    "ROTATION_TABLE",
    "connection_mask",
    "directions_in",
    "mask_at",
    "opposite",
    "rotate_mask",
    "step",
]

R, L, U, D = Direction.RIGHT, Direction.LEFT, Direction.UP, Direction.DOWN

# Pieces that conduct on every side whatever their rotation
OMNI_KINDS = frozenset(
    {
        WireKind.NORMAL,
        WireKind.ENERGY_LOSS,
        WireKind.RECHARGE,
        WireKind.TELEPORT,
        WireKind.CROSS_X,
    }
)

# Masks at rotation 0
BASE_MASKS: dict[WireKind, int] = {
    WireKind.STRAIGHT_I: U.value | D.value,
    WireKind.CORNER_L: U.value | R.value,
    WireKind.TEE_T: D.value | L.value | R.value,
}

# ROTATION_TABLE[steps][d]: where side d ends up after `steps` clockwise
# quarter turns. One step is Right -> Down -> Left -> Up -> Right.
ROTATION_TABLE: tuple[dict[Direction, Direction], ...] = (
    {R: R, D: D, L: L, U: U},
    {R: D, D: L, L: U, U: R},
    {R: L, D: U, L: R, U: D},
    {R: U, D: R, L: D, U: L},
)

_OPPOSITES = {R: L, L: R, U: D, D: U}

_DELTAS: dict[Direction, tuple[int, int]] = {
    R: (1, 0),
    L: (-1, 0),
    U: (0, 1),
    D: (0, -1),
}

# Box-drawing glyph for each mask a piece can produce
MASK_GLYPHS: dict[int, str] = {
    U.value | D.value: "│",
    R.value | L.value: "─",
    U.value | R.value: "└",
    R.value | D.value: "┌",
    D.value | L.value: "┐",
    L.value | U.value: "┘",
    D.value | L.value | R.value: "┬",
    L.value | U.value | D.value: "┤",
    U.value | R.value | L.value: "┴",
    R.value | D.value | U.value: "├",
    ALL_DIRECTIONS_MASK: "┼",
}


def opposite(direction: Direction) -> Direction:
    return _OPPOSITES[direction]


def step(x: int, y: int, direction: Direction) -> Cell:
    """The cell one step from (x, y) towards `direction`."""
    dx, dy = _DELTAS[direction]
    return (x + dx, y + dy)


def directions_in(mask: int) -> list[Direction]:
    """Directions whose bit is set in `mask`, in scan order."""
    return [d for d in DIRECTIONS if mask & d.value]


def rotate_mask(mask: int, rotation: int) -> int:
    """Rotate a mask clockwise by `rotation` quarter turns (any integer)."""
    rotation = ((rotation % 4) + 4) % 4
    table = ROTATION_TABLE[rotation]
    result = 0
    for direction in directions_in(mask):
        result |= table[direction].value
    return result


def connection_mask(kind: WireKind, rotation: int) -> int:
    """
    Sides a piece of `kind` opens onto at the given rotation.

    Omni pieces are open on all sides for every rotation. NONE and any
    unrecognized kind have no connections.
    """
    if kind in OMNI_KINDS:
        return ALL_DIRECTIONS_MASK
    base = BASE_MASKS.get(kind)
    if base is None:
        return 0
    return rotate_mask(base, rotation)


def mask_at(
    grid: WireGrid,
    tile_type_at: TileTypeFn,
    x: int,
    y: int,
    rules: RuleSet = RuleSet(),
) -> int:
    """
    Connection mask of the cell at (x, y).

    Start and End tiles open on every side regardless of any wire on them.
    Cells outside the grid have no connections.
    """
    if not grid.in_bounds(x, y):
        return 0
    if rules.universal_terminals and tile_type_at(x, y) in (TileType.START, TileType.END):
        return ALL_DIRECTIONS_MASK
    kind = grid.kind_at(x, y)
    if kind == WireKind.NONE:
        return 0
    return connection_mask(kind, grid.rotation_at(x, y))
