"""
Level parsing utilities for circuitgrid.

Provides two parsing formats:
1. Standard format with spaces, wire letters and explicit rotations
2. Concise format with single-character cells, drawing wires as box glyphs

In both formats the first row of text is the top of the map (highest y).
"""

from __future__ import annotations

from dataclasses import dataclass

from circuit import Circuit
from connections import MASK_GLYPHS, connection_mask
from tile_map import TileMap
from wire_types import RuleSet, TileType, WireKind

__all__ = [
    "Level",
    "Placement",
    "build_circuit",
    "parse_level",
    "parse_level_concise",
]

TILE_TOKENS: dict[str, TileType] = {
    "S": TileType.START,
    "E": TileType.END,
    "#": TileType.WALL,
    "~": TileType.RIVER,
    ".": TileType.FLOOR,
    "_": TileType.FLOOR,
}

WIRE_LETTERS: dict[str, WireKind] = {
    "N": WireKind.NORMAL,
    "D": WireKind.ENERGY_LOSS,  # drain
    "C": WireKind.RECHARGE,  # charge
    "P": WireKind.TELEPORT,  # portal
    "X": WireKind.CROSS_X,
    "T": WireKind.TEE_T,
    "L": WireKind.CORNER_L,
    "I": WireKind.STRAIGHT_I,
}

OMNI_LETTERS = {
    letter: kind
    for letter, kind in WIRE_LETTERS.items()
    if kind in (WireKind.NORMAL, WireKind.ENERGY_LOSS, WireKind.RECHARGE, WireKind.TELEPORT, WireKind.CROSS_X)
}


def _glyph_pieces() -> dict[str, tuple[WireKind, int]]:
    """Map each box glyph to the first (kind, rotation) that draws it."""
    pieces: dict[str, tuple[WireKind, int]] = {}
    for kind in (WireKind.STRAIGHT_I, WireKind.CORNER_L, WireKind.TEE_T, WireKind.CROSS_X):
        for rotation in range(4):
            glyph = MASK_GLYPHS[connection_mask(kind, rotation)]
            pieces.setdefault(glyph, (kind, rotation))
    return pieces


GLYPH_PIECES = _glyph_pieces()


@dataclass(frozen=True)
class Placement:
    """A wire to put on the map when the level is built."""

    x: int
    y: int
    kind: WireKind
    rotation: int = 0


@dataclass(frozen=True)
class Level:
    """A parsed level: terrain plus initial wires."""

    tile_map: TileMap
    wires: tuple[Placement, ...]

    def build(self, rules: RuleSet = RuleSet()) -> Circuit:
        """Create a Circuit on a copy of this level's map with its wires placed."""
        circuit = Circuit.for_map(self.tile_map.copy(), rules)
        for wire in self.wires:
            circuit.place(wire.x, wire.y, wire.kind, wire.rotation)
        return circuit


def _parse_token(token: str) -> tuple[TileType, tuple[WireKind, int] | None] | None:
    if not token:  # Empty string from split = empty floor
        return TileType.FLOOR, None
    if token in TILE_TOKENS:
        return TILE_TOKENS[token], None
    kind = WIRE_LETTERS.get(token[0])
    if kind is None:
        return None
    rest = token[1:]
    if not rest:
        return TileType.FLOOR, (kind, 0)
    if len(rest) == 1 and rest in "0123":
        return TileType.FLOOR, (kind, int(rest))
    return None


def parse_level(definition: str) -> Level:
    """
    Parse a level from the standard string format.

    Format:
    - Rows separated by |, first row is the top of the map
    - Cells separated by single spaces
    - Tile tokens: S (Start), E (End), # (Wall), ~ (River), . or _ (empty Floor)
    - Wire tokens (always on Floor): kind letter plus optional rotation digit 0-3
      N Normal, D EnergyLoss, C Recharge, P Teleport, X CrossX,
      T TeeT, L CornerL, I StraightI
      Examples: "I" -> StraightI r0, "L3" -> CornerL r3
    - Empty string (from multiple adjacent spaces): empty Floor

    Example:
        "S I1 E|# L1 #"
        Creates a 3x2 map: Start (0,1), StraightI r1 at (1,1), End (2,1) on top,
        walls either side of a CornerL r1 at (1,0) below.

    Args:
        definition: Level definition string

    Returns:
        Parsed Level

    Raises:
        ValueError: On unknown tokens or rows of different lengths
    """
    row_strings = definition.strip().split("|")
    rows: list[list[tuple[TileType, tuple[WireKind, int] | None]]] = []

    for row_idx, row_str in enumerate(row_strings):
        cells = []
        for col_idx, token in enumerate(row_str.strip().split(" ")):
            parsed = _parse_token(token)
            if parsed is None:
                raise ValueError(
                    f"Invalid cell string: '{token}'\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Valid formats:\n"
                    f"    - Tiles: S (start), E (end), # (wall), ~ (river), . or _ (floor)\n"
                    f"    - Wires: one of {''.join(WIRE_LETTERS)} with optional rotation 0-3 (e.g. 'L', 'I1')\n"
                    f"    - Empty string (multiple spaces): floor"
                )
            cells.append(parsed)
        rows.append(cells)

    width = len(rows[0])
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != width]
    if mismatched:
        error_msg = (
            f"Inconsistent row lengths in level\n"
            f"  Expected: {width} columns (from row 0)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns - \"{row_strings[row_idx]}\"\n"
        error_msg += "  All rows must have the same number of cells"
        raise ValueError(error_msg)

    return _make_level(rows)


def parse_level_concise(definition: str) -> Level:
    """
    Parse a level from a concise multi-line format.

    Format:
    - One line per row, first line is the top of the map
    - One character per cell, no separators
    - Tile characters: S, E, #, ~, . or _ as in parse_level
    - Wires: box glyphs for shaped pieces (│ ─ └ ┌ ┐ ┘ ┬ ┤ ┴ ├ ┼) and the
      letters N, D, C, P, X for the omni-directional pieces
    - Short rows are padded with Wall

    Example:
        \"\"\"
        S─┐
        #.E
        \"\"\"

    Args:
        definition: Multi-line string with one row per line

    Returns:
        Parsed Level

    Raises:
        ValueError: On unknown characters or an empty definition
    """
    lines = [line.strip() for line in definition.strip().split("\n") if line.strip()]
    if not lines:
        raise ValueError("Empty level definition")

    rows: list[list[tuple[TileType, tuple[WireKind, int] | None]]] = []
    for row_idx, line in enumerate(lines):
        cells = []
        for col_idx, char in enumerate(line):
            if char in TILE_TOKENS:
                cells.append((TILE_TOKENS[char], None))
            elif char in OMNI_LETTERS:
                cells.append((TileType.FLOOR, (OMNI_LETTERS[char], 0)))
            elif char in GLYPH_PIECES:
                cells.append((TileType.FLOOR, GLYPH_PIECES[char]))
            else:
                raise ValueError(
                    f"Invalid character '{char}' in level\n"
                    f"  Row {row_idx}, column {col_idx}\n"
                    f"  Valid characters: {''.join(TILE_TOKENS)}, "
                    f"{''.join(OMNI_LETTERS)}, {''.join(GLYPH_PIECES)}"
                )
        rows.append(cells)

    # Pad rows to maximum length with Wall cells
    max_cols = max(len(row) for row in rows)
    for row in rows:
        row.extend([(TileType.WALL, None)] * (max_cols - len(row)))

    return _make_level(rows)


def _make_level(rows: list[list[tuple[TileType, tuple[WireKind, int] | None]]]) -> Level:
    height = len(rows)
    width = len(rows[0]) if rows else 0
    tile_map = TileMap.empty(width, height)
    wires: list[Placement] = []
    for row_idx, row in enumerate(rows):
        y = height - 1 - row_idx
        for x, (tile_type, wire) in enumerate(row):
            tile_map.set_tile_type(x, y, tile_type)
            if wire is not None:
                kind, rotation = wire
                wires.append(Placement(x, y, kind, rotation))
    return Level(tile_map, tuple(wires))


def build_circuit(definition: str, rules: RuleSet = RuleSet()) -> Circuit:
    """Parse a standard-format level and return its ready-to-play Circuit."""
    return parse_level(definition).build(rules)
