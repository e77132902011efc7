"""
ASCII rendering for circuits.

Draws the tile map and the wires on it as a bordered character grid, with the
highest row at the top. A found path is drawn on a green background; a failed
check colours every wire red.
"""

from __future__ import annotations

from typing import Callable, Iterable

import simple_chalk as chalk  # type: ignore[import-untyped]

from circuit import Circuit
from connections import MASK_GLYPHS, connection_mask
from wire_types import Cell, TileType, WireKind

__all__ = ["cell_glyph", "render_circuit"]

TILE_GLYPHS: dict[TileType, str] = {
    TileType.START: "S",
    TileType.END: "E",
    TileType.WALL: "#",
    TileType.RIVER: "~",
    TileType.FLOOR: "·",
}

# Omni pieces all draw as a cross, so they are told apart by letter
KIND_LETTERS: dict[WireKind, str] = {
    WireKind.NORMAL: "N",
    WireKind.ENERGY_LOSS: "D",
    WireKind.RECHARGE: "C",
    WireKind.TELEPORT: "P",
}


def cell_glyph(circuit: Circuit, x: int, y: int) -> str:
    """Single character for a cell. Terminals win over any wire on them."""
    tile_type = circuit.tile_type_at(x, y)
    if tile_type in (TileType.START, TileType.END):
        return TILE_GLYPHS[tile_type]
    kind = circuit.get_kind(x, y)
    if kind == WireKind.NONE:
        return TILE_GLYPHS.get(tile_type, "?")
    if kind in KIND_LETTERS:
        return KIND_LETTERS[kind]
    return MASK_GLYPHS.get(connection_mask(kind, circuit.get_rotation(x, y)), "?")


def render_circuit(
    circuit: Circuit,
    path: Iterable[Cell] | None = None,
    failed: bool = False,
    highlight: Cell | None = None,
    cell_width: int = 3,
    colored: bool = True,
) -> str:
    """
    Render a circuit as a bordered character grid.

    Args:
        circuit: The circuit to draw
        path: Optional cells to mark as the live path
        failed: Colour wires as a failed connection
        highlight: Optional cell to mark as the cursor
        cell_width: Characters per cell (default 3)
        colored: Emit ANSI colours (default True)

    Returns:
        Rendered string, one line per row plus borders
    """
    identity: Callable[[str], str] = lambda s: s
    if colored:
        wire_color = chalk.red if failed else chalk.cyan
        tile_colors: dict[TileType, Callable[[str], str]] = {
            TileType.START: chalk.yellowBright,
            TileType.END: chalk.yellowBright,
            TileType.WALL: chalk.white,
            TileType.RIVER: chalk.blue,
            TileType.FLOOR: chalk.white,
        }
        path_color = chalk.bgGreen.black
        cursor_color = chalk.bgWhite.black
    else:
        wire_color = identity
        tile_colors = {}
        path_color = identity
        cursor_color = identity

    on_path = set(path or ())
    grid_width = circuit.width * cell_width

    lines: list[str] = ["┌" + "─" * grid_width + "┐"]
    for y in reversed(range(circuit.height)):
        line_parts = ["│"]
        for x in range(circuit.width):
            glyph = cell_glyph(circuit, x, y)
            content = glyph if cell_width == 1 else glyph.center(cell_width)
            tile_type = circuit.tile_type_at(x, y)
            is_terminal = tile_type in (TileType.START, TileType.END)

            if highlight == (x, y):
                content = cursor_color(content)
            elif (x, y) in on_path:
                content = path_color(content)
            elif circuit.get_kind(x, y) != WireKind.NONE and not is_terminal:
                content = wire_color(content)
            else:
                content = tile_colors.get(tile_type, identity)(content)

            line_parts.append(content)
        line_parts.append("│")
        lines.append("".join(line_parts))
    lines.append("└" + "─" * grid_width + "┘")

    return "\n".join(lines)
