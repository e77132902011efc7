"""
Interactive demo for circuitgrid.
Display a level and edit its wires with keyboard commands.
"""

import logging
import sys
from pathlib import Path

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_circuit
from circuit import Circuit, next_kind
from level_parser import Level, parse_level
from pathfinding import PathResult
from tile_map import TileMap
from wire_types import Cell, WireKind


class InteractiveDemo:
    """Interactive demo for wire placement and win checks."""

    def __init__(self, level: Level, map_path: Path | None = None) -> None:
        self.level = level
        self.map_path = map_path
        self.circuit: Circuit = level.build()
        self.console = Console()
        self.cursor: Cell = (0, self.circuit.height - 1)
        self.kind = WireKind.NORMAL
        self.held: Cell | None = None
        self.result: PathResult | None = None
        self.status_message = "Ready"

    def generate_display(self) -> Panel:
        """Generate the current display with grid and status."""
        path = self.result.path if self.result is not None else None
        failed = self.result is not None and not self.result.found
        grid_text = render_circuit(self.circuit, path=path, failed=failed, highlight=self.cursor)

        x, y = self.cursor
        status = Text()
        status.append("Cursor: ", style="bold")
        status.append(f"({x}, {y})  {self.circuit.tile_type_at(x, y).name}\n")
        status.append("Cell: ", style="bold")
        kind = self.circuit.get_kind(x, y)
        if kind == WireKind.NONE:
            status.append("empty\n")
        else:
            status.append(f"{kind.name} r{self.circuit.get_rotation(x, y)}\n")
        status.append("Selected wire: ", style="bold")
        status.append(f"{self.kind.name}\n")
        if self.held is not None:
            status.append("Holding: ", style="bold")
            status.append(f"{self.held}\n")
        status.append("\n")

        status.append(Text.from_ansi(grid_text))
        status.append("\n\n")
        status.append("Keys:\n", style="bold cyan")
        status.append("  W/A/S/D - Move cursor\n")
        status.append("  -/=     - Previous/next wire kind\n")
        status.append("  P       - Place wire\n")
        status.append("  X       - Remove wire\n")
        status.append("  [ / ]   - Rotate counter-clockwise/clockwise\n")
        status.append("  G       - Grab, then drop (move or swap)\n")
        status.append("  E       - Cycle tile type (map editor)\n")
        status.append("  M       - Save map\n")
        status.append("  C       - Check connection\n")
        status.append("  R       - Reset level\n")
        status.append("  Q       - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        border = "green" if self.result is not None and self.result.found else "blue"
        return Panel(status, title="Circuitgrid Interactive Demo", border_style=border, width=80)

    def move_cursor(self, dx: int, dy: int) -> None:
        x, y = self.cursor
        nx, ny = x + dx, y + dy
        if self.circuit.grid.in_bounds(nx, ny):
            self.cursor = (nx, ny)

    def cycle_kind(self, step: int) -> None:
        kind = next_kind(self.kind, step)
        if kind == WireKind.NONE:
            kind = next_kind(kind, step)
        self.kind = kind
        self.status_message = f"Switched to wire type: {self.kind.name}"

    def _edited(self, message: str) -> None:
        # Any edit invalidates the last check's colouring
        self.result = None
        self.status_message = message

    def place_wire(self) -> None:
        x, y = self.cursor
        if self.circuit.place(x, y, self.kind):
            self._edited(f"✓ Placed {self.kind.name} at ({x}, {y})")
        else:
            self.status_message = f"✗ Cannot place at ({x}, {y}): not an open floor tile"

    def remove_wire(self) -> None:
        x, y = self.cursor
        self.circuit.remove(x, y)
        self._edited(f"Removed wire at ({x}, {y})")

    def rotate_wire(self, clockwise: bool) -> None:
        x, y = self.cursor
        if self.circuit.get_kind(x, y) == WireKind.NONE:
            self.status_message = "Nothing to rotate"
            return
        self.circuit.rotate(x, y, clockwise)
        self._edited(f"Rotated to r{self.circuit.get_rotation(x, y)}")

    def grab_or_drop(self) -> None:
        """First press picks up the wire under the cursor, second press puts it down."""
        if self.held is None:
            x, y = self.cursor
            if self.circuit.get_kind(x, y) == WireKind.NONE:
                self.status_message = "Nothing to grab"
                return
            self.held = self.cursor
            self.status_message = f"Holding wire from ({x}, {y})"
            return

        (sx, sy), (dx, dy) = self.held, self.cursor
        self.held = None
        if (sx, sy) == (dx, dy):
            self.status_message = "Dropped in place"
        elif self.circuit.get_kind(dx, dy) == WireKind.NONE:
            if self.circuit.move(sx, sy, dx, dy):
                self._edited(f"✓ Moved wire to ({dx}, {dy})")
            else:
                self.status_message = f"✗ Cannot move to ({dx}, {dy})"
        elif self.circuit.swap(sx, sy, dx, dy):
            self._edited(f"✓ Swapped ({sx}, {sy}) and ({dx}, {dy})")

    def edit_tile(self) -> None:
        x, y = self.cursor
        new_type = self.circuit.cycle_tile_type(x, y)
        if new_type is None:
            self.status_message = f"✗ Cannot edit tile at ({x}, {y})"
        else:
            self._edited(f"Tile at ({x}, {y}) is now {new_type.name}")

    def save_map(self) -> None:
        if self.map_path is None or self.circuit.tile_map is None:
            self.status_message = "✗ No map file (start with --map path.json)"
            return
        self.circuit.tile_map.save(self.map_path)
        self.status_message = f"✓ Saved map to {self.map_path}"

    def check_win(self) -> None:
        self.result = self.circuit.find_path()
        if self.result.found:
            self.status_message = f"✓ Connected! Path of {len(self.result.path)} cells"
        else:
            self.status_message = "✗ Start and End are not connected"

    def reset_level(self) -> None:
        """Reset the level to its original state."""
        self.circuit = self.level.build()
        self.held = None
        self._edited("Level reset to original state")

    def run(self) -> None:
        """Run the interactive demo."""
        keys = {
            "w": lambda: self.move_cursor(0, 1),
            "s": lambda: self.move_cursor(0, -1),
            "a": lambda: self.move_cursor(-1, 0),
            "d": lambda: self.move_cursor(1, 0),
            "=": lambda: self.cycle_kind(1),
            "-": lambda: self.cycle_kind(-1),
            "p": self.place_wire,
            "x": self.remove_wire,
            "]": lambda: self.rotate_wire(True),
            "[": lambda: self.rotate_wire(False),
            "g": self.grab_or_drop,
            "e": self.edit_tile,
            "m": self.save_map,
            "c": self.check_win,
            "r": self.reset_level,
        }

        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    key = readchar.readkey()

                    if key.lower() == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    action = keys.get(key.lower())
                    if action is None:
                        self.status_message = f"Unknown key: {repr(key)}"
                    else:
                        action()

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


LEVELS = dict(
    corridor="S . . . E",
    bend="# # # # E|S L1 . . .|# # # # #",
    maze="S . # . . .|# . # . # .|. . ~ . # .|. # # . # E",
    portals="S P # . . .|# # # # # #|. . . P . E",
)


def level_for(name: str) -> Level:
    """Parse a built-in level, exiting with the list of choices if `name` is unknown."""
    if name not in LEVELS:
        sys.exit(f"Unknown level: {name!r}\n  Available levels: {', '.join(LEVELS)}")
    return parse_level(LEVELS[name])


def map_level(path: str | Path) -> Level:
    """A wire-free level on a map loaded from a JSON file."""
    try:
        tile_map = TileMap.load(path)
    except (OSError, ValueError) as e:
        sys.exit(f"Cannot load map {path}: {e}")
    return Level(tile_map, ())


def main(level: Level, map_path: Path | None = None) -> None:
    """Run interactive demo on a level."""
    demo = InteractiveDemo(level, map_path)
    demo.run()


if __name__ == "__main__":
    args = sys.argv[1:]
    if args and args[0] == "sublime":
        # Running from IDE - just render and check every level
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

        for name, definition in LEVELS.items():
            circuit = parse_level(definition).build()
            result = circuit.find_path()
            print(f"{name}: {'connected' if result.found else 'not connected'}")
            print(render_circuit(circuit, path=result.path, failed=not result.found))
            print()
    elif args and args[0] == "--map":
        if len(args) < 2:
            sys.exit("Usage: interactive_demo.py --map path.json")
        main(map_level(args[1]), Path(args[1]))
    else:
        main(level_for(args[0] if args else "maze"))
