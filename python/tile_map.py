"""
Tile map: the terrain layer a circuit is built on, and its JSON file format.

File format:

    {"width": 3, "height": 2, "tiles": [0, 1, 1, 1, 1, 4]}

Tile types are stored as integers (see TileType) listed column by column:
x outer, y inner.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pathfinding import find_tile
from wire_types import Cell, TileType

__all__ = ["TileMap"]

logger = logging.getLogger(__name__)


@dataclass
class TileMap:
    """Mutable width x height grid of tile types, stored row-major."""

    width: int
    height: int
    tiles: list[TileType]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Invalid map dimensions: {self.width}x{self.height}\n"
                f"  Width and height must be non-negative"
            )
        if len(self.tiles) != self.width * self.height:
            raise ValueError(
                f"Tile count mismatch for {self.width}x{self.height} map\n"
                f"  Expected: {self.width * self.height} tiles\n"
                f"  Got: {len(self.tiles)}"
            )

    @classmethod
    def empty(cls, width: int, height: int) -> TileMap:
        """A map of the given size covered in Floor."""
        return cls(width, height, [TileType.FLOOR] * (width * height))

    def copy(self) -> TileMap:
        return TileMap(self.width, self.height, list(self.tiles))

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_type_at(self, x: int, y: int) -> TileType:
        """Tile type at (x, y); outside the map reads as Wall."""
        if not self.in_bounds(x, y):
            return TileType.WALL
        return self.tiles[y * self.width + x]

    def set_tile_type(self, x: int, y: int, tile_type: TileType) -> bool:
        if not self.in_bounds(x, y):
            return False
        self.tiles[y * self.width + x] = tile_type
        return True

    def cycle_tile_type(self, x: int, y: int) -> TileType | None:
        """Advance the tile at (x, y) to the next TileType, wrapping around."""
        if not self.in_bounds(x, y):
            return None
        types = list(TileType)
        current = self.tile_type_at(x, y)
        new_type = types[(types.index(current) + 1) % len(types)]
        self.set_tile_type(x, y, new_type)
        logger.debug("cycle_tile_type: (%d, %d) %s -> %s", x, y, current.name, new_type.name)
        return new_type

    def find_tile(self, tile_type: TileType) -> Cell | None:
        """First cell of `tile_type` scanning row by row from y = 0."""
        return find_tile(self.width, self.height, self.tile_type_at, tile_type)

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "tiles": [
                int(self.tile_type_at(x, y))
                for x in range(self.width)
                for y in range(self.height)
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TileMap:
        try:
            width = int(data["width"])
            height = int(data["height"])
            raw_tiles = list(data["tiles"])
        except (KeyError, TypeError) as e:
            raise ValueError(
                f"Invalid map document: {e!r}\n"
                f"  Expected keys: 'width', 'height', 'tiles'"
            ) from e

        if len(raw_tiles) != width * height:
            raise ValueError(
                f"Tile count mismatch for {width}x{height} map\n"
                f"  Expected: {width * height} tiles\n"
                f"  Got: {len(raw_tiles)}"
            )

        tiles: list[TileType] = [TileType.FLOOR] * (width * height)
        index = 0
        for x in range(width):
            for y in range(height):
                raw = raw_tiles[index]
                try:
                    tiles[y * width + x] = TileType(raw)
                except ValueError as e:
                    raise ValueError(
                        f"Invalid tile value: {raw!r}\n"
                        f"  Position: ({x}, {y}), entry {index}\n"
                        f"  Valid values: "
                        + ", ".join(f"{t.value} ({t.name})" for t in TileType)
                    ) from e
                index += 1
        return cls(width, height, tiles)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, text: str) -> TileMap:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Map file is not valid JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Map document must be a JSON object, got {type(data).__name__}")
        return cls.from_dict(data)

    def save(self, path: str | Path) -> None:
        Path(path).write_text(self.to_json(), encoding="utf-8")
        logger.info("Saved %dx%d map to %s", self.width, self.height, path)

    @classmethod
    def load(cls, path: str | Path) -> TileMap:
        tile_map = cls.from_json(Path(path).read_text(encoding="utf-8"))
        logger.info("Loaded map of size %dx%d from %s", tile_map.width, tile_map.height, path)
        return tile_map
