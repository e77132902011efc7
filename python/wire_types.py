"""
Shared type definitions for the circuitgrid system.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable


class Direction(Enum):
    """Orthogonal side of a cell, valued by its bit in a connection mask."""

    RIGHT = 1 << 0  # increasing x
    LEFT = 1 << 1  # decreasing x
    UP = 1 << 2  # increasing y
    DOWN = 1 << 3  # decreasing y


# Adjacency is always scanned in this order
DIRECTIONS: tuple[Direction, ...] = (
    Direction.RIGHT,
    Direction.LEFT,
    Direction.UP,
    Direction.DOWN,
)

ALL_DIRECTIONS_MASK = 0b1111


class WireKind(IntEnum):
    """Functional type of a placed piece. Values are the packed kind byte."""

    NONE = 0
    NORMAL = 1
    ENERGY_LOSS = 2
    RECHARGE = 3
    TELEPORT = 4
    CROSS_X = 5
    TEE_T = 6
    CORNER_L = 7
    STRAIGHT_I = 8


class TileType(IntEnum):
    """Terrain of a map cell. Values match the map file format."""

    START = 0
    FLOOR = 1
    WALL = 2
    RIVER = 3
    END = 4


@dataclass(frozen=True)
class RuleSet:
    """Rules governing graph construction."""

    teleport_links: bool = True  # link every teleport to every other teleport
    universal_terminals: bool = True  # Start/End open on all four sides


Cell = tuple[int, int]

# Tile-type query supplied by the map component
TileTypeFn = Callable[[int, int], TileType]
