"""Direções, vetores e testes de movimento sobre o grid."""

import math

from engine.config import TILE, ALIGN_TOLERANCE

RIGHT, LEFT, UP, DOWN = 0, 1, 2, 3
NONE = -1

# Ordem de desempate da escolha gulosa
TIE_ORDER = (UP, LEFT, DOWN, RIGHT)

VECTORS = {RIGHT: (1, 0), LEFT: (-1, 0), UP: (0, -1), DOWN: (0, 1), NONE: (0, 0)}
OPPOSITE = {RIGHT: LEFT, LEFT: RIGHT, UP: DOWN, DOWN: UP, NONE: NONE}
NAMES = {RIGHT: "right", LEFT: "left", UP: "up", DOWN: "down", NONE: "none"}


def direction_vector(d):
    return VECTORS[d]


def opposite(d):
    return OPPOSITE[d]


def parse_direction(name):
    for d, n in NAMES.items():
        if n == name:
            return d
    raise ValueError(f"unknown direction: {name!r}")


def tile_of(x, y):
    """(row, col) of the tile containing a pixel position."""
    return math.floor(y / TILE), math.floor(x / TILE)


def tile_center(row, col):
    return (col + 0.5) * TILE, (row + 0.5) * TILE


def is_vertical(d):
    return d in (UP, DOWN)


def can_turn(grid, pos, d, through_gate=False):
    """
    True when an agent at `pos` may start moving in `d`: it has to sit on
    its tile's center line across the turn axis and the neighbouring tile
    in that direction must be open.
    """
    if d == NONE:
        return False
    x, y = pos
    row, col = tile_of(x, y)
    cx, cy = tile_center(row, col)
    off = abs(x - cx) if is_vertical(d) else abs(y - cy)
    if off > ALIGN_TOLERANCE:
        return False
    dx, dy = VECTORS[d]
    return not grid.is_blocked(row + dy, col + dx, through_gate)


def snap_to_lane(pos, d):
    """Re-center the coordinate across the direction of travel."""
    x, y = pos
    row, col = tile_of(x, y)
    cx, cy = tile_center(row, col)
    return (cx, y) if is_vertical(d) else (x, cy)


def step(pos, d, distance):
    dx, dy = VECTORS[d]
    return pos[0] + dx * distance, pos[1] + dy * distance


def wrap_x(x, width):
    return x % width


def hits_wall(grid, pos, d, through_gate=False):
    """Probe the leading edge of an agent centred on `pos` moving in `d`."""
    dx, dy = VECTORS[d]
    half = TILE / 2
    return grid.is_wall(pos[0] + dx * half, pos[1] + dy * half, through_gate)


def manhattan(a, b):
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
