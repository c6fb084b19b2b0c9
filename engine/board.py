"""
Tabuleiro do labirinto.

Grid wraps the 2D cell matrix of one level and owns the pellet counter.
build_level() produces the deterministic layout used by every level (and
the scrambled right half of the level 256 "kill screen", which is purely
cosmetic).
"""

import math

from engine.config import (
    COLS, ROWS, TILE,
    EMPTY, DOT, CAPSULE, WALL, TUNNEL, GATE,
    PILLAR_COLS, CORRIDOR_ROWS, GAP_ROWS, TUNNEL_ROWS,
    HOUSE_WALLS, HOUSE_INTERIOR, HOUSE_GATE, CAPSULE_TILES, KILL_SCREEN_LEVEL, PLAYER_SPAWN,
)

# Caracteres aceitos por Grid.from_rows()
CHARS = {" ": EMPTY, ".": DOT, "o": CAPSULE, "#": WALL, "T": TUNNEL, "-": GATE}


class Grid:
    def __init__(self, cells):
        self.cells = [list(row) for row in cells]
        self.rows  = len(self.cells)
        self.cols  = len(self.cells[0]) if self.cells else 0
        self.initial_pellets   = self.count_pellets()
        self.pellets_remaining = self.initial_pellets

    @classmethod
    def from_rows(cls, rows):
        """Build a grid from rows of ints or from strings using CHARS."""
        return cls([[CHARS[ch] for ch in row] if isinstance(row, str) else row for row in rows])

    @property
    def width(self):  return self.cols * TILE

    @property
    def height(self): return self.rows * TILE

    def in_bounds(self, row, col):
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell_at(self, row, col):
        if not self.in_bounds(row, col):
            return None
        return self.cells[row][col]

    def consume(self, row, col):
        """Turn a dot/capsule into an empty cell. Returns the kind that was eaten."""
        cell = self.cell_at(row, col)
        if cell not in (DOT, CAPSULE):
            return EMPTY
        self.cells[row][col] = EMPTY
        self.pellets_remaining -= 1
        return cell

    def is_blocked(self, row, col, through_gate=False):
        # Fora do tabuleiro nunca é parede
        cell = self.cell_at(row, col)
        if cell == WALL:
            return True
        return cell == GATE and not through_gate

    def is_wall(self, x, y, through_gate=False):
        return self.is_blocked(math.floor(y / TILE), math.floor(x / TILE), through_gate)

    def count_pellets(self):
        return sum(1 for row in self.cells for v in row if v in (DOT, CAPSULE))

    def pellets(self):
        for r, row in enumerate(self.cells):
            for c, v in enumerate(row):
                if v in (DOT, CAPSULE):
                    yield r, c

    def as_tuple(self):
        return tuple(tuple(row) for row in self.cells)


def in_house(row, col):
    (r0, r1), (c0, c1) = HOUSE_INTERIOR
    return r0 <= row <= r1 and c0 <= col <= c1 or (row, col) == HOUSE_GATE


def _base_maze():
    m = [[EMPTY] * COLS for _ in range(ROWS)]
    for c in PILLAR_COLS:
        for r in range(1, ROWS - 1): m[r][c] = WALL
    for r in CORRIDOR_ROWS:
        for c in range(1, COLS - 1): m[r][c] = EMPTY
    for r in GAP_ROWS:
        m[r][COLS - 3] = EMPTY

    (r0, r1), (c0, c1) = HOUSE_WALLS
    for r in range(r0, r1 + 1):
        for c in range(c0, c1 + 1): m[r][c] = WALL
    (r0, r1), (c0, c1) = HOUSE_INTERIOR
    for r in range(r0, r1 + 1):
        for c in range(c0, c1 + 1): m[r][c] = EMPTY
    gr, gc = HOUSE_GATE
    m[gr][gc] = GATE

    _apply_border(m)
    return m


def _apply_border(m):
    for r in range(ROWS):
        for c in range(COLS):
            if r in (0, ROWS - 1) or c in (0, COLS - 1):
                m[r][c] = WALL
    for r in TUNNEL_ROWS:
        m[r][0] = m[r][COLS - 1] = TUNNEL


def _place_pellets(m):
    for r in range(ROWS):
        for c in range(COLS):
            if m[r][c] == EMPTY and not in_house(r, c) and (r, c) != PLAYER_SPAWN:
                m[r][c] = DOT
    for r, c in CAPSULE_TILES:
        if m[r][c] != WALL:
            m[r][c] = CAPSULE


def _kill_screen(m):
    (r0, r1), (c0, c1) = HOUSE_WALLS
    for r in range(ROWS):
        for c in range(COLS // 2, COLS):
            # casa e nascimento do jogador ficam intactos
            if r0 <= r <= r1 and c0 <= c <= c1 or (r, c) == PLAYER_SPAWN:
                continue
            chaos = (r * 131 + c * 197 + 256) & 7
            m[r][c] = WALL if chaos < 2 else DOT if chaos < 5 else EMPTY
    _apply_border(m)


def build_level(level):
    m = _base_maze()
    _place_pellets(m)
    if level == KILL_SCREEN_LEVEL:
        _kill_screen(m)
    return Grid(m)
