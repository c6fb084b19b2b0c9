"""
Ghost decision logic
====================
Each ghost picks a target pixel, then steers with a one-step greedy
lookahead: of the four neighbouring tiles that are not walls, take the one
whose center is closest (Manhattan) to the target, ties broken in the order
UP, LEFT, DOWN, RIGHT. This is deliberately *not* a shortest-path search;
ghosts can get stuck behind walls and may reverse in the middle of a
corridor.

Target selection, in priority order:
  - confined       → home tile inside the house (bobbing in place)
  - retreating     → home tile, through the gate
  - leaving house  → the tile just above the gate
  - frightened     → a random neighbouring tile (random walk)
  - scatter mode   → the ghost's own corner
  - chase mode     → the role strategy below

Roles
-----
  blinky  aims at the player.
  pinky   aims 4 tiles ahead of the player. When the player faces UP the
          point is also shifted one tile to the LEFT (historical quirk,
          kept on purpose).
  inky    takes the point 2 tiles ahead of the player (same quirk) and
          doubles the vector from blinky to it.
  clyde   aims at the player when 8+ tiles away, otherwise runs back to
          its corner.
"""

import math

from engine.board import in_house
from engine.config import (
    TILE, SCATTER, SCATTER_CORNERS, HOUSE_HOME, HOUSE_EXIT,
    BLINKY, PINKY, INKY, CLYDE, PINKY_LOOKAHEAD, INKY_LOOKAHEAD, CLYDE_FEINT_DISTANCE,
)
from engine.motion import UP, DOWN, LEFT, RIGHT, NONE, TIE_ORDER, VECTORS, manhattan, step, tile_center, tile_of


def scatter_target(gid):
    return tile_center(*SCATTER_CORNERS[gid])


def ahead_of_player(player, tiles):
    dx, dy = VECTORS[player.direction]
    x = player.x_pos + dx * tiles * TILE
    y = player.y_pos + dy * tiles * TILE
    if player.direction == UP:
        x -= TILE
    return x, y


def blinky_target(game, ghost):
    return game.player.pos


def pinky_target(game, ghost):
    return ahead_of_player(game.player, PINKY_LOOKAHEAD)


def inky_target(game, ghost):
    ax, ay = ahead_of_player(game.player, INKY_LOOKAHEAD)
    bx, by = game.ghosts[BLINKY].pos
    return bx + 2 * (ax - bx), by + 2 * (ay - by)


def clyde_target(game, ghost):
    px, py = game.player.pos
    dist = math.hypot(ghost.x_pos - px, ghost.y_pos - py) / TILE
    return (px, py) if dist >= CLYDE_FEINT_DISTANCE else scatter_target(CLYDE)


CHASE_STRATEGIES = {
    BLINKY: blinky_target,
    PINKY:  pinky_target,
    INKY:   inky_target,
    CLYDE:  clyde_target,
}


def random_adjacent(pos, rng):
    d = rng.choice((UP, DOWN, LEFT, RIGHT))
    return step(pos, d, TILE)


def best_direction(grid, pos, target, through_gate=False, wrap=False):
    """Greedy one-step choice from the tile containing `pos`."""
    row, col = tile_of(*pos)
    best, best_dist = NONE, math.inf
    for d in TIE_ORDER:
        dx, dy = VECTORS[d]
        r, c = row + dy, col + dx
        if wrap:
            c %= grid.cols
        elif not grid.in_bounds(r, c):
            continue
        if grid.is_blocked(r, c, through_gate):
            continue
        dist = manhattan(tile_center(r, c), target)
        if dist < best_dist:
            best, best_dist = d, dist
    return best


class GhostAgent:
    def __init__(self, game, gid):
        self.game = game
        self.id   = gid

    @property
    def ghost(self):
        return self.game.ghosts[self.id]

    def leaving_house(self):
        g = self.ghost
        return not g.confined and not g.retreating and in_house(*g.tile)

    def through_gate(self):
        return self.ghost.retreating or self.leaving_house()

    def choose_target(self):
        game, g = self.game, self.ghost
        if g.confined or g.retreating:
            return tile_center(*HOUSE_HOME)
        if self.leaving_house():
            return tile_center(*HOUSE_EXIT)
        if g.frightened:
            return random_adjacent(g.pos, game.rng)
        if game.modes.scheduled_mode == SCATTER:
            return scatter_target(self.id)
        return CHASE_STRATEGIES[self.id](game, g)

    def get_action(self):
        g = self.ghost
        g.target = self.choose_target()
        return best_direction(self.game.grid, g.pos, g.target,
                              self.through_gate(), self.game.config.ghosts_wrap_tunnels)
