"""
Estado dos agentes.

Player and Ghost are plain data holders; the per-tick behaviour lives in
GameState (movement, collisions) and in agents.ghost_agents (targeting).
"""

from engine.config import GHOST_NAMES, GHOST_SPAWNS, PLAYER_SPAWN, RELEASE_THRESHOLDS
from engine.motion import NONE, tile_center, tile_of


class Agent:
    def __init__(self, row, col, speed):
        self.spawn     = (row, col)
        self.x_pos, self.y_pos = tile_center(row, col)
        self.direction = NONE
        self.next_dir  = NONE
        self.speed     = speed   # tiles por segundo

    @property
    def pos(self):
        return self.x_pos, self.y_pos

    @pos.setter
    def pos(self, value):
        self.x_pos, self.y_pos = value

    @property
    def tile(self):
        return tile_of(self.x_pos, self.y_pos)

    def respawn(self):
        self.x_pos, self.y_pos = tile_center(*self.spawn)
        self.direction = self.next_dir = NONE


class Player(Agent):
    def __init__(self, speed):
        super().__init__(*PLAYER_SPAWN, speed)
        self.invincible = False


class Ghost(Agent):
    def __init__(self, gid, speed):
        super().__init__(*GHOST_SPAWNS[gid], speed)
        self.id         = gid
        self.name       = GHOST_NAMES[gid]
        self.base_speed = speed
        self.threshold  = RELEASE_THRESHOLDS[gid]
        self.confined   = True
        self.frightened = False
        self.retreating = False
        self.target     = self.pos

    def reset(self, base_speed):
        self.respawn()
        self.base_speed = self.speed = base_speed
        self.confined   = True
        self.frightened = False
        self.retreating = False
        self.target     = self.pos

    def __repr__(self):
        return f"Ghost({self.name}, tile={self.tile}, confined={self.confined}, " \
               f"frightened={self.frightened}, retreating={self.retreating})"
