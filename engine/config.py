"""
Constantes de configuração do simulador.

Everything here is a plain module-level constant, except the per-run
options collected in SimConfig.
"""

from dataclasses import dataclass

COLS, ROWS, TILE = 28, 31, 8
FPS  = 60
STEP = 1 / FPS

# Tipos de célula do tabuleiro
EMPTY, DOT, CAPSULE, WALL, TUNNEL, GATE = 0, 1, 2, 3, 4, 9

# ── Layout ───────────────────────────────────────────────────────────────────
PILLAR_COLS   = (4, 7, 10, 13, 16, 19, 22, 25)
CORRIDOR_ROWS = (3, 6, 9, 12, 19, 22, 25, 28)
GAP_ROWS      = (5, 8, 21, 24, 27)
TUNNEL_ROWS   = (15, 16)
HOUSE_WALLS    = ((13, 17), (10, 17))   # (rows, cols), inclusive
HOUSE_INTERIOR = ((14, 16), (11, 16))
HOUSE_GATE = (13, 13)
HOUSE_EXIT = (12, 13)
HOUSE_HOME = (15, 13)
CAPSULE_TILES = ((3, 2), (3, COLS - 3), (ROWS - 4, 2), (ROWS - 4, COLS - 3))
KILL_SCREEN_LEVEL = 256

# ── Agentes ──────────────────────────────────────────────────────────────────
BLINKY, PINKY, INKY, CLYDE = 0, 1, 2, 3
GHOST_NAMES = ("blinky", "pinky", "inky", "clyde")

PLAYER_SPAWN = (23, 14)
GHOST_SPAWNS = ((11, 14), (14, 13), (14, 14), (14, 15))
SCATTER_CORNERS = ((2, COLS - 3), (2, 2), (ROWS - 3, COLS - 3), (ROWS - 3, 2))
RELEASE_THRESHOLDS = (0, 20, 40, 60)

PLAYER_SPEED, PLAYER_SPEED_STEP, PLAYER_SPEED_MAX = 6.0, 0.15, 8.0
GHOST_SPEED,  GHOST_SPEED_STEP,  GHOST_SPEED_MAX  = 5.5, 0.12, 7.2
TUNNEL_FACTOR     = 0.6
FRIGHTENED_FACTOR = 0.8
# (pellets remaining, minimum speed) for blinky
AGGRESSION_STEPS = ((60, 6.2), (20, 6.5))

PINKY_LOOKAHEAD = 4
INKY_LOOKAHEAD  = 2
CLYDE_FEINT_DISTANCE = 8

# Tolerância de alinhamento (pixels) para virar numa interseção
ALIGN_TOLERANCE = TILE / 4
COLLISION_DISTANCE = TILE * 0.6

# ── Modos ────────────────────────────────────────────────────────────────────
SCATTER, CHASE, FRIGHTENED = "scatter", "chase", "frightened"
SCHEDULE = (
    (7, SCATTER), (20, CHASE),
    (7, SCATTER), (20, CHASE),
    (5, SCATTER), (None, CHASE),
)
FRIGHTENED_BASE, FRIGHTENED_STEP, FRIGHTENED_MIN = 6.0, 0.25, 0.8

# ── Pontuação e ciclo de vida ────────────────────────────────────────────────
DOT_SCORE, CAPSULE_SCORE = 10, 50
CHAIN_BASE, CHAIN_MAX = 200, 1600
EXTRA_LIFE_SCORE = 10000
START_LIVES = 3
LIFE_LOST_PAUSE = 1.3
GAME_OVER_PAUSE = 1.0

FRUIT_TILE = (19, 13)
FRUIT_THRESHOLDS = (70, 170)
FRUIT_LIFETIME = 10.0
FRUITS = (("berry", 100), ("citrus", 300), ("melon", 500), ("ship", 700), ("star", 1000))


def seconds_to_ticks(seconds: float) -> int:
    return int(round(seconds * FPS))


@dataclass
class SimConfig:
    seed: int = 0
    ghosts_wrap_tunnels: bool = False
    start_level: int = 1
    start_lives: int = START_LIVES
