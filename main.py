"""
Maze Chase - pygame front-end
=============================
Thin collaborator around engine.gamestate.GameState: reads the keyboard
(or the autopilot agent), feeds wall-clock time to the fixed-timestep
simulation, draws the snapshot and keeps the best score on disk.

    python main.py [--seed N] [--level N] [--ghost-tunnels] [--autopilot] [--scale N] [--verbose]
"""

import argparse
import json
import sys
from pathlib import Path

try:
    import pygame
except ImportError:
    print("Erro: o pygame não está instalado (pip install pygame).")
    sys.exit(1)

from agents.autopilot_agent import AutopilotAgent
from engine.config import COLS, ROWS, TILE, FPS, WALL, DOT, CAPSULE, GATE, SimConfig
from engine.gamestate import GameState, fruit_for_level
from engine.motion import parse_direction

HUD_H = 3 * TILE
WIDTH, HEIGHT = COLS * TILE, ROWS * TILE + HUD_H

DATA_DIR  = Path.home() / ".maze_chase"
BEST_FILE = DATA_DIR / "best.json"

# Teclas → nome da direção (convertido por parse_direction)
KEYS = {
    pygame.K_RIGHT: "right", pygame.K_LEFT: "left", pygame.K_UP: "up", pygame.K_DOWN: "down",
    pygame.K_d: "right",     pygame.K_a: "left",    pygame.K_w: "up",  pygame.K_s: "down",
}
GHOST_COLORS = {"blinky": "red", "pinky": "pink", "inky": "cyan", "clyde": "orange"}


def load_best() -> int:
    try:
        with open(BEST_FILE, "r", encoding="utf-8") as f:
            return int(json.load(f).get("best", 0))
    except (OSError, ValueError, AttributeError):
        return 0


def save_best(best: int):
    try:
        DATA_DIR.mkdir(parents=True, exist_ok=True)
        with open(BEST_FILE, "w", encoding="utf-8") as f:
            json.dump({"best": best}, f, indent=2)
    except OSError as e:
        print(f"[score] não foi possível salvar o recorde: {e}")


# ======================================================================
#  LOOP DO JOGO
# ======================================================================
class GameLoop:
    def __init__(self, config: SimConfig, scale=3, autopilot=False, verbose=False):
        pygame.init()
        self.real_screen = pygame.display.set_mode([WIDTH * scale, HEIGHT * scale])
        self.screen = pygame.Surface([WIDTH, HEIGHT])   # o jogo é desenhado aqui
        pygame.display.set_caption("Maze Chase")
        self.timer = pygame.time.Clock()
        self.font  = pygame.font.Font("freesansbold.ttf", 9)

        self.game = GameState(config)
        self.game.best_score = load_best()
        self.agent   = AutopilotAgent(self.game) if autopilot else None
        self.verbose = verbose
        self.counter = 0

    def run(self):
        game = self.game
        running = True
        while running:
            dt = self.timer.tick(FPS) / 1000
            self.counter = (self.counter + 1) % 20

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEYS:
                        game.set_intent(parse_direction(KEYS[event.key]))

            if self.agent is not None and not game.paused:
                action = self.agent.get_action()
                if action is not None:
                    game.set_intent(action)

            game.advance(dt)
            for cue in game.drain_events():
                if self.verbose:
                    print(f"[audio] {cue.name} @ tick {cue.tick}")

            self._draw(game.snapshot())
            scaled = pygame.transform.scale(self.screen, self.real_screen.get_size())
            self.real_screen.blit(scaled, (0, 0))
            pygame.display.flip()

        save_best(game.best_score)
        pygame.quit()

    # ── Desenho ──────────────────────────────────────────────────────────────
    def _draw(self, snap):
        self.screen.fill("black")
        self._draw_board(snap)
        if snap.fruit is not None:
            r, c = snap.fruit
            pygame.draw.rect(self.screen, "green", [c * TILE + 2, r * TILE + 2, TILE - 4, TILE - 4])
        x, y = snap.player_pos
        pygame.draw.circle(self.screen, "yellow", (x, y), TILE / 2 - 1)
        for g in snap.ghosts:
            self._draw_ghost(g)
        self._draw_hud(snap)

    def _draw_board(self, snap):
        flicker = self.counter < 5
        for i, row in enumerate(snap.cells):
            for j, cell in enumerate(row):
                cx, cy = j * TILE + TILE / 2, i * TILE + TILE / 2
                if cell == WALL:
                    pygame.draw.rect(self.screen, "blue", [j * TILE, i * TILE, TILE, TILE], 1)
                elif cell == DOT:
                    pygame.draw.circle(self.screen, "white", (cx, cy), 1)
                elif cell == CAPSULE and not flicker:
                    pygame.draw.circle(self.screen, "white", (cx, cy), 3)
                elif cell == GATE:
                    pygame.draw.line(self.screen, "white", (j * TILE, cy), (j * TILE + TILE, cy), 2)

    def _draw_ghost(self, g):
        x, y = g.pos
        body = pygame.Rect(0, 0, TILE - 1, TILE - 1)
        body.center = (x, y)
        if not g.retreating:
            pygame.draw.rect(self.screen, "blue" if g.frightened else GHOST_COLORS[g.name], body, 0, 3)
        for ex in (x - 2, x + 2):
            pygame.draw.circle(self.screen, "white", (ex, y - 1), 1)

    def _draw_hud(self, snap):
        top = ROWS * TILE + 2
        text = f"Score: {snap.score}   Best: {snap.best_score}   Level: {snap.level}   Lives: {snap.lives}"
        self.screen.blit(self.font.render(text, True, "white"), (4, top))
        if snap.fruit is not None:
            name, value = fruit_for_level(snap.level)
            self.screen.blit(self.font.render(f"{name} {value}", True, "green"), (4, top + 10))
        if snap.game_over:
            self.screen.blit(self.font.render("Game over!", True, "red"), (WIDTH - 60, top + 10))


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Maze chase arcade simulation")
    p.add_argument("--seed", type=int, default=0, help="seed for the frightened random walk")
    p.add_argument("--level", type=int, default=1, help="starting level (256 = kill screen)")
    p.add_argument("--ghost-tunnels", action="store_true", help="let ghosts wrap through the tunnels")
    p.add_argument("--autopilot", action="store_true", help="attract mode: the player steers itself")
    p.add_argument("--scale", type=int, default=3, help="window scale factor")
    p.add_argument("--verbose", action="store_true", help="print audio cue events")
    return p.parse_args(argv)


if __name__ == "__main__":
    args = parse_args()
    config = SimConfig(seed=args.seed, ghosts_wrap_tunnels=args.ghost_tunnels, start_level=args.level)
    print("=" * 50)
    print(f" Maze Chase (seed={args.seed}, level={args.level})")
    print("=" * 50)
    GameLoop(config, args.scale, args.autopilot, args.verbose).run()
