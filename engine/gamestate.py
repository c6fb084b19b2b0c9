"""
Maze-chase simulation as a single GameState object.

Everything that changes while playing (grid, agents, modes, score, timed
events) hangs off one GameState instance; nothing lives in module globals.

  - GameState.advance(dt)  → fixed-timestep accumulator, runs whole ticks
  - GameState.tick()       → one simulation step, in this order:
                             due timed events, mode scheduler, player,
                             ghosts (blinky, pinky, inky, clyde),
                             difficulty, fruit, collisions
  - GameState.set_intent() → input collaborator, last write wins
  - GameState.snapshot()   → immutable view for the renderer / HUD
  - GameState.drain_events() → cue events for audio / HUD since last call

Deferred effects (end of frightened, life-loss pause, game-over pause) are
entries in an EventQueue keyed on the tick counter and stamped with the
current epoch; starting a level or a new game bumps the epoch so anything
still queued from before is dropped.
"""

import math
import random
from collections import namedtuple

from agents.ghost_agents import GhostAgent
from engine.actors import Player, Ghost
from engine.board import build_level
from engine.config import (
    TILE, STEP, DOT, CAPSULE, TUNNEL, SimConfig,
    BLINKY, HOUSE_HOME, AGGRESSION_STEPS, TUNNEL_FACTOR, FRIGHTENED_FACTOR, COLLISION_DISTANCE,
    PLAYER_SPEED, PLAYER_SPEED_STEP, PLAYER_SPEED_MAX, GHOST_SPEED, GHOST_SPEED_STEP, GHOST_SPEED_MAX,
    DOT_SCORE, CAPSULE_SCORE, CHAIN_BASE, CHAIN_MAX, EXTRA_LIFE_SCORE,
    LIFE_LOST_PAUSE, GAME_OVER_PAUSE, FRUIT_TILE, FRUIT_THRESHOLDS, FRUIT_LIFETIME, FRUITS,
    seconds_to_ticks,
)
from engine.modes import ModeScheduler, EventQueue, FRIGHTENED_END, LIFE_RESET, GAME_RESET, frightened_seconds
from engine.motion import NONE, NAMES, can_turn, hits_wall, opposite, snap_to_lane, step, wrap_x

# Eventos emitidos para áudio / HUD
PELLET_EATEN   = "pellet-eaten"
POWER_EATEN    = "power-item-eaten"
GHOST_EATEN    = "adversary-eaten"
PLAYER_DIED    = "player-died"
LIFE_GAINED    = "life-gained"
FRUIT_EATEN    = "fruit-eaten"
LEVEL_COMPLETE = "level-complete"
GAME_OVER      = "game-over"

Cue = namedtuple("Cue", "name tick")
GhostView = namedtuple("GhostView", "name pos direction confined frightened retreating")


def fruit_for_level(level):
    return FRUITS[min(len(FRUITS) - 1, (level - 1) // 3)]


# ══════════════════════════════════════════════════════════════════════════════
#  StateSnapshot
# ══════════════════════════════════════════════════════════════════════════════
class StateSnapshot:
    __slots__ = (
        "tick", "level", "score", "best_score", "lives", "mode",
        "cells", "pellets_remaining",
        "player_pos", "player_dir", "ghosts",
        "fruit", "paused", "game_over",
    )

    def __init__(self, **kw):
        for k, v in kw.items():
            object.__setattr__(self, k, v)

    def __setattr__(self, *_):
        raise AttributeError("StateSnapshot is immutable")

    def __repr__(self):
        return (f"StateSnapshot(tick={self.tick}, level={self.level}, score={self.score}, "
                f"lives={self.lives}, mode={self.mode})")


# ══════════════════════════════════════════════════════════════════════════════
#  GameState
# ══════════════════════════════════════════════════════════════════════════════
class GameState:
    def __init__(self, config=None, level_factory=build_level):
        self.config  = config or SimConfig()
        self.rng     = random.Random(self.config.seed)
        self._level_factory = level_factory

        self.modes       = ModeScheduler()
        self.events      = EventQueue()
        self.tick_count  = 0
        self.epoch       = 0
        self.accumulator = 0.0
        self.best_score  = 0
        self._outbox     = []

        self.player = Player(PLAYER_SPEED)
        self.ghosts = [Ghost(gid, GHOST_SPEED) for gid in range(4)]
        self.agents = [GhostAgent(self, gid) for gid in range(4)]
        self.new_game()

    # ── Ciclo de vida ────────────────────────────────────────────────────────
    def new_game(self):
        self.events.clear()
        self.score = 0
        self.lives = self.config.start_lives
        self.level = self.config.start_level
        self.extra_life_awarded = False
        self.start_level()

    def start_level(self):
        self.epoch += 1
        self.grid  = self._level_factory(self.level)
        self.pellets_eaten = 0
        self.chain     = CHAIN_BASE
        self.fruit     = None
        self.fruit_timer = 0
        self.paused    = False
        self.game_over = False
        self.modes.reset()
        self._apply_level_speeds()
        self._reset_agents()

    def _apply_level_speeds(self):
        n = self.level - 1
        self.player.speed = min(PLAYER_SPEED_MAX, PLAYER_SPEED + n * PLAYER_SPEED_STEP)
        self.ghost_speed  = min(GHOST_SPEED_MAX, GHOST_SPEED + n * GHOST_SPEED_STEP)

    def _reset_agents(self):
        self.player.respawn()
        self.player.invincible = False
        for g in self.ghosts:
            g.reset(self.ghost_speed)
        self._release_ghosts()

    def _complete_level(self):
        self._emit(LEVEL_COMPLETE)
        self.level += 1
        self.start_level()

    # ── Loop de passo fixo ───────────────────────────────────────────────────
    def advance(self, dt):
        """Accumulate wall-clock `dt` seconds and run as many whole ticks as fit."""
        self.accumulator += dt
        steps = 0
        # folga para o erro de ponto flutuante de somar STEP repetidas vezes
        while self.accumulator >= STEP - 1e-9:
            self.tick()
            self.accumulator -= STEP
            steps += 1
        return steps

    def tick(self):
        self.tick_count += 1
        self._run_due_events()
        if self.paused:
            return
        epoch = self.epoch

        if self.modes.update():
            self._reverse_ghosts()
        self._update_player()
        if self.epoch != epoch:
            return   # nível concluído neste tick
        for agent in self.agents:
            self._update_ghost(agent)
        self._update_difficulty()
        self._update_fruit()
        self.check_collisions()

    def set_intent(self, direction):
        if self.paused:
            return
        self.player.next_dir = direction

    # ── Eventos temporizados ─────────────────────────────────────────────────
    def _schedule(self, seconds, kind, **data):
        return self.events.schedule(self.tick_count + seconds_to_ticks(seconds), kind, self.epoch, **data)

    def _run_due_events(self):
        handlers = {
            FRIGHTENED_END: self._end_frightened,
            LIFE_RESET:     self._life_reset,
            GAME_RESET:     self._game_reset,
        }
        for event in self.events.pop_due(self.tick_count):
            if event.epoch != self.epoch:
                continue
            handlers[event.kind](event)

    # ── Modos ────────────────────────────────────────────────────────────────
    def _reverse_ghosts(self):
        for g in self.ghosts:
            g.direction = g.next_dir = opposite(g.direction)

    def energize(self):
        period = self.modes.frighten()
        self.chain = CHAIN_BASE
        for g in self.ghosts:
            if not g.retreating:
                g.frightened = True
        self._schedule(frightened_seconds(self.level), FRIGHTENED_END, period=period)

    def _end_frightened(self, event):
        # Um energizador mais recente estende o período
        if event.data["period"] != self.modes.period:
            return
        self._calm_ghosts()

    def _calm_ghosts(self):
        self.modes.calm()
        for g in self.ghosts:
            g.frightened = False

    # ── Jogador ──────────────────────────────────────────────────────────────
    def _update_player(self):
        p, grid = self.player, self.grid
        if can_turn(grid, p.pos, p.next_dir):
            p.pos = snap_to_lane(p.pos, p.next_dir)
            p.direction = p.next_dir
        if p.direction != NONE:
            nx, ny = step(p.pos, p.direction, p.speed * TILE * STEP)
            nx = wrap_x(nx, grid.width)
            if not hits_wall(grid, (nx, ny), p.direction):
                p.pos = (nx, ny)
        self._eat()

    def _eat(self):
        row, col = self.player.tile
        kind = self.grid.consume(row, col)
        if kind == DOT:
            self._add_score(DOT_SCORE)
            self._emit(PELLET_EATEN)
        elif kind == CAPSULE:
            self._add_score(CAPSULE_SCORE)
            self._emit(POWER_EATEN)
            self.energize()

        if self.fruit is not None and (row, col) == self.fruit:
            self._add_score(fruit_for_level(self.level)[1])
            self._emit(FRUIT_EATEN)
            self.fruit = None

        if kind in (DOT, CAPSULE):
            self._on_pellet_eaten()
            if self.grid.pellets_remaining == 0:
                self._complete_level()

    def _on_pellet_eaten(self):
        self.pellets_eaten += 1
        self._release_ghosts()
        if self.pellets_eaten in FRUIT_THRESHOLDS:
            self._spawn_fruit()

    def _add_score(self, points):
        self.score += points
        self.best_score = max(self.best_score, self.score)
        if not self.extra_life_awarded and self.score >= EXTRA_LIFE_SCORE:
            self.extra_life_awarded = True
            self.lives += 1
            self._emit(LIFE_GAINED)

    # ── Fantasmas ────────────────────────────────────────────────────────────
    def _update_ghost(self, agent):
        g, grid = agent.ghost, self.grid
        row, col = g.tile
        speed = g.base_speed
        if grid.cell_at(row, col) == TUNNEL: speed *= TUNNEL_FACTOR
        if g.frightened: speed *= FRIGHTENED_FACTOR
        g.speed = speed

        desired = agent.get_action()
        gate = agent.through_gate()
        if can_turn(grid, g.pos, desired, gate):
            g.pos = snap_to_lane(g.pos, desired)
            g.direction = g.next_dir = desired
        if g.direction == NONE:
            return

        nx, ny = step(g.pos, g.direction, speed * TILE * STEP)
        if self.config.ghosts_wrap_tunnels:
            nx = wrap_x(nx, grid.width)
        elif not 0 <= nx < grid.width:
            return
        if not hits_wall(grid, (nx, ny), g.direction, gate):
            g.pos = (nx, ny)

        if g.retreating and g.tile == HOUSE_HOME:
            g.retreating = False
            g.confined   = True

    def _release_ghosts(self):
        for g in self.ghosts:
            if g.confined and not g.retreating and self.pellets_eaten >= g.threshold:
                g.confined = False

    def _update_difficulty(self):
        blinky = self.ghosts[BLINKY]
        for remaining, speed in AGGRESSION_STEPS:
            if self.grid.pellets_remaining <= remaining:
                blinky.base_speed = max(blinky.base_speed, speed)

    # ── Fruta ────────────────────────────────────────────────────────────────
    def _spawn_fruit(self):
        if self.fruit is not None:
            return
        self.fruit = FRUIT_TILE
        self.fruit_timer = seconds_to_ticks(FRUIT_LIFETIME)

    def _update_fruit(self):
        if self.fruit is None:
            return
        self.fruit_timer -= 1
        if self.fruit_timer <= 0:
            self.fruit = None

    # ── Colisões ─────────────────────────────────────────────────────────────
    def check_collisions(self):
        p = self.player
        for g in self.ghosts:
            if math.hypot(g.x_pos - p.x_pos, g.y_pos - p.y_pos) >= COLLISION_DISTANCE:
                continue
            if g.frightened and not g.retreating:
                self._capture(g)
            elif not p.invincible and not g.retreating:
                self.lose_life()

    def _capture(self, ghost):
        self._add_score(self.chain)
        self.chain = min(self.chain * 2, CHAIN_MAX)
        ghost.retreating = True
        ghost.frightened = False
        ghost.confined   = False
        self._emit(GHOST_EATEN)

    def lose_life(self):
        self.lives -= 1
        self.player.invincible = True
        self.paused = True
        self._emit(PLAYER_DIED)
        if self.lives <= 0:
            self.game_over = True
            self._emit(GAME_OVER)
            self._schedule(GAME_OVER_PAUSE, GAME_RESET)
        else:
            self._schedule(LIFE_LOST_PAUSE, LIFE_RESET)

    def _life_reset(self, event):
        self._calm_ghosts()
        self.chain  = CHAIN_BASE
        self.paused = False
        self._reset_agents()

    def _game_reset(self, event):
        self.new_game()

    # ── Colaboradores externos ───────────────────────────────────────────────
    def _emit(self, name):
        self._outbox.append(Cue(name, self.tick_count))

    def drain_events(self):
        out, self._outbox = self._outbox, []
        return out

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(
            tick              = self.tick_count,
            level             = self.level,
            score             = self.score,
            best_score        = self.best_score,
            lives             = self.lives,
            mode              = self.modes.mode,
            cells             = self.grid.as_tuple(),
            pellets_remaining = self.grid.pellets_remaining,
            player_pos        = self.player.pos,
            player_dir        = NAMES[self.player.direction],
            ghosts            = tuple(
                GhostView(g.name, g.pos, NAMES[g.direction], g.confined, g.frightened, g.retreating)
                for g in self.ghosts
            ),
            fruit             = self.fruit,
            paused            = self.paused,
            game_over         = self.game_over,
        )
