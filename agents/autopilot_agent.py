import math
from collections import deque

from engine.config import TILE, ALIGN_TOLERANCE
from engine.motion import NONE, TIE_ORDER, VECTORS, is_vertical, manhattan, step, tile_center, tile_of

# Raio de perigo (em tiles) ao redor de fantasmas ativos
DANGER_RADIUS = 2


# ======================================================================
#  ESPAÇO DE BUSCA (grid de tiles)
# ======================================================================
class PelletProblem:
    """
    Tile graph seen by the autopilot: walkable cells for the player, with
    tiles near a dangerous ghost removed and the tunnel columns wrapping.
    """
    def __init__(self, grid, ghosts, radius=DANGER_RADIUS):
        self.grid   = grid
        self.ghosts = ghosts   # lista de (linha, coluna) de fantasmas perigosos
        self.radius = radius
        self.food   = set(grid.pellets())

    def is_safe_and_walkable(self, r, c):
        if not self.grid.in_bounds(r, c) or self.grid.is_blocked(r, c):
            return False
        return self.ghost_distance((r, c)) > self.radius

    def ghost_distance(self, state):
        return min((manhattan(state, g) for g in self.ghosts), default=math.inf)

    def actions(self, state):
        return [d for d in TIE_ORDER if self.is_safe_and_walkable(*self.result(state, d))]

    def result(self, state, action):
        r, c = state
        dx, dy = VECTORS[action]
        return r + dy, (c + dx) % self.grid.cols

    def first_step_to_food(self, start):
        """Breadth-first search to the nearest dot or capsule. Returns the first move."""
        frontier = deque([start])
        first = {start: NONE}
        while frontier:
            state = frontier.popleft()
            if state != start and state in self.food:
                return first[state]
            for action in self.actions(state):
                nxt = self.result(state, action)
                if nxt not in first:
                    first[nxt] = action if state == start else first[state]
                    frontier.append(nxt)
        return NONE


# ======================================================================
#  AGENTE DE DEMONSTRAÇÃO
# ======================================================================
class AutopilotAgent:
    """
    Attract-mode input: produces the same directional intents a keyboard would.

    Plans from the tile the player will next be centred on. Between two tile
    centres the planned turn is buffered by GameState until can_turn holds,
    so the plan never flips while the player crosses a tile boundary.
    """

    def __init__(self, game):
        self.game = game

    def decision_tile(self):
        p, grid = self.game.player, self.game.grid
        if p.direction == NONE:
            return p.tile
        x, y = p.pos
        cx, cy = tile_center(*p.tile)
        off = abs(y - cy) if is_vertical(p.direction) else abs(x - cx)
        if off <= ALIGN_TOLERANCE:
            return p.tile
        row, col = tile_of(*step(p.pos, p.direction, TILE / 2))
        return row, col % grid.cols

    def get_action(self):
        game = self.game
        if game.grid.pellets_remaining == 0:
            return None

        # Fantasmas assustados ou voltando para casa não são perigo
        ghosts = [g.tile for g in game.ghosts if not g.frightened and not g.retreating]
        start = self.decision_tile()

        # Primeiro com folga ao redor dos fantasmas, depois só evitando o tile deles
        for radius in (DANGER_RADIUS, 0):
            problem = PelletProblem(game.grid, ghosts, radius)
            action = problem.first_step_to_food(start)
            if action != NONE:
                return action

        # Failsafe: encurralado, foge para o vizinho mais longe dos fantasmas
        problem = PelletProblem(game.grid, ghosts, 0)
        moves = problem.actions(start)
        if not moves:
            return game.player.direction
        return max(moves, key=lambda d: problem.ghost_distance(problem.result(start, d)))
