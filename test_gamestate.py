import random

import pytest

from engine.board import Grid
from engine.config import (
    STEP, WALL, GATE, SCATTER, CHASE, FRIGHTENED, SimConfig,
    BLINKY, PINKY, INKY, CLYDE, HOUSE_HOME, HOUSE_EXIT, HOUSE_GATE, PLAYER_SPAWN, FRUIT_TILE,
)
from engine.gamestate import (
    GameState, fruit_for_level,
    PELLET_EATEN, POWER_EATEN, GHOST_EATEN, PLAYER_DIED, LIFE_GAINED, FRUIT_EATEN, LEVEL_COMPLETE, GAME_OVER,
)
from engine.modes import ModeScheduler, FRIGHTENED_END, GAME_RESET, LIFE_RESET, frightened_seconds
from engine.motion import UP, DOWN, LEFT, RIGHT, NONE, tile_center

# ======================================================================
# FIXTURES
# ======================================================================

@pytest.fixture
def game():
    return GameState(SimConfig(seed=1))


@pytest.fixture
def still_ghosts(game, monkeypatch):
    """Fantasmas parados e sem colisões: só o jogador e os relógios andam."""
    monkeypatch.setattr(game, "_update_ghost", lambda agent: None)
    monkeypatch.setattr(game, "check_collisions", lambda: None)
    return game


@pytest.fixture
def frozen(still_ghosts, monkeypatch):
    """Nenhum agente se move: só relógios e eventos."""
    monkeypatch.setattr(still_ghosts, "_update_player", lambda: None)
    return still_ghosts


def run(game, ticks):
    for _ in range(ticks):
        game.tick()


def names(game):
    return [cue.name for cue in game.drain_events()]


def corridor_level(dots, prefix=""):
    width = len(prefix) + dots + 2
    return lambda level: Grid.from_rows(["#" * width, "#" + prefix + "." * dots + "#", "#" * width])

# ======================================================================
# AGENDADOR DE MODOS
# ======================================================================

def test_cronograma_scatter_para_chase():
    s = ModeScheduler()
    assert s.mode == SCATTER
    for _ in range(7 * 60 - 1):
        assert not s.update()
    assert s.update()
    assert s.mode == CHASE and s.index == 1


def test_ultima_fase_nunca_termina():
    s = ModeScheduler()
    s.index = len(s.schedule) - 1
    assert not any(s.update() for _ in range(10000))
    assert s.mode == CHASE


def test_assustado_pausa_o_cronograma():
    s = ModeScheduler()
    s.frighten()
    assert not any(s.update() for _ in range(1000))
    assert s.mode == FRIGHTENED and s.elapsed == 0
    s.calm()
    assert s.mode == SCATTER


def test_mudanca_de_fase_inverte_fantasmas(frozen):
    for ghost, d in zip(frozen.ghosts, (LEFT, UP, RIGHT, DOWN)):
        ghost.direction = d
    frozen.modes.elapsed = 7 * 60 - 1
    frozen.tick()
    assert frozen.modes.mode == CHASE
    assert [g.direction for g in frozen.ghosts] == [RIGHT, DOWN, LEFT, UP]

# ======================================================================
# MODO ASSUSTADO
# ======================================================================

def test_energizador_assusta_quem_nao_esta_voltando(game):
    game.ghosts[INKY].retreating = True
    game.energize()
    assert game.modes.mode == FRIGHTENED
    assert [g.frightened for g in game.ghosts] == [True, True, False, True]
    (event,) = game.events.pending(FRIGHTENED_END)
    assert event.due == game.tick_count + 6 * 60


def test_comer_energizador_andando_assusta_todos():
    game = GameState(level_factory=lambda level: Grid.from_rows(["#######", "#.o...#", "#######"]))
    game.player.pos = tile_center(1, 1)
    game.set_intent(RIGHT)
    run(game, 10)

    assert game.score == 10 + 50
    assert names(game) == [PELLET_EATEN, POWER_EATEN]
    assert game.modes.mode == FRIGHTENED
    assert all(g.frightened for g in game.ghosts)
    assert game.events.pending(FRIGHTENED_END)


def test_duracao_diminui_com_o_nivel():
    assert frightened_seconds(1) == 6.0
    assert frightened_seconds(5) == 5.0
    assert frightened_seconds(40) == 0.8


def test_assustado_expira_e_volta_a_fase_atual(frozen):
    frozen.modes.index = 1
    frozen.energize()
    run(frozen, 6 * 60 - 1)
    assert frozen.modes.mode == FRIGHTENED
    frozen.tick()
    assert frozen.modes.mode == CHASE and frozen.modes.index == 1
    assert not any(g.frightened for g in frozen.ghosts)


def test_segundo_energizador_estende_o_periodo(frozen):
    frozen.energize()
    run(frozen, 200)
    frozen.energize()
    run(frozen, 160)
    assert frozen.modes.mode == FRIGHTENED
    run(frozen, 199)
    assert frozen.modes.mode == FRIGHTENED
    frozen.tick()
    assert frozen.modes.mode == SCATTER


def test_fim_de_assustado_antigo_nao_afeta_nivel_novo(frozen):
    frozen.energize()
    run(frozen, 100)
    frozen.start_level()
    frozen.energize()
    run(frozen, 300)
    assert frozen.modes.mode == FRIGHTENED
    run(frozen, 60)
    assert frozen.modes.mode == SCATTER


def test_reset_de_vida_obsoleto_e_ignorado(frozen):
    frozen.lose_life()
    assert frozen.events.pending(LIFE_RESET)
    frozen.start_level()
    frozen.chain = 800
    frozen.player.pos = tile_center(1, 1)
    run(frozen, 100)
    assert frozen.chain == 800
    assert frozen.player.pos == tile_center(1, 1)
    assert frozen.lives == 2

# ======================================================================
# CAPTURAS E PONTUAÇÃO EM CADEIA
# ======================================================================

def test_tres_capturas_seguidas(game):
    game.energize()
    for g in game.ghosts[:3]:
        g.pos = game.player.pos
    game.ghosts[CLYDE].pos = tile_center(3, 5)
    before = game.score

    game.check_collisions()

    assert game.score - before == 200 + 400 + 800
    assert all(g.retreating and not g.frightened for g in game.ghosts[:3])
    assert not game.ghosts[CLYDE].retreating
    events = names(game)
    assert events.count(GHOST_EATEN) == 3
    assert PLAYER_DIED not in events
    assert game.lives == 3


def test_cadeia_limitada_em_1600_e_reiniciada(game):
    game.energize()
    for g in game.ghosts:
        g.pos = game.player.pos
    game.check_collisions()
    assert game.score == 200 + 400 + 800 + 1600

    blinky = game.ghosts[BLINKY]
    blinky.retreating, blinky.frightened = False, True
    game.check_collisions()
    assert game.score == 3000 + 1600

    game.energize()
    assert game.chain == 200

# ======================================================================
# PERDA DE VIDA E FIM DE JOGO
# ======================================================================

def test_colisao_tira_uma_vida_so(game):
    game.ghosts[BLINKY].pos = game.player.pos
    game.ghosts[PINKY].pos = game.player.pos
    game.check_collisions()

    assert game.lives == 2
    assert game.paused and game.player.invincible
    assert names(game).count(PLAYER_DIED) == 1
    assert len(game.events) == 1


def test_pausa_e_reposicionamento_apos_morte(game):
    game.player.pos = tile_center(3, 5)
    game.ghosts[BLINKY].pos = tile_center(3, 5)
    game.check_collisions()
    game.set_intent(UP)
    assert game.player.next_dir == NONE

    run(game, 77)
    assert game.paused
    game.tick()
    assert not game.paused and not game.player.invincible
    assert game.player.tile == PLAYER_SPAWN
    assert game.lives == 2


def test_reset_de_vida_solta_de_novo_os_liberados(game):
    game.pellets_eaten = 25
    game.lose_life()
    run(game, 78)
    assert [g.confined for g in game.ghosts] == [False, False, True, True]


def test_fantasma_voltando_nao_mata(game):
    ghost = game.ghosts[BLINKY]
    ghost.retreating = True
    ghost.pos = game.player.pos
    game.check_collisions()
    assert game.lives == 3 and not game.paused


def test_invencivel_nao_perde_vida(game):
    game.player.invincible = True
    game.ghosts[BLINKY].pos = game.player.pos
    game.check_collisions()
    assert game.lives == 3


def test_ultima_vida_inicia_fim_de_jogo(game):
    game.lives, game.score, game.level = 1, 1230, 3
    game.ghosts[BLINKY].pos = game.player.pos
    game.check_collisions()

    assert game.lives == 0 and game.game_over
    assert GAME_OVER in names(game)
    assert game.events.pending(GAME_RESET)

    run(game, 59)
    assert (game.lives, game.score, game.level) == (0, 1230, 3)
    game.tick()
    assert (game.lives, game.score, game.level) == (3, 0, 1)
    assert not game.game_over and not game.paused


def test_vida_extra_uma_vez_por_jogo(game):
    game._add_score(10000)
    assert game.lives == 4
    assert LIFE_GAINED in names(game)
    game._add_score(10)
    assert game.lives == 4
    assert game.best_score == 10010

# ======================================================================
# LIBERAÇÃO, DIFICULDADE E FRUTA
# ======================================================================

def test_cada_fantasma_sai_uma_vez_no_seu_limite(game):
    assert [g.confined for g in game.ghosts] == [False, True, True, True]
    released = {gid: [] for gid in range(4)}
    for _ in range(80):
        before = [g.confined for g in game.ghosts]
        game._on_pellet_eaten()
        for gid, g in enumerate(game.ghosts):
            if before[gid] and not g.confined:
                released[gid].append(game.pellets_eaten)
            assert before[gid] or not g.confined
    assert released == {BLINKY: [], PINKY: [20], INKY: [40], CLYDE: [60]}


def test_volta_para_casa_e_confina_ate_a_proxima_pastilha(game):
    game.pellets_eaten = 100
    pinky = game.ghosts[PINKY]
    pinky.confined, pinky.retreating = False, True
    pinky.pos = tile_center(*HOUSE_HOME)

    game._update_ghost(game.agents[PINKY])
    assert pinky.confined and not pinky.retreating

    game._on_pellet_eaten()
    assert not pinky.confined


def test_olhos_atravessam_o_portao_ate_casa(game):
    inky = game.ghosts[INKY]
    inky.confined, inky.retreating = False, True
    inky.pos = tile_center(*HOUSE_EXIT)

    visited = []
    for _ in range(120):
        game._update_ghost(game.agents[INKY])
        visited.append(inky.tile)
        if inky.confined:
            break

    assert HOUSE_GATE in visited
    assert inky.confined and not inky.retreating
    assert inky.tile == HOUSE_HOME


def test_blinky_acelera_com_poucas_pastilhas(game):
    blinky = game.ghosts[BLINKY]
    for remaining, speed in ((61, 5.5), (60, 6.2), (20, 6.5)):
        game.grid.pellets_remaining = remaining
        game._update_difficulty()
        assert blinky.base_speed == pytest.approx(speed)
    assert game.ghosts[PINKY].base_speed == pytest.approx(5.5)


def test_multiplicadores_de_velocidade_recalculados(game):
    blinky = game.ghosts[BLINKY]
    blinky.pos = tile_center(15, 0)
    blinky.frightened = True
    game._update_ghost(game.agents[BLINKY])
    assert blinky.speed == pytest.approx(5.5 * 0.6 * 0.8)

    blinky.pos = tile_center(3, 5)
    blinky.frightened = False
    game._update_ghost(game.agents[BLINKY])
    assert blinky.speed == pytest.approx(5.5)


def test_velocidades_por_nivel():
    g = GameState(SimConfig(start_level=5))
    assert g.player.speed == pytest.approx(6.6)
    assert g.ghost_speed == pytest.approx(5.98)
    g = GameState(SimConfig(start_level=30))
    assert (g.player.speed, g.ghost_speed) == (8.0, 7.2)


def test_fruta_aparece_e_expira(game):
    game.pellets_eaten = 69
    game._on_pellet_eaten()
    assert game.fruit == FRUIT_TILE
    for _ in range(599):
        game._update_fruit()
    assert game.fruit == FRUIT_TILE
    game._update_fruit()
    assert game.fruit is None


def test_fruta_nao_reaparece_enquanto_ativa(game):
    game.pellets_eaten = 69
    game._on_pellet_eaten()
    for _ in range(10):
        game._update_fruit()
    game.pellets_eaten = 169
    game._on_pellet_eaten()
    assert game.fruit_timer == 590


def test_comer_fruta(game):
    game.fruit = FRUIT_TILE
    game.player.pos = tile_center(*FRUIT_TILE)
    game._eat()
    assert game.score == 10 + 100
    assert game.fruit is None
    assert names(game) == [PELLET_EATEN, FRUIT_EATEN]


def test_valor_da_fruta_por_nivel():
    assert fruit_for_level(1) == ("berry", 100)
    assert fruit_for_level(4) == ("citrus", 300)
    assert fruit_for_level(7) == ("melon", 500)
    assert fruit_for_level(13) == ("star", 1000)
    assert fruit_for_level(300) == ("star", 1000)

# ======================================================================
# JOGADOR, ENTRADA E LOOP
# ======================================================================

def test_ultima_intencao_vence(game):
    game.set_intent(UP)
    game.set_intent(LEFT)
    assert game.player.next_dir == LEFT


def test_none_nao_muda_direcao(still_ghosts):
    still_ghosts.set_intent(RIGHT)
    still_ghosts.tick()
    assert still_ghosts.player.direction == RIGHT
    still_ghosts.set_intent(NONE)
    run(still_ghosts, 3)
    assert still_ghosts.player.direction == RIGHT


def test_tunel_leva_o_jogador_para_o_outro_lado(still_ghosts):
    still_ghosts.player.pos = tile_center(15, 0)
    still_ghosts.set_intent(LEFT)
    run(still_ghosts, 10)
    assert still_ghosts.player.tile == (15, still_ghosts.grid.cols - 1)


def test_advance_passo_fixo():
    assert GameState().advance(1.0) == 60
    g = GameState()
    assert g.advance(STEP / 2) == 0
    assert g.advance(STEP / 2) == 1
    assert g.tick_count == 1


def test_snapshot_imutavel(game):
    snap = game.snapshot()
    with pytest.raises(AttributeError):
        snap.score = 5
    assert [g.name for g in snap.ghosts] == ["blinky", "pinky", "inky", "clyde"]
    assert snap.mode == SCATTER and snap.player_dir == "none"
    assert snap.cells[0][0] == WALL
    game.energize()
    assert game.snapshot().mode == FRIGHTENED


def test_nivel_256_conta_as_pastilhas_reais():
    g = GameState(SimConfig(start_level=256))
    assert g.grid.pellets_remaining == g.grid.count_pellets()

# ======================================================================
# PROPRIEDADES E CENÁRIOS DE PONTA A PONTA
# ======================================================================

def test_ninguem_entra_em_parede_e_pastilhas_conferem():
    game = GameState(SimConfig(seed=5))
    rng = random.Random(3)
    for t in range(3000):
        if t % 20 == 0:
            game.set_intent(rng.choice([UP, DOWN, LEFT, RIGHT]))
        game.tick()
        grid = game.grid
        assert grid.cell_at(*game.player.tile) not in (WALL, GATE)
        assert all(grid.cell_at(*g.tile) != WALL for g in game.ghosts)
        assert game.pellets_eaten + grid.pellets_remaining == grid.initial_pellets


def test_comer_244_pastilhas_passa_de_nivel():
    game = GameState(level_factory=corridor_level(244))
    first = game.grid
    assert first.initial_pellets == 244
    game.player.pos = tile_center(1, 1)
    game.set_intent(RIGHT)

    for _ in range(5000):
        game.tick()
        if game.level == 2:
            break

    assert game.level == 2
    assert first.pellets_remaining == 0
    assert game.score == 244 * 10
    events = names(game)
    assert events.count(PELLET_EATEN) == 244
    assert LEVEL_COMPLETE in events


def test_energizador_restante_segura_o_nivel():
    game = GameState(level_factory=corridor_level(10, prefix="o"))
    game.player.pos = tile_center(1, 2)
    game.set_intent(RIGHT)
    run(game, 200)
    assert game.level == 1
    assert game.grid.pellets_remaining == 1
    assert game.score == 100
