import pytest

from engine.board import Grid, build_level, in_house
from engine.config import (
    TILE, ROWS, COLS, EMPTY, DOT, CAPSULE, WALL, TUNNEL, GATE,
    TUNNEL_ROWS, CAPSULE_TILES, HOUSE_GATE, HOUSE_INTERIOR, PLAYER_SPAWN, GHOST_SPAWNS,
)
from engine.motion import (
    UP, DOWN, LEFT, RIGHT, NONE,
    can_turn, direction_vector, hits_wall, opposite, parse_direction, snap_to_lane, tile_center, tile_of,
)

# ======================================================================
# FIXTURES
# ======================================================================

@pytest.fixture
def mini_board():
    """
    Labirinto 5x5 simplificado.
    '#' = parede, '.' = pastilha, 'o' = energizador
    """
    return Grid.from_rows([
        "#####",
        "#...#",
        "#.#o#",
        "#...#",
        "#####",
    ])


@pytest.fixture
def level_one():
    return build_level(1)

# ======================================================================
# TABULEIRO
# ======================================================================

def test_contagem_inicial_de_pastilhas(mini_board):
    assert mini_board.initial_pellets == 8
    assert mini_board.pellets_remaining == 8


def test_consume_decrementa_contador(mini_board):
    assert mini_board.consume(1, 1) == DOT
    assert mini_board.cell_at(1, 1) == EMPTY
    assert mini_board.pellets_remaining == 7

    # Comer de novo a mesma célula não muda nada
    assert mini_board.consume(1, 1) == EMPTY
    assert mini_board.pellets_remaining == 7

    assert mini_board.consume(2, 3) == CAPSULE
    assert mini_board.pellets_remaining == 6
    assert mini_board.consume(0, 0) == EMPTY


def test_pastilhas_consumidas_mais_restantes_igual_inicial(mini_board):
    eaten = 0
    for r, c in list(mini_board.pellets()):
        if mini_board.consume(r, c) in (DOT, CAPSULE):
            eaten += 1
        assert eaten + mini_board.pellets_remaining == mini_board.initial_pellets
    assert mini_board.pellets_remaining == 0


def test_energizadores_contam_como_restantes():
    """Comer todas as pastilhas comuns deixa os energizadores no contador."""
    grid = Grid.from_rows(["######", "#o..o#", "######"])
    grid.consume(1, 2)
    grid.consume(1, 3)
    assert grid.pellets_remaining == 2


def test_is_wall_em_pixels(mini_board):
    assert mini_board.is_wall(0.5 * TILE, 0.5 * TILE)
    assert not mini_board.is_wall(1.5 * TILE, 1.5 * TILE)
    assert mini_board.is_wall(2.5 * TILE, 2.5 * TILE)


def test_fora_do_tabuleiro_nao_e_parede(mini_board):
    assert mini_board.cell_at(-1, 2) is None
    assert not mini_board.is_wall(-3, 12)
    assert not mini_board.is_wall(12, 5 * TILE + 1)


def test_portao_bloqueia_so_sem_permissao():
    grid = Grid.from_rows(["###", "#-#", "###"])
    assert grid.is_blocked(1, 1)
    assert not grid.is_blocked(1, 1, through_gate=True)


def test_bordas_sao_paredes_exceto_tuneis(level_one):
    for r in range(ROWS):
        for c in (0, COLS - 1):
            expected = TUNNEL if r in TUNNEL_ROWS else WALL
            assert level_one.cell_at(r, c) == expected
    for c in range(COLS):
        assert level_one.cell_at(0, c) == WALL
        assert level_one.cell_at(ROWS - 1, c) == WALL


def test_energizadores_nos_quatro_cantos(level_one):
    assert all(level_one.cell_at(r, c) == CAPSULE for r, c in CAPSULE_TILES)
    capsules = [p for p in level_one.pellets() if level_one.cell_at(*p) == CAPSULE]
    assert len(capsules) == 4


def test_casa_sem_pastilhas_e_com_portao(level_one):
    assert level_one.cell_at(*HOUSE_GATE) == GATE
    (r0, r1), (c0, c1) = HOUSE_INTERIOR
    for r in range(r0, r1 + 1):
        for c in range(c0, c1 + 1):
            assert level_one.cell_at(r, c) == EMPTY
    assert in_house(*HOUSE_GATE)
    assert not in_house(*PLAYER_SPAWN)


def test_nascimentos_em_celulas_livres(level_one):
    for r, c in (PLAYER_SPAWN, *GHOST_SPAWNS):
        assert not level_one.is_blocked(r, c)
    assert level_one.cell_at(*PLAYER_SPAWN) == EMPTY


def test_contador_igual_a_contagem_do_layout(level_one):
    assert level_one.pellets_remaining == level_one.count_pellets() > 0


def test_nivel_256_embaralha_so_a_metade_direita(level_one):
    kill = build_level(256)
    assert kill.cells != level_one.cells
    for r in range(ROWS):
        assert kill.cells[r][:COLS // 2] == level_one.cells[r][:COLS // 2]
        assert kill.cell_at(r, COLS - 1) in (WALL, TUNNEL)
    assert kill.pellets_remaining == kill.count_pellets()
    for r, c in GHOST_SPAWNS:
        assert not kill.is_blocked(r, c)


def test_layout_deterministico():
    assert build_level(3).cells == build_level(3).cells

# ======================================================================
# MOVIMENTO
# ======================================================================

def test_vetores_e_opostos():
    assert direction_vector(UP) == (0, -1)
    assert direction_vector(RIGHT) == (1, 0)
    assert direction_vector(NONE) == (0, 0)
    assert opposite(UP) == DOWN and opposite(LEFT) == RIGHT
    assert opposite(NONE) == NONE


def test_parse_direction():
    assert parse_direction("left") == LEFT
    with pytest.raises(ValueError):
        parse_direction("sideways")


def test_can_turn_respeita_paredes(mini_board):
    pos = tile_center(1, 1)
    assert can_turn(mini_board, pos, RIGHT)
    assert can_turn(mini_board, pos, DOWN)
    assert not can_turn(mini_board, pos, UP)
    assert not can_turn(mini_board, pos, LEFT)


def test_none_nunca_vira(mini_board):
    assert not can_turn(mini_board, tile_center(1, 1), NONE)


def test_can_turn_exige_alinhamento(mini_board):
    x, y = tile_center(1, 1)
    # 3 px fora do centro: não dá para virar para baixo...
    assert not can_turn(mini_board, (x + 3, y), DOWN)
    # ...mas seguir na horizontal continua possível
    assert can_turn(mini_board, (x + 3, y), RIGHT)
    assert can_turn(mini_board, (x + 1, y), DOWN)


def test_snap_to_lane_recentraliza():
    x, y = tile_center(1, 1)
    assert snap_to_lane((x + 1.5, y + 0.5), DOWN) == (x, y + 0.5)
    assert snap_to_lane((x + 1.5, y + 0.5), LEFT) == (x + 1.5, y)


def test_hits_wall_pela_borda_de_ataque(mini_board):
    x, y = tile_center(1, 1)
    assert not hits_wall(mini_board, (x, y), RIGHT)
    assert hits_wall(mini_board, (x - 0.5, y), LEFT)
    assert hits_wall(mini_board, tile_center(1, 3), RIGHT)


def test_tile_of():
    assert tile_of(*tile_center(7, 3)) == (7, 3)
    assert tile_of(-0.5, 4) == (0, -1)


def test_teclas_do_front_end_viram_direcoes():
    pytest.importorskip("pygame")
    from main import KEYS
    assert {parse_direction(name) for name in KEYS.values()} == {UP, DOWN, LEFT, RIGHT}
