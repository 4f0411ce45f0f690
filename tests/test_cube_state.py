import pytest

from cubeplay.config import STATE_SOLVED
from cubeplay.cube_state import PieceStore, decode, encode, facelet_position, is_solved, facelet_colors
from cubeplay.errors import MalformedFaceletString
from cubeplay.executor import apply_sequence


def test_solved_store():
    store = PieceStore.solved()
    assert len(store) == 26
    assert (0, 0, 0) not in store.snapshot()
    assert store.check_consistency()
    assert encode(store) == STATE_SOLVED
    assert is_solved(store)


def test_piece_stickers_follow_position():
    store = PieceStore.solved()
    corner = store.piece_at((1, 1, 1))
    assert corner.stickers == ['U', None, 'F', None, None, 'R']
    assert corner.sticker('R') == 'R'
    center = store.piece_at((0, -1, 0))
    assert center.stickers == [None, 'D', None, None, None, None]
    edge = store.piece_at((-1, 0, -1))
    assert edge.stickers == [None, None, None, 'B', 'L', None]


def test_corner_cells_share_a_piece():
    # U9 R1 F3 and D7 L7 B9 are the URF and DLB corners of the net
    assert facelet_position('U', 8) == facelet_position('R', 0) == facelet_position('F', 2) == (1, 1, 1)
    assert facelet_position('D', 6) == facelet_position('L', 6) == facelet_position('B', 8) == (-1, -1, -1)
    assert facelet_position('F', 4) == (0, 0, 1)
    with pytest.raises(ValueError):
        facelet_position('Q', 0)


def test_decode_solved():
    assert decode(STATE_SOLVED) == PieceStore.solved()


@pytest.mark.parametrize('sequence', [
    "R",
    "R U F' L2 D B'",
    "M E S x y' z2",
    "R U R' U' F2 D' L M2 S' E y",
])
def test_round_trip(sequence):
    store = apply_sequence(PieceStore.solved(), sequence)
    assert store.check_consistency()
    decoded = decode(encode(store))
    assert decoded == store
    assert encode(decoded) == encode(store)


def test_store_equality_ignores_piece_order():
    store = PieceStore.solved()
    shuffled = PieceStore(pieces=list(reversed(store.copy().pieces)))
    assert shuffled == store
    apply_sequence(shuffled, 'R')
    assert shuffled != store


@pytest.mark.parametrize('facelets', [
    STATE_SOLVED[:-1],
    STATE_SOLVED + 'U',
    '',
    STATE_SOLVED[:-1] + 'X',
    STATE_SOLVED[:10] + '?' + STATE_SOLVED[11:],
    STATE_SOLVED.lower(),
])
def test_decode_malformed(facelets):
    with pytest.raises(MalformedFaceletString):
        decode(facelets)


def test_is_solved_after_whole_cube_rotation():
    store = apply_sequence(PieceStore.solved(), 'x y')
    assert encode(store) != STATE_SOLVED
    assert is_solved(store)
    apply_sequence(store, 'R')
    assert not is_solved(store)


def test_facelet_colors():
    colors = facelet_colors(STATE_SOLVED)
    assert colors[4] == 'white'
    assert colors[13] == 'red'
    assert colors[22] == 'green'
    assert colors[31] == 'yellow'
    assert colors[40] == 'orange'
    assert colors[49] == 'blue'
    assert facelet_colors('?') == ['grey']
