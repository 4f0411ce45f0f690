import logging

import numpy as np
import pytest

from cubeplay.config import STATE_SOLVED
from cubeplay.cube_state import PieceStore, encode, is_solved
from cubeplay.executor import apply_move, apply_sequence, select_pieces, snap_to_lattice
from cubeplay.moves import MOVE_TABLE, invert, parse

ALL_TOKENS = [letter + modifier for letter in MOVE_TABLE for modifier in ('', "'", '2')]
QUARTER_TURNS = [letter for letter in MOVE_TABLE if letter not in 'xyz']


def _faces(*blocks):
    return ''.join(blocks)


@pytest.mark.parametrize('token, expected', [
    ('R', _faces('UUFUUFUUF', 'RRRRRRRRR', 'FFDFFDFFD', 'DDBDDBDDB', 'LLLLLLLLL', 'UBBUBBUBB')),
    ('U', _faces('UUUUUUUUU', 'BBBRRRRRR', 'RRRFFFFFF', 'DDDDDDDDD', 'FFFLLLLLL', 'LLLBBBBBB')),
    ('F', _faces('UUUUUULLL', 'URRURRURR', 'FFFFFFFFF', 'RRRDDDDDD', 'LLDLLDLLD', 'BBBBBBBBB')),
])
def test_single_moves_from_solved(store, token, expected):
    apply_move(store, token)
    assert encode(store) == expected


@pytest.mark.parametrize('token', ALL_TOKENS)
def test_inverse_law(token):
    store = apply_sequence(PieceStore.solved(), "R U F' L2 D B'")
    before = encode(store)
    apply_move(store, token)
    apply_move(store, invert(token))
    assert encode(store) == before


@pytest.mark.parametrize('token', QUARTER_TURNS)
def test_four_fold_law(token):
    store = apply_sequence(PieceStore.solved(), "F2 D' L U B")
    before = encode(store)
    for n in range(4):
        apply_move(store, token)
        if n < 3:
            assert encode(store) != before
    assert encode(store) == before


@pytest.mark.parametrize('token', ALL_TOKENS)
def test_stickers_stay_on_the_surface(token):
    store = apply_sequence(PieceStore.solved(), "R U' M S2 E'")
    apply_move(store, token)
    assert store.check_consistency()
    for piece in store.pieces:
        assert all(v in (-1, 0, 1) for v in piece.position)
        assert all(isinstance(v, int) for v in piece.position)


@pytest.mark.parametrize('token, n_pieces', [('R', 9), ("D'", 9), ('M', 8), ('E2', 8), ('S', 8), ('x', 26), ("z'", 26)])
def test_selected_pieces(store, token, n_pieces):
    assert len(select_pieces(store, parse(token))) == n_pieces
    assert len(apply_move(store, token)) == n_pieces


@pytest.mark.parametrize('rotation, layers', [
    ('x', "R M' L'"),
    ('y', "U E' D'"),
    ('z', "F S B'"),
])
def test_whole_cube_rotation_equals_all_layers(rotation, layers):
    scrambled = "R U F' L2 D B'"
    rotated = apply_sequence(PieceStore.solved(), scrambled + ' ' + rotation)
    layered = apply_sequence(PieceStore.solved(), scrambled + ' ' + layers)
    assert rotated == layered


def test_whole_cube_rotation_keeps_solved(store):
    apply_move(store, 'x')
    assert encode(store) != STATE_SOLVED
    assert is_solved(store)
    apply_sequence(store, "x'")
    assert encode(store) == STATE_SOLVED


def test_half_turn_equals_two_quarters():
    half = apply_sequence(PieceStore.solved(), 'U2')
    quarters = apply_sequence(PieceStore.solved(), 'U U')
    primes = apply_sequence(PieceStore.solved(), "U' U'")
    assert half == quarters == primes


@pytest.mark.parametrize('repetitions, solved', [(1, False), (2, False), (3, False), (4, False), (5, False), (6, True)])
def test_sexy_move_order(repetitions, solved):
    store = apply_sequence(PieceStore.solved(), ["R", "U", "R'", "U'"] * repetitions)
    assert (encode(store) == STATE_SOLVED) is solved


def test_snap_to_lattice(caplog):
    values = np.array([[0.9999999999, -1e-12, 1.]])
    with caplog.at_level(logging.WARNING):
        snapped = snap_to_lattice(values)
    assert snapped.tolist() == [[1, 0, 1]]
    assert caplog.records == []

    with caplog.at_level(logging.WARNING):
        snapped = snap_to_lattice([0.2, 1., -1.])
    assert snapped.tolist() == [0, 1, -1]
    assert 'drifted' in caplog.text


def test_many_moves_do_not_drift(store, caplog):
    with caplog.at_level(logging.WARNING):
        apply_sequence(store, ["R", "U", "x", "M'", "S", "E2"] * 50)
    assert store.check_consistency()
    assert 'drifted' not in caplog.text
