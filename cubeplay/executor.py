import logging

import numpy as np
from scipy.spatial.transform import Rotation

from cubeplay.config import SLOT_NORMALS, SLOT_ORDER, SNAP_TOLERANCE
from cubeplay.cube_state import PieceStore
from cubeplay.moves import Move, parse

logger = logging.getLogger(__name__)

SLOT_NORMAL_MATRIX = np.array([SLOT_NORMALS[slot] for slot in SLOT_ORDER], dtype=float)
NORMAL_TO_SLOT = {SLOT_NORMALS[slot]: n for n, slot in enumerate(SLOT_ORDER)}


def move_rotation(move: Move) -> Rotation:
    return Rotation.from_rotvec(move.axis_vector * np.radians(move.angle))


def snap_to_lattice(values, tolerance=SNAP_TOLERANCE, what='position'):
    values = np.asarray(values, dtype=float)
    snapped = np.rint(values)
    drift = float(np.max(np.abs(values - snapped))) if values.size else 0.
    if drift > tolerance:
        logger.warning('[Executor] %s drifted %.3g from the lattice', what, drift)
    return snapped.astype(int)


class RotationGroup:
    """Pieces turned rigidly together by one move.

    Every member gets the same rotation; new positions and stickers are all
    computed before any piece is written, so no half-turned state is visible.
    """
    def __init__(self, store: PieceStore, indices):
        self.store = store
        self.indices = list(indices)

    def rotate(self, rotation: Rotation, tolerance=SNAP_TOLERANCE):
        if not self.indices:
            return
        pieces = [self.store.pieces[i] for i in self.indices]
        positions = np.array([p.position for p in pieces], dtype=float)
        new_positions = snap_to_lattice(rotation.apply(positions), tolerance)

        normals = snap_to_lattice(rotation.apply(SLOT_NORMAL_MATRIX), tolerance, what='sticker normal')
        slot_map = [NORMAL_TO_SLOT[tuple(int(v) for v in normal)] for normal in normals]

        new_stickers = []
        for piece in pieces:
            stickers = [None] * len(SLOT_ORDER)
            for slot, sticker in enumerate(piece.stickers):
                if sticker is not None:
                    stickers[slot_map[slot]] = sticker
            new_stickers.append(stickers)

        for piece, position, stickers in zip(pieces, new_positions, new_stickers):
            piece.position = tuple(int(v) for v in position)
            piece.stickers = stickers

    def dissolve(self):
        self.indices = []


def select_pieces(store: PieceStore, move: Move):
    return [n for n, piece in enumerate(store.pieces) if move.selects(np.rint(piece.position))]


def apply_move(store: PieceStore, move, tolerance=SNAP_TOLERANCE):
    """Apply one move to `store` in place and return the indices of the turned pieces."""
    if isinstance(move, str):
        move = parse(move)
    indices = select_pieces(store, move)
    group = RotationGroup(store, indices)
    group.rotate(move_rotation(move), tolerance)
    group.dissolve()
    logger.debug('[Executor] applied %s to %d pieces', move.token, len(indices))
    return indices


def apply_sequence(store: PieceStore, tokens):
    moves = [parse(token) for token in (tokens.split() if isinstance(tokens, str) else tokens)]
    for move in moves:
        apply_move(store, move)
    return store
