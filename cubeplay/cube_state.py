import itertools
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from cubeplay.config import FACE_ORDER, HOME_COLORS, SLOT_NORMALS, SLOT_ORDER
from cubeplay.errors import MalformedFaceletString

Position = Tuple[int, int, int]


def facelet_position(face, idx):
    """
    Lattice position of cell `idx` (row-major, 0..8) of `face`.

                     -----
                  | U1 U2 U3 |
                  | U4 U5 U6 |
                  | U7 U8 U9 |
        -----   -----   -----   -----
      | L1 L2 L3 | F1 F2 F3 | R1 R2 R3 | B1 B2 B3 |
      | L4 L5 L6 | F4 F5 F6 | R4 R5 R6 | B4 B5 B6 |
      | L7 L8 L9 | F7 F8 F9 | R7 R8 R9 | B7 B8 B9 |
        -----   -----   -----   -----
                | D1 D2 D3 |
                | D4 D5 D6 |
                | D7 D8 D9 |
                    -----
    x points to R, y to U and z to F.
    """
    row, col = divmod(idx, 3)
    if face == 'U':
        return (col - 1, 1, row - 1)
    if face == 'R':
        return (1, 1 - row, 1 - col)
    if face == 'F':
        return (col - 1, 1 - row, 1)
    if face == 'D':
        return (col - 1, -1, 1 - row)
    if face == 'L':
        return (-1, 1 - row, col - 1)
    if face == 'B':
        return (1 - col, 1 - row, -1)
    raise ValueError(f'unknown face {face}')


def _surface_slots(position):
    slots = []
    for n, slot in enumerate(SLOT_ORDER):
        normal = SLOT_NORMALS[slot]
        axis = [i for i, v in enumerate(normal) if v != 0][0]
        if position[axis] == normal[axis]:
            slots.append(n)
    return slots


def lattice_positions():
    return [p for p in itertools.product((-1, 0, 1), repeat=3) if p != (0, 0, 0)]


@dataclass
class Piece:
    position: Position
    # indexed like SLOT_ORDER, None where the piece does not touch the surface
    stickers: List[Optional[str]] = field(default_factory=lambda: [None] * 6)

    def sticker(self, slot):
        return self.stickers[SLOT_ORDER.index(slot)]

    def is_consistent(self):
        defined = {n for n, s in enumerate(self.stickers) if s is not None}
        return defined == set(_surface_slots(self.position))


@dataclass
class PieceStore:
    """The 26 movable pieces, kept in a flat list addressed by stable index."""
    pieces: List[Piece] = field(default_factory=list)

    @classmethod
    def empty(cls):
        return cls(pieces=[Piece(position=p) for p in lattice_positions()])

    @classmethod
    def solved(cls):
        store = cls.empty()
        for piece in store.pieces:
            for n in _surface_slots(piece.position):
                piece.stickers[n] = SLOT_ORDER[n]
        return store

    def __len__(self):
        return len(self.pieces)

    def __eq__(self, other):
        if not isinstance(other, PieceStore):
            return NotImplemented
        return self.snapshot() == other.snapshot()

    def snapshot(self) -> Dict[Position, Tuple[Optional[str], ...]]:
        return {tuple(p.position): tuple(p.stickers) for p in self.pieces}

    def piece_at(self, position) -> Piece:
        position = tuple(position)
        for piece in self.pieces:
            if tuple(piece.position) == position:
                return piece
        raise KeyError(f'no piece at {position}')

    def copy(self):
        return deepcopy(self)

    def check_consistency(self):
        positions = [tuple(p.position) for p in self.pieces]
        if len(positions) != 26 or len(set(positions)) != 26:
            return False
        return all(p.is_consistent() for p in self.pieces)


def encode(store: PieceStore) -> str:
    by_position = {tuple(p.position): p for p in store.pieces}
    facelets = ''
    for face in FACE_ORDER:
        slot = SLOT_ORDER.index(face)
        for idx in range(9):
            sticker = by_position[facelet_position(face, idx)].stickers[slot]
            facelets += sticker if sticker is not None else '?'
    return facelets


def decode(facelets: str) -> PieceStore:
    if len(facelets) != 54:
        raise MalformedFaceletString(f'expected 54 facelets, got {len(facelets)}')
    bad = set(facelets) - set(FACE_ORDER)
    if bad:
        raise MalformedFaceletString(f'unknown facelet symbols {sorted(bad)}')

    store = PieceStore.empty()
    by_position = {tuple(p.position): p for p in store.pieces}
    for n, symbol in enumerate(facelets):
        face, idx = FACE_ORDER[n // 9], n % 9
        by_position[facelet_position(face, idx)].stickers[SLOT_ORDER.index(face)] = symbol
    return store


def is_solved(store: PieceStore) -> bool:
    # whole-cube rotations keep a solved cube solved, so only ask for uniform faces
    facelets = encode(store)
    return all(len(set(facelets[n:n + 9])) == 1 for n in range(0, 54, 9))


def facelet_colors(facelets):
    return [HOME_COLORS.get(ch, 'grey') for ch in facelets]
