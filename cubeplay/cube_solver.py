import logging
from typing import List, Optional

import kociemba

from cubeplay.config import FACE_ORDER, FALLBACK_SEQUENCE, MAX_SOLUTION_MOVES
from cubeplay.color_classifier import ScanResult
from cubeplay.cube_state import decode, is_solved
from cubeplay.errors import CubeError, InvalidMoveToken, MalformedFaceletString, SolverFailure
from cubeplay.moves import describe, expand_half_turns, parse_sequence
from cubeplay.scheduler import MoveScheduler

logger = logging.getLogger(__name__)


def kociemba_notation(facelets):
    """Relabel stickers by the face their colour's centre sits on.

    Slice moves and whole-cube rotations carry the centres around, the
    solver wants every centre on its own face.
    """
    mapping = {facelets[9 * n + 4]: face for n, face in enumerate(FACE_ORDER)}
    if len(mapping) != 6:
        raise SolverFailure(f'centres are not distinct: {sorted(mapping)}')
    return ''.join(mapping[ch] for ch in facelets)


class KociembaSolver:
    def solve(self, facelets) -> List[str]:
        if len(facelets) != 54:
            raise SolverFailure(f'expected 54 facelets, got {len(facelets)}')
        notation = kociemba_notation(facelets)
        if all(len(set(notation[n:n + 9])) == 1 for n in range(0, 54, 9)):
            return []
        try:
            solution = kociemba.solve(notation)
        except ValueError as e:
            raise SolverFailure(f'solver rejected {notation}: {e}') from e
        try:
            parse_sequence(solution)
        except InvalidMoveToken as e:
            raise SolverFailure(f'unreadable solver output {solution!r}') from e
        return solution.split()


class CubeEngine:
    """What the player and tutorial screens talk to.

    The store lives inside the scheduler; every move reaches it through
    `enqueue` or `play`. Scan, token and solver problems never escape: the short
    FALLBACK_SEQUENCE is offered instead and the cause kept in `last_error`.
    """
    def __init__(self, solver=None, scheduler=None,
                 MAX_SOLUTION_MOVES=MAX_SOLUTION_MOVES,
                 FALLBACK_SEQUENCE=FALLBACK_SEQUENCE):
        self.solver = solver if solver is not None else KociembaSolver()
        self.scheduler = scheduler if scheduler is not None else MoveScheduler()
        self.MAX_SOLUTION_MOVES = MAX_SOLUTION_MOVES
        self.FALLBACK_SEQUENCE = list(FALLBACK_SEQUENCE)
        self.solution: Optional[List[str]] = None
        self.last_error: Optional[CubeError] = None

    def enqueue(self, token):
        """Queue one manual move. A bad token queues nothing and offers the fallback."""
        try:
            self.scheduler.enqueue(token)
        except InvalidMoveToken as e:
            self._fallback(e)
            return False
        return True

    def reset(self):
        self.scheduler.reset()
        self.solution = None
        self.last_error = None

    def get_facelet_string(self):
        return self.scheduler.facelet_string()

    def tick(self, now=None):
        return self.scheduler.tick(now)

    def is_solved(self):
        return is_solved(self.scheduler.store)

    def _fallback(self, error: CubeError):
        logger.warning('[CubeEngine] %s: %s, using fallback %s',
                       type(error).__name__, error, ' '.join(self.FALLBACK_SEQUENCE))
        self.last_error = error
        self.solution = list(self.FALLBACK_SEQUENCE)
        return self.solution

    def load_facelets(self, facelets):
        self.scheduler.reset(decode(facelets))
        self.solution = None

    def load_scan(self, scan: ScanResult):
        """Start from a scanned cube and return the moves to play."""
        try:
            self.load_facelets(scan.to_facelet_string())
        except MalformedFaceletString as e:
            self.scheduler.reset()
            return self._fallback(e)
        return self.solve()

    def solve(self):
        facelets = self.get_facelet_string()
        try:
            solution = self.solver.solve(facelets)
        except SolverFailure as e:
            return self._fallback(e)
        if len(solution) > self.MAX_SOLUTION_MOVES:
            # a longer answer may still be right, but it is not played
            return self._fallback(SolverFailure(f'solution has {len(solution)} moves'))
        logger.info('[CubeEngine] solution %s', ' '.join(solution) or '(already solved)')
        self.last_error = None
        self.solution = solution
        return solution

    def play(self, tokens=None, one_quarter_at_a_time=False):
        tokens = list(self.solution or []) if tokens is None else list(tokens)
        if one_quarter_at_a_time:
            tokens = expand_half_turns(tokens)
        try:
            self.scheduler.extend(tokens)
        except InvalidMoveToken as e:
            tokens = self._fallback(e)
            self.scheduler.extend(tokens)
        return list(tokens)

    def instructions(self, tokens=None):
        tokens = (self.solution or []) if tokens is None else tokens
        return [(token, describe(token)) for token in tokens]
