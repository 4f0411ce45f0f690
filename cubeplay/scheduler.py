import enum
import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Callable, List

import numpy as np
from scipy.spatial.transform import Rotation

from cubeplay.config import MOVE_DURATION
from cubeplay.cube_state import PieceStore, encode
from cubeplay.executor import apply_move
from cubeplay.moves import Move, parse

logger = logging.getLogger(__name__)


class SchedulerState(enum.Enum):
    IDLE = 'idle'
    ANIMATING = 'animating'


@dataclass
class Animation:
    """Visual catch-up of a move that is already applied to the store."""
    move: Move
    indices: List[int]
    started: float
    duration: float
    progress: float = 0.

    @property
    def token(self):
        return self.move.token

    @property
    def done(self):
        return self.progress >= 1.

    def advance(self, now):
        if self.duration <= 0:
            self.progress = 1.
        else:
            self.progress = min(1., max(0., (now - self.started) / self.duration))

    def remaining_rotation(self) -> Rotation:
        # the pieces already sit at their final pose, so draw them turned back
        angle = -(1. - self.progress) * np.radians(self.move.angle)
        return Rotation.from_rotvec(self.move.axis_vector * angle)


@dataclass
class MoveScheduler:
    """Single-flight FIFO of move tokens driven by the display refresh.

    A move changes the store the moment it leaves the queue; `tick` only
    moves the animation along and starts the next move once it has ended.
    """
    store: PieceStore = field(default_factory=PieceStore.solved)
    MOVE_DURATION: float = MOVE_DURATION
    clock: Callable[[], float] = time.monotonic

    queue: deque = field(default_factory=deque)
    animation: Animation = None
    state: SchedulerState = SchedulerState.IDLE
    _move_done_callbacks: list = field(default_factory=list)
    _idle_callbacks: list = field(default_factory=list)
    _resets: int = 0

    def on_move_done(self, callback):
        self._move_done_callbacks.append(callback)
        return callback

    def on_idle(self, callback):
        self._idle_callbacks.append(callback)
        return callback

    @property
    def is_idle(self):
        return self.state is SchedulerState.IDLE

    def enqueue(self, token):
        move = parse(token)
        self.queue.append(move)
        if self.state is SchedulerState.IDLE:
            self._start_next(self.clock())

    def extend(self, tokens):
        moves = [parse(token) for token in tokens]
        for move in moves:
            self.queue.append(move)
        if moves and self.state is SchedulerState.IDLE:
            self._start_next(self.clock())

    def pending(self):
        return [move.token for move in self.queue]

    def _start_next(self, now):
        move = self.queue.popleft()
        indices = apply_move(self.store, move)
        self.animation = Animation(move=move, indices=indices, started=now, duration=self.MOVE_DURATION)
        self.state = SchedulerState.ANIMATING
        logger.debug('[Scheduler] started %s, %d queued', move.token, len(self.queue))

    def _finish_current(self, now, next_start=None):
        token = self.animation.token
        self.animation = None
        # settle the state before any callback can run or raise
        if self.queue:
            self._start_next(now if next_start is None else next_start)
        else:
            self.state = SchedulerState.IDLE
        resets = self._resets
        for callback in self._move_done_callbacks:
            callback(token)
        if self._resets == resets and self.state is SchedulerState.IDLE:
            for callback in self._idle_callbacks:
                callback()

    def tick(self, now=None):
        if self.state is SchedulerState.IDLE:
            return self.state
        if now is None:
            now = self.clock()
        self.animation.advance(now)
        while self.animation is not None and self.animation.done:
            # a late frame may already cover part of the next move
            due = min(self.animation.started + self.animation.duration, now)
            self._finish_current(now, next_start=due)
            if self.animation is not None:
                self.animation.advance(now)
        return self.state

    def flush(self):
        while self.state is SchedulerState.ANIMATING:
            self.animation.progress = 1.
            self._finish_current(self.clock())

    def reset(self, store: PieceStore = None):
        """Drop queued and running moves and start over from `store` (solved by default)."""
        dropped = len(self.queue) + (self.animation is not None)
        self.queue.clear()
        self.animation = None
        self.state = SchedulerState.IDLE
        self.store = store if store is not None else PieceStore.solved()
        self._resets += 1
        logger.info('[Scheduler] reset, dropped %d moves', dropped)

    def facelet_string(self):
        return encode(self.store)
