import pytest

from cubeplay.cube_solver import CubeEngine
from cubeplay.cube_state import PieceStore
from cubeplay.scheduler import MoveScheduler


class FakeClock:
    def __init__(self):
        self.now = 0.

    def __call__(self):
        return self.now


@pytest.fixture(scope='function')
def store():
    return PieceStore.solved()


@pytest.fixture(scope='function')
def clock():
    return FakeClock()


@pytest.fixture(scope='function')
def scheduler(clock):
    return MoveScheduler(clock=clock, MOVE_DURATION=0.3)


@pytest.fixture(scope='function')
def engine(scheduler):
    return CubeEngine(scheduler=scheduler)
