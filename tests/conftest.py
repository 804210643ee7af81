import random
from typing import Optional, Sequence

import pytest

from game2048.actuator import HeadlessActuator
from game2048.game_core import Grid
from game2048.game_manager import GameConfig, GameManager
from game2048.placement import Difficulty
from game2048.storage import MemoryStorageManager


class SequenceRandom(random.Random):
    """random() 先按给定序列返回，用完后回落到带种子的随机数。"""
    def __init__(self, values: Sequence[float], seed: int = 0):
        super().__init__(seed)
        self._values = list(values)

    def random(self) -> float:
        if self._values:
            return self._values.pop(0)
        return super().random()


def make_manager(
    cells: Optional[Sequence[Sequence[int]]] = None,
    difficulty: Difficulty = Difficulty.HARD,
    rng: Optional[random.Random] = None,
    seed: int = 1234,
    storage=None,
) -> GameManager:
    size = len(cells) if cells is not None else 4
    manager = GameManager(
        GameConfig(size=size, difficulty=difficulty, seed=seed),
        actuator=HeadlessActuator(),
        storage_manager=storage if storage is not None else MemoryStorageManager(),
    )
    if cells is not None:
        manager.grid = Grid(size, cells)
    if rng is not None:
        manager.rng = rng
        manager.placer.rng = rng
    return manager


@pytest.fixture
def manager() -> GameManager:
    return make_manager()
