from __future__ import annotations
from typing import Tuple, Dict, List, Optional
from game2048.actuator import HeadlessActuator
from game2048.game_core import ACTIONS, ACTION_NAMES
from game2048.game_manager import GameConfig, GameManager
from game2048.placement import Difficulty
from game2048.storage import MemoryStorageManager


class Game2048Env:
    """
    极简 Env 接口（基于 GameManager，内存存储 + 无界面渲染）：
    - reset(seed: Optional[int]) -> state
    - step(action: int) -> (state, reward, done, info)
    - get_state() -> state
    - legal_actions() -> List[int]
    - keep_playing() 胜利后继续
    - score 属性
    """
    def __init__(self, size: int = 4, seed: Optional[int] = None, difficulty: Difficulty = Difficulty.HARD, echo: bool = False):
        self.core = GameManager(
            GameConfig(size=size, seed=seed, difficulty=Difficulty(difficulty)),
            actuator=HeadlessActuator(echo=echo),
            storage_manager=MemoryStorageManager(),
        )

    @property
    def score(self) -> int:
        return self.core.score

    @property
    def best_score(self) -> int:
        return self.core.storage_manager.get_best_score()

    def reset(self, seed: Optional[int] = None) -> List[List[int]]:
        if seed is not None:
            self.core.rng.seed(seed)
        self.core.restart()
        return self.get_state()

    def get_state(self) -> List[List[int]]:
        return self.core.grid.to_list()

    def step(self, action: int) -> Tuple[List[List[int]], int, bool, Dict]:
        if self.core.is_game_terminated():
            return self.get_state(), 0, True, {}

        result = self.core.move(action)
        info = {
            "score": self.core.score,
            "moved": result.moved,
            "won": self.core.won,
            "max_tile": self.core.grid.max_tile(),
        }
        return self.get_state(), result.score, self.is_over(), info

    def legal_actions(self) -> List[int]:
        return self.core.grid.legal_actions()

    def keep_playing(self) -> None:
        self.core.keep_playing()

    def is_over(self) -> bool:
        return self.core.is_game_terminated()


# 便于外部引用
__all__ = ["Game2048Env", "ACTIONS", "ACTION_NAMES"]
