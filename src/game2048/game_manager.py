from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, Optional

from game2048.actuator import HeadlessActuator
from game2048.game_core import Grid, MoveResult, Tile, WIN_VALUE, ACTION_NAMES
from game2048.input_manager import InputManager, MOVE, RESTART, KEEP_PLAYING
from game2048.placement import Difficulty, TilePlacer
from game2048.storage import MemoryStorageManager

logger = logging.getLogger(__name__)


@dataclass
class GameConfig:
    size: int = 4
    start_tiles: int = 2
    difficulty: Difficulty = Difficulty.HARD
    win_value: int = WIN_VALUE
    seed: Optional[int] = None
    four_probability: float = 0.1  # 新块为 4 的概率，否则为 2


class GameManager:
    """
    回合制状态机：持有棋盘、分数和 over/won/keep-playing 标志。

    - move(direction): 0=上, 1=右, 2=下, 3=左
    - restart(): 清空存档并开新局
    - keep_playing(): 胜利后继续游戏
    每次状态变化后调用 actuate()：更新最高分、存档/清档、通知渲染。
    """
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        input_manager: Optional[InputManager] = None,
        actuator=None,
        storage_manager=None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config if config is not None else GameConfig()
        self.size = self.config.size
        self.start_tiles = self.config.start_tiles
        self.difficulty = Difficulty(self.config.difficulty)
        self.rng = rng if rng is not None else random.Random(self.config.seed)

        self.input_manager = input_manager if input_manager is not None else InputManager()
        self.actuator = actuator if actuator is not None else HeadlessActuator()
        self.storage_manager = storage_manager if storage_manager is not None else MemoryStorageManager()
        self.placer = TilePlacer(self.difficulty, rng=self.rng)

        self.grid = Grid(self.size, win_value=self.config.win_value)
        self.score = 0
        self.over = False
        self.won = False
        self.keep_going = False

        self.input_manager.on(MOVE, self.move)
        self.input_manager.on(RESTART, self.restart)
        self.input_manager.on(KEEP_PLAYING, self.keep_playing)

        self.setup()

    def restart(self) -> None:
        self.storage_manager.clear_game_state()
        self.actuator.continue_game()  # 清除胜负提示
        logger.debug("restart")
        self.setup(restore=False)

    def keep_playing(self) -> None:
        # 胜利后继续（可以超过 2048）
        self.keep_going = True
        self.actuator.continue_game()

    def is_game_terminated(self) -> bool:
        return self.over or (self.won and not self.keep_going)

    def setup(self, restore: bool = True) -> None:
        previous_state = self.storage_manager.get_game_state() if restore else None

        if previous_state:
            self.grid = Grid.from_serialized(previous_state["grid"], win_value=self.config.win_value)
            self.score = previous_state["score"]
            self.over = previous_state["over"]
            self.won = previous_state["won"]
            self.keep_going = previous_state["keepPlaying"]
            logger.debug("restored game: score=%d over=%s won=%s", self.score, self.over, self.won)
        else:
            self.grid = Grid(self.size, win_value=self.config.win_value)
            self.score = 0
            self.over = False
            self.won = False
            self.keep_going = False
            self.add_start_tiles()

        self.actuate()

    def add_start_tiles(self) -> None:
        for _ in range(self.start_tiles):
            self.add_random_tile()

    def random_tile_value(self) -> int:
        return 4 if self.rng.random() < self.config.four_probability else 2

    def add_random_tile(self) -> Optional[Tile]:
        if not self.grid.cells_available():
            return None
        value = self.random_tile_value()
        tile = self.placer.place(self.grid, value)
        logger.debug("spawned %d at %s", tile.value, tile.position)
        return tile

    def actuate(self) -> None:
        if self.storage_manager.get_best_score() < self.score:
            self.storage_manager.set_best_score(self.score)

        # 只在失败时清档（胜利不清）
        if self.over:
            self.storage_manager.clear_game_state()
        else:
            self.storage_manager.set_game_state(self.serialize())

        self.actuator.actuate(self.grid, self.metadata())

    def metadata(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "over": self.over,
            "won": self.won,
            "best_score": self.storage_manager.get_best_score(),
            "terminated": self.is_game_terminated(),
        }

    def serialize(self) -> Dict[str, Any]:
        return {
            "grid": self.grid.serialize(),
            "score": self.score,
            "over": self.over,
            "won": self.won,
            "keepPlaying": self.keep_going,
        }

    def move(self, direction: int) -> Optional[MoveResult]:
        if self.is_game_terminated():
            return None  # 已结束则忽略

        result = self.grid.move(direction)

        self.score += result.score

        if result.moved:
            # 无效移动不改 won：棋盘没变，状态也不应变
            self.won = result.won
            logger.debug("move %s: +%d (score=%d)", ACTION_NAMES[direction], result.score, self.score)
            self.add_random_tile()

            if not self.grid.moves_available():
                self.over = True  # Game over!
                logger.debug("game over with score %d", self.score)

            self.actuate()

        return result
