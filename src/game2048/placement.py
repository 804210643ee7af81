# 新块放置：决定下一个生成的方块落在哪个空格

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional

from game2048.game_core import ACTIONS, Grid, Position, Tile

logger = logging.getLogger(__name__)

LOWEST_SCORE_SENTINEL = 1_000_000


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class NoAvailableCellError(RuntimeError):
    pass


@dataclass
class CellRating:
    cell: Position
    lowest_score: int
    highest_score: int
    directions: int
    random: float


def rate_cell(grid: Grid, cell: Position, value: int, rng: random.Random) -> CellRating:
    lowest_score = LOWEST_SCORE_SENTINEL
    highest_score = 0
    directions = 0
    for direction in ACTIONS:
        # 每个方向都在新的副本上模拟，不碰真实棋盘
        temp_grid = grid.clone()
        temp_grid.insert_tile(Tile(cell, value))
        result = temp_grid.move(direction)
        if result.moved:
            directions += 1
            lowest_score = min(lowest_score, result.score)
            highest_score = max(highest_score, result.score)

    return CellRating(
        cell=cell,
        lowest_score=lowest_score,
        highest_score=highest_score,
        directions=directions,
        random=rng.random(),  # 最后一级比较：随机挑位置
    )


def get_sorted_rating_list(grid: Grid, value: int, rng: random.Random) -> List[CellRating]:
    """
    假设在每个空格放入 value，为所有空格打分。

    对玩家最有利的排在前面：可走方向最多优先，其次最高得分，
    最后按随机数打破平局。
    """
    cells = grid.available_cells()
    if not cells:
        raise NoAvailableCellError("No empty cell to rate, the grid is full")

    ratings = [rate_cell(grid, cell, value, rng) for cell in cells]
    ratings.sort(key=lambda r: (r.directions, r.highest_score, r.random), reverse=True)
    return ratings


def _pick_easy(grid: Grid, value: int, rng: random.Random) -> Position:
    return get_sorted_rating_list(grid, value, rng)[0].cell


def _pick_medium(grid: Grid, value: int, rng: random.Random) -> Position:
    cell = grid.random_available_cell(rng)
    if cell is None:
        raise NoAvailableCellError("No empty cell available, the grid is full")
    return cell


def _pick_hard(grid: Grid, value: int, rng: random.Random) -> Position:
    return get_sorted_rating_list(grid, value, rng)[-1].cell


PLACEMENT_STRATEGIES: Dict[Difficulty, Callable[[Grid, int, random.Random], Position]] = {
    Difficulty.EASY: _pick_easy,
    Difficulty.MEDIUM: _pick_medium,
    Difficulty.HARD: _pick_hard,
}


class TilePlacer:
    def __init__(self, difficulty: Difficulty = Difficulty.HARD, rng: Optional[random.Random] = None):
        self.difficulty = Difficulty(difficulty)
        self.rng = rng if rng is not None else random.Random()
        self._strategy = PLACEMENT_STRATEGIES[self.difficulty]

    def choose_cell(self, grid: Grid, value: int) -> Position:
        cell = self._strategy(grid, value, self.rng)
        logger.debug("difficulty=%s value=%d -> cell %s", self.difficulty.value, value, cell)
        return cell

    def place(self, grid: Grid, value: int) -> Tile:
        tile = Tile(self.choose_cell(grid, value), value)
        grid.insert_tile(tile)
        return tile
