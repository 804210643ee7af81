from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple, Optional, Dict, Sequence
import random

import numpy as np


# 行为定义：0=上, 1=右, 2=下, 3=左
ACTIONS: Tuple[int, int, int, int] = (0, 1, 2, 3)
ACTION_NAMES: Dict[int, str] = {0: "UP", 1: "RIGHT", 2: "DOWN", 3: "LEFT"}

WIN_VALUE = 2048

Position = Tuple[int, int]  # (row, col)


class InvalidDirectionError(ValueError):
    pass


@dataclass(frozen=True)
class Tile:
    position: Position
    value: int


@dataclass(frozen=True)
class MoveResult:
    moved: bool
    score: int
    won: bool


class Grid:
    """
    N×N 棋盘，0 表示空格。
    - Grid(size) 创建空棋盘
    - Grid(size, cells) 从已有布局复制（永远不与传入的布局共享内存）
    """
    def __init__(self, size: int, cells: Optional[Sequence[Sequence[int]]] = None, win_value: int = WIN_VALUE):
        self.size = size
        self.win_value = win_value
        if cells is None:
            self.cells = np.zeros((size, size), dtype=np.int64)
        else:
            self.cells = np.array(cells, dtype=np.int64).reshape(size, size)

    def clone(self) -> "Grid":
        return Grid(self.size, self.cells, win_value=self.win_value)

    # ---- 空格查询 ----
    def available_cells(self) -> List[Position]:
        return [(int(r), int(c)) for r, c in np.argwhere(self.cells == 0)]

    def cells_available(self) -> bool:
        return bool(np.any(self.cells == 0))

    def random_available_cell(self, rng: random.Random) -> Optional[Position]:
        cells = self.available_cells()
        if not cells:
            return None
        return rng.choice(cells)

    def within_bounds(self, position: Position) -> bool:
        r, c = position
        return 0 <= r < self.size and 0 <= c < self.size

    def cell_content(self, position: Position) -> int:
        if not self.within_bounds(position):
            return 0
        return int(self.cells[position])

    def insert_tile(self, tile: Tile) -> None:
        if not self.within_bounds(tile.position):
            raise ValueError(f"Tile position {tile.position} is outside a {self.size}x{self.size} grid")
        if self.cells[tile.position] != 0:
            raise ValueError(f"Cell {tile.position} is already occupied")
        self.cells[tile.position] = tile.value

    def tile_count(self) -> int:
        return int(np.count_nonzero(self.cells))

    def max_tile(self) -> int:
        return int(self.cells.max())

    def has_won(self) -> bool:
        return self.max_tile() >= self.win_value

    # ---- 移动 ----
    def _lines(self, direction: int) -> List[np.ndarray]:
        # 每条线都是朝移动方向排列的视图，写回视图即写回棋盘
        n = self.size
        if direction == 0:  # up
            return [self.cells[:, c] for c in range(n)]
        if direction == 1:  # right
            return [self.cells[r, ::-1] for r in range(n)]
        if direction == 2:  # down
            return [self.cells[::-1, c] for c in range(n)]
        if direction == 3:  # left
            return [self.cells[r, :] for r in range(n)]
        raise InvalidDirectionError(f"Invalid direction: {direction!r}")

    def _compress_and_merge(self, line: np.ndarray) -> Tuple[np.ndarray, int]:
        non_zero = line[line != 0]
        merged: List[int] = []
        gained = 0
        i = 0
        while i < len(non_zero):
            if i + 1 < len(non_zero) and non_zero[i] == non_zero[i + 1]:
                new_val = int(non_zero[i]) * 2
                merged.append(new_val)
                gained += new_val
                i += 2
            else:
                merged.append(int(non_zero[i]))
                i += 1
        merged += [0] * (self.size - len(merged))
        return np.array(merged, dtype=np.int64), gained

    def move(self, direction: int) -> MoveResult:
        """在本棋盘上执行一次滑动合并（会修改本棋盘）。模拟请先 clone()。"""
        lines = self._lines(direction)
        original = self.cells.copy()
        score = 0
        for line in lines:
            new_line, gained = self._compress_and_merge(line)
            line[:] = new_line
            score += gained
        moved = not np.array_equal(original, self.cells)
        return MoveResult(moved=moved, score=score, won=self.has_won())

    def tile_matches_available(self) -> bool:
        # 任一相邻可合并
        horizontal = np.any(self.cells[:, :-1] == self.cells[:, 1:])
        vertical = np.any(self.cells[:-1, :] == self.cells[1:, :])
        return bool(horizontal or vertical)

    def moves_available(self) -> bool:
        return self.cells_available() or self.tile_matches_available()

    def legal_actions(self) -> List[int]:
        # 返回会产生变化的动作集合（在副本上模拟）
        return [a for a in ACTIONS if self.clone().move(a).moved]

    def to_list(self) -> List[List[int]]:
        return self.cells.tolist()

    def serialize(self) -> Dict[str, object]:
        return {"size": self.size, "cells": self.to_list()}

    @classmethod
    def from_serialized(cls, state: Dict[str, object], win_value: int = WIN_VALUE) -> "Grid":
        return cls(int(state["size"]), state["cells"], win_value=win_value)

    def __str__(self) -> str:
        line = "-" * (self.size * 7 + 1)
        rows = [line]
        for r in range(self.size):
            row = "|"
            for c in range(self.size):
                v = int(self.cells[r, c])
                row += f"{v:^6d}|" if v else "      |"
            rows.append(row)
            rows.append(line)
        return "\n".join(rows)
