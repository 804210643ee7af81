from __future__ import annotations
from typing import Any, Dict, List, Optional

from game2048.game_core import Grid


class HeadlessActuator:
    """
    无界面渲染：记录最近一次 actuate 的棋盘和状态，可选打印到终端。
    """
    def __init__(self, echo: bool = False):
        self.echo = echo
        self.last_board: Optional[List[List[int]]] = None
        self.last_metadata: Optional[Dict[str, Any]] = None
        self.actuate_calls = 0
        self.continue_calls = 0

    def actuate(self, grid: Grid, metadata: Dict[str, Any]) -> None:
        self.last_board = grid.to_list()
        self.last_metadata = dict(metadata)
        self.actuate_calls += 1
        if self.echo:
            print(grid)
            print(f"Score: {metadata['score']}  Best: {metadata['best_score']}")
            if metadata["terminated"]:
                print("You win!" if metadata["won"] and not metadata["over"] else "Game over!")

    def continue_game(self) -> None:
        self.continue_calls += 1
