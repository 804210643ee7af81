from __future__ import annotations
from collections import defaultdict
from typing import Callable, Dict, List

# 事件名
MOVE = "move"
RESTART = "restart"
KEEP_PLAYING = "keepPlaying"


class InputManager:
    """
    极简事件中心：on(event, callback) 订阅，emit(event, *args) 派发。
    具体输入设备（键盘等）继承本类，把设备事件翻译成 emit 调用。
    """
    def __init__(self):
        self.events: Dict[str, List[Callable]] = defaultdict(list)

    def on(self, event: str, callback: Callable) -> None:
        self.events[event].append(callback)

    def emit(self, event: str, *args) -> None:
        for callback in self.events.get(event, []):
            callback(*args)
