from __future__ import annotations
import copy
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

BEST_SCORE_KEY = "bestScore"
GAME_STATE_KEY = "gameState"

Snapshot = Dict[str, Any]


class MemoryStorageManager:
    """
    内存存储：进程结束即丢失。无存档文件时的后备方案，也用于无界面运行和测试。
    """
    def __init__(self):
        self._data: Dict[str, Any] = {}

    def get_best_score(self) -> int:
        return int(self._data.get(BEST_SCORE_KEY, 0))

    def set_best_score(self, score: int) -> None:
        self._data[BEST_SCORE_KEY] = int(score)

    def get_game_state(self) -> Optional[Snapshot]:
        state = self._data.get(GAME_STATE_KEY)
        return copy.deepcopy(state) if state is not None else None

    def set_game_state(self, game_state: Snapshot) -> None:
        self._data[GAME_STATE_KEY] = copy.deepcopy(game_state)

    def clear_game_state(self) -> None:
        self._data.pop(GAME_STATE_KEY, None)


class JsonFileStorageManager(MemoryStorageManager):
    """
    JSON 文件存储：{"bestScore": int, "gameState": {...}}。
    写入失败只记录日志，不打断当前一步。
    """
    def __init__(self, path: str):
        super().__init__()
        self.path = os.path.expanduser(path)
        self._load()

    def _load(self) -> None:
        if not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:  # ValueError 包含 JSONDecodeError 与 UnicodeDecodeError
            logger.warning("Ignoring unreadable save file %s: %s", self.path, exc)
            return
        if not isinstance(data, dict):
            logger.warning("Ignoring save file %s: expected a JSON object", self.path)
            return
        self._data = data

    def _flush(self) -> None:
        # 先写临时文件再替换，写到一半失败时旧存档保持完整
        tmp_path = self.path + ".tmp"
        try:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            logger.warning("Could not write save file %s: %s", self.path, exc)

    def set_best_score(self, score: int) -> None:
        super().set_best_score(score)
        self._flush()

    def set_game_state(self, game_state: Snapshot) -> None:
        super().set_game_state(game_state)
        self._flush()

    def clear_game_state(self) -> None:
        super().clear_game_state()
        self._flush()
