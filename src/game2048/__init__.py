import importlib
import pkgutil
from typing import Dict, List

__version__ = "0.2.0"

# 子模块按需加载，避免无界面使用时导入 pygame
_SUBMODULES = [m.name for m in pkgutil.iter_modules(__path__) if not m.name.startswith("_")]  # type: ignore[name-defined]

_EXPORTS: Dict[str, str] = {
    "Grid": "game_core",
    "Tile": "game_core",
    "MoveResult": "game_core",
    "Difficulty": "placement",
    "TilePlacer": "placement",
    "GameConfig": "game_manager",
    "GameManager": "game_manager",
    "Game2048Env": "api",
    "MemoryStorageManager": "storage",
    "JsonFileStorageManager": "storage",
}

__all__ = sorted(_EXPORTS) + _SUBMODULES


def __getattr__(name: str):
    if name in _EXPORTS:
        module = importlib.import_module(f"{__name__}.{_EXPORTS[name]}")
        return getattr(module, name)
    if name in _SUBMODULES:
        return importlib.import_module(f"{__name__}.{name}")
    raise AttributeError(f"{__name__} has no attribute {name!r}")


def __dir__() -> List[str]:
    return sorted(list(globals().keys()) + __all__)
