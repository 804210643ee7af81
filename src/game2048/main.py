import argparse
import logging
import random
from typing import List, Optional

import numpy as np
from tqdm import trange

from game2048.api import Game2048Env
from game2048.game_manager import GameConfig
from game2048.placement import Difficulty
from game2048.storage import JsonFileStorageManager, MemoryStorageManager

DEFAULT_STATE_FILE = "~/.game2048_state.json"


def run_autoplay(
    games: int,
    size: int = 4,
    difficulty: Difficulty = Difficulty.HARD,
    seed: int = 42,
    max_steps: int = 10_000,
    progress: bool = True,
    echo: bool = False,
) -> List[int]:
    """
    无界面连续对局：每步在合法动作中随机选一个，返回每局最终分数。
    胜利后自动继续，直到无路可走或达到 max_steps。
    """
    env = Game2048Env(size=size, seed=seed, difficulty=difficulty, echo=echo)
    policy_rng = random.Random(seed)
    scores: List[int] = []
    max_tiles: List[int] = []

    for ep in trange(games, desc=f"Autoplay ({Difficulty(difficulty).value})", disable=not progress):
        env.reset(seed=seed + ep)
        steps = 0
        while steps < max_steps:
            if env.core.won and not env.core.keep_going and not env.core.over:
                env.keep_playing()
            if env.is_over():
                break
            legal = env.legal_actions()
            if not legal:
                break
            env.step(policy_rng.choice(legal))
            steps += 1
        scores.append(env.score)
        max_tiles.append(env.core.grid.max_tile())

    if scores and progress:
        arr = np.array(scores)
        print(f"[Info] games={len(scores)}, mean score={arr.mean():.1f}, max score={arr.max()}, "
              f"max tile={max(max_tiles)}")
    return scores


def build_storage(state_file: Optional[str]):
    if state_file is None:
        return MemoryStorageManager()
    return JsonFileStorageManager(state_file)


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="2048 with adversarial tile placement")
    parser.add_argument("--size", type=int, default=4)
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty], default=Difficulty.HARD.value)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--state-file", type=str, default=DEFAULT_STATE_FILE, help="存档文件（JSON）")
    parser.add_argument("--no-save", action="store_true", help="只在内存中存档")
    parser.add_argument("--autoplay", type=int, default=0, help="无界面对局数；>0 时不启动 GUI")
    parser.add_argument("--max-steps", type=int, default=10_000)
    parser.add_argument("--echo", action="store_true", help="无界面对局时每步打印棋盘")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    difficulty = Difficulty(args.difficulty)

    if args.autoplay > 0:
        print(f"[Info] 开始无界面对局（games={args.autoplay}, difficulty={difficulty.value}）...")
        run_autoplay(
            games=args.autoplay,
            size=args.size,
            difficulty=difficulty,
            seed=args.seed if args.seed is not None else 42,
            max_steps=args.max_steps,
            echo=args.echo,
        )
        return

    # 延迟导入：无界面模式不需要 pygame 显示
    from game2048.gui_pygame import run_gui

    storage = build_storage(None if args.no_save else args.state_file)
    config = GameConfig(size=args.size, difficulty=difficulty, seed=args.seed)
    score = run_gui(config=config, storage_manager=storage)
    print(f"[Info] Final score: {score}, best: {storage.get_best_score()}")


if __name__ == "__main__":
    main()
