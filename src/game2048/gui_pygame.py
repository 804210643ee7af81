from __future__ import annotations
import pygame
from typing import Any, Callable, Dict, Optional, List
from game2048.game_core import ACTIONS, Grid
from game2048.game_manager import GameConfig, GameManager
from game2048.input_manager import InputManager, MOVE, RESTART, KEEP_PLAYING
from game2048.placement import Difficulty


# 颜色配置（简化版）
BG_COLOR = (250, 248, 239)
GRID_COLOR = (187, 173, 160)
EMPTY_COLOR = (205, 193, 180)
TILE_COLORS = {
    2: (238, 228, 218),
    4: (237, 224, 200),
    8: (242, 177, 121),
    16: (245, 149, 99),
    32: (246, 124, 95),
    64: (246, 94, 59),
    128: (237, 207, 114),
    256: (237, 204, 97),
    512: (237, 200, 80),
    1024: (237, 197, 63),
    2048: (237, 194, 46),
}
TILE_TEXT_COLOR_DARK = (119, 110, 101)
TILE_TEXT_COLOR_LIGHT = (249, 246, 242)

CELL_SIZE = 100
MARGIN = 15
HEADER_H = 90

Agent = Callable[[List[List[int]], List[int]], Optional[int]]


class PygameActuator:
    """
    渲染网关：actuate() 记录棋盘与状态并重绘；continue_game() 清除胜负遮罩。
    """
    def __init__(self, size: int, difficulty: str = ""):
        self.size = size
        self.difficulty = difficulty
        board_pixels = MARGIN + size * (CELL_SIZE + MARGIN)
        self.width = board_pixels
        self.height = HEADER_H + board_pixels

        self.screen = pygame.display.set_mode((self.width, self.height))
        # 字体
        self.font_big = pygame.font.SysFont("arial", 48, bold=True)
        self.font_mid = pygame.font.SysFont("arial", 28, bold=True)
        self.font_small = pygame.font.SysFont("arial", 20)

        self.cells: List[List[int]] = [[0] * size for _ in range(size)]
        self.metadata: Dict[str, Any] = {"score": 0, "best_score": 0, "over": False, "won": False, "terminated": False}
        self.show_message = False

    def actuate(self, grid: Grid, metadata: Dict[str, Any]) -> None:
        self.cells = grid.to_list()
        self.metadata = dict(metadata)
        self.show_message = metadata["terminated"]
        self.draw()

    def continue_game(self) -> None:
        self.show_message = False

    def _tile_font(self, val: int):
        # 自适应字号
        if val < 100:
            return self.font_big
        if val < 1000:
            return self.font_mid
        return self.font_small

    def draw(self) -> None:
        screen = self.screen
        screen.fill(BG_COLOR)

        # 顶部信息栏
        header = f"Score: {self.metadata['score']}   Best: {self.metadata['best_score']}"
        score_text = self.font_mid.render(header, True, TILE_TEXT_COLOR_DARK)
        hint = "Arrows: Move | R: Reset | K: Keep playing | Tab: Auto | Esc: Quit"
        hint_text = self.font_small.render(hint, True, TILE_TEXT_COLOR_DARK)
        screen.blit(score_text, (MARGIN, (HEADER_H - score_text.get_height()) // 2 - 10))
        screen.blit(hint_text, (MARGIN, HEADER_H - hint_text.get_height() - 8))
        if self.difficulty:
            diff_text = self.font_small.render(self.difficulty.upper(), True, TILE_TEXT_COLOR_DARK)
            screen.blit(diff_text, (self.width - diff_text.get_width() - MARGIN, 8))

        # 棋盘背景
        board_top = HEADER_H
        pygame.draw.rect(screen, GRID_COLOR, pygame.Rect(0, board_top, self.width, self.height - board_top))
        # 网格 + 方块
        for r in range(self.size):
            for c in range(self.size):
                x = MARGIN + c * (CELL_SIZE + MARGIN)
                y = board_top + MARGIN + r * (CELL_SIZE + MARGIN)
                val = self.cells[r][c]
                color = TILE_COLORS.get(val, EMPTY_COLOR if val == 0 else (60, 58, 50))
                pygame.draw.rect(screen, color, pygame.Rect(x, y, CELL_SIZE, CELL_SIZE), border_radius=6)
                if val:
                    text_color = TILE_TEXT_COLOR_DARK if val <= 4 else TILE_TEXT_COLOR_LIGHT
                    text = self._tile_font(val).render(str(val), True, text_color)
                    screen.blit(text, (x + (CELL_SIZE - text.get_width()) // 2, y + (CELL_SIZE - text.get_height()) // 2))

        # 胜负遮罩
        if self.show_message:
            overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
            overlay.fill((255, 255, 255, 180))
            screen.blit(overlay, (0, 0))
            message = "Game Over" if self.metadata["over"] else "You Win!"
            msg_text = self.font_big.render(message, True, (80, 70, 60))
            screen.blit(msg_text, (self.width // 2 - msg_text.get_width() // 2, self.height // 2 - msg_text.get_height() // 2))

        pygame.display.flip()


class KeyboardInputManager(InputManager):
    KEY_MAP = {
        pygame.K_UP: 0,
        pygame.K_RIGHT: 1,
        pygame.K_DOWN: 2,
        pygame.K_LEFT: 3,
        pygame.K_w: 0,
        pygame.K_d: 1,
        pygame.K_s: 2,
        pygame.K_a: 3,
    }

    def handle_event(self, event) -> bool:
        """把 pygame 事件翻译为游戏事件；返回 False 表示退出。"""
        if event.type == pygame.QUIT:
            return False
        if event.type != pygame.KEYDOWN:
            return True
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key == pygame.K_r:
            self.emit(RESTART)
        elif event.key == pygame.K_k:
            self.emit(KEEP_PLAYING)
        elif event.key in self.KEY_MAP:
            self.emit(MOVE, self.KEY_MAP[event.key])
        return True


def first_legal_action(state: List[List[int]], legal_actions: List[int]) -> Optional[int]:
    # 演示用的简单自动动作：上右下左中第一个合法
    for a in ACTIONS:
        if a in legal_actions:
            return a
    return None


def run_gui(config: Optional[GameConfig] = None, storage_manager=None, agent: Optional[Agent] = None):
    config = config if config is not None else GameConfig()
    difficulty = Difficulty(config.difficulty)
    pygame.init()
    pygame.display.set_caption(f"2048 - {difficulty.value}")
    clock = pygame.time.Clock()

    actuator = PygameActuator(config.size, difficulty=difficulty.value)
    input_manager = KeyboardInputManager()
    manager = GameManager(config, input_manager=input_manager, actuator=actuator, storage_manager=storage_manager)

    auto_mode = False
    if agent is None:
        agent = first_legal_action  # 没提供 agent 时，Tab 开关使用内置策略
    step_interval_ms = 120
    last_step_time = 0

    running = True
    while running:
        clock.tick(60)
        for event in pygame.event.get():
            # Tab: 自动模式开关
            if event.type == pygame.KEYDOWN and event.key == pygame.K_TAB:
                auto_mode = not auto_mode
                continue
            if not input_manager.handle_event(event):
                running = False
                break

        if auto_mode and not manager.is_game_terminated():
            now = pygame.time.get_ticks()
            if now - last_step_time >= step_interval_ms:
                legal = manager.grid.legal_actions()
                act = agent(manager.grid.to_list(), legal)
                if act is not None:
                    input_manager.emit(MOVE, act)
                last_step_time = now

        actuator.draw()

    pygame.quit()
    return manager.score
