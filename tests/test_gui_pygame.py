import os

import pytest

pygame = pytest.importorskip("pygame")

from game2048.game_core import Grid
from game2048.game_manager import GameConfig
from game2048.gui_pygame import KeyboardInputManager, PygameActuator, first_legal_action, run_gui
from game2048.storage import MemoryStorageManager


@pytest.fixture
def dummy_display(monkeypatch):
    monkeypatch.setitem(os.environ, "SDL_VIDEODRIVER", "dummy")
    pygame.init()
    yield
    pygame.quit()


def test_keys_emit_game_events():
    received = []
    input_manager = KeyboardInputManager()
    input_manager.on("move", lambda d: received.append(("move", d)))
    input_manager.on("restart", lambda: received.append(("restart",)))
    input_manager.on("keepPlaying", lambda: received.append(("keepPlaying",)))

    for key in (pygame.K_UP, pygame.K_d, pygame.K_DOWN, pygame.K_LEFT, pygame.K_r, pygame.K_k, pygame.K_z):
        assert input_manager.handle_event(pygame.event.Event(pygame.KEYDOWN, key=key))

    assert received == [
        ("move", 0),
        ("move", 1),
        ("move", 2),
        ("move", 3),
        ("restart",),
        ("keepPlaying",),
    ]


def test_quit_and_escape_stop_the_loop():
    input_manager = KeyboardInputManager()
    assert not input_manager.handle_event(pygame.event.Event(pygame.QUIT))
    assert not input_manager.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))


def test_first_legal_action():
    assert first_legal_action([[0]], [2, 3]) == 2
    assert first_legal_action([[0]], []) is None


def test_actuator_overlay(dummy_display):
    actuator = PygameActuator(4, difficulty="hard")
    grid = Grid(4, [[2048, 0, 0, 0], [0] * 4, [0] * 4, [0] * 4])
    actuator.actuate(grid, {"score": 2048, "over": False, "won": True, "best_score": 2048, "terminated": True})
    assert actuator.show_message
    assert actuator.cells[0][0] == 2048

    actuator.continue_game()
    assert not actuator.show_message
    actuator.draw()


def test_run_gui_accepts_plain_string_difficulty(dummy_display, monkeypatch):
    monkeypatch.setattr(pygame.event, "get", lambda: [pygame.event.Event(pygame.QUIT)])
    score = run_gui(GameConfig(difficulty="medium", seed=1), storage_manager=MemoryStorageManager())
    assert score == 0
