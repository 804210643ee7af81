import random

import pytest

from game2048.actuator import HeadlessActuator
from game2048.game_core import Grid, ACTIONS
from game2048.game_manager import GameConfig, GameManager
from game2048.input_manager import InputManager
from game2048.placement import Difficulty
from game2048.storage import MemoryStorageManager
from conftest import SequenceRandom, make_manager

UP, RIGHT, DOWN, LEFT = ACTIONS


def empty_with_row(row, size=4):
    cells = [[0] * size for _ in range(size)]
    cells[0] = list(row)
    return cells


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_new_game_has_start_tiles(difficulty):
    manager = make_manager(difficulty=difficulty)
    assert manager.grid.tile_count() == 2
    values = {v for row in manager.grid.to_list() for v in row if v}
    assert values <= {2, 4}
    assert manager.score == 0
    assert not manager.over and not manager.won and not manager.keep_going
    assert manager.actuator.actuate_calls == 1
    assert manager.storage_manager.get_game_state() == manager.serialize()


def test_start_tiles_configurable():
    manager = GameManager(GameConfig(size=3, start_tiles=5, seed=0))
    assert manager.grid.size == 3
    assert manager.grid.tile_count() == 5


def test_move_merges_and_spawns():
    manager = make_manager(empty_with_row([2, 2, 0, 0]))
    result = manager.move(LEFT)
    assert result.moved
    assert result.score == 4
    assert manager.score == 4
    assert manager.grid.cell_content((0, 0)) == 4
    assert manager.grid.tile_count() == 2


def test_successful_move_adds_exactly_one_tile():
    manager = make_manager(empty_with_row([2, 0, 0, 8]))
    manager.move(DOWN)
    assert manager.grid.tile_count() == 3
    assert manager.actuator.actuate_calls == 2
    assert manager.storage_manager.get_game_state() == manager.serialize()


def test_noop_move_changes_nothing():
    manager = make_manager(empty_with_row([2, 4, 8, 16]))
    manager.score = 12
    before = manager.grid.to_list()
    snapshot = manager.storage_manager.get_game_state()
    calls = manager.actuator.actuate_calls

    result = manager.move(UP)

    assert not result.moved
    assert manager.grid.to_list() == before
    assert manager.score == 12
    assert not manager.over and not manager.won
    assert manager.actuator.actuate_calls == calls
    assert manager.storage_manager.get_game_state() == snapshot


def test_move_to_immobile_board_sets_over():
    # 左移后只剩 (1,1) 为空，放入 2 后棋盘不可动
    manager = make_manager([[2, 4], [0, 8]], rng=SequenceRandom([0.5]))
    manager.score = 100
    manager.move(LEFT)

    assert manager.grid.to_list() == [[2, 4], [8, 2]]
    assert manager.over
    assert manager.is_game_terminated()
    assert manager.storage_manager.get_game_state() is None
    assert manager.storage_manager.get_best_score() == 100
    assert manager.actuator.last_metadata == {
        "score": 100,
        "over": True,
        "won": False,
        "best_score": 100,
        "terminated": True,
    }

    # 结束后的输入被忽略
    calls = manager.actuator.actuate_calls
    assert manager.move(UP) is None
    assert manager.actuator.actuate_calls == calls


def test_full_but_mobile_board_is_not_over():
    # 放入 4 后右列两个 4 可合并
    manager = make_manager([[2, 4], [0, 8]], rng=SequenceRandom([0.05]))
    manager.move(LEFT)
    assert manager.grid.to_list() == [[2, 4], [8, 4]]
    assert not manager.grid.cells_available()
    assert not manager.over


def test_spawn_skipped_on_full_board():
    manager = make_manager([[2, 4], [4, 2]])
    assert manager.add_random_tile() is None
    assert manager.grid.to_list() == [[2, 4], [4, 2]]


def test_win_then_keep_playing():
    manager = make_manager(empty_with_row([1024, 1024, 0, 0]))
    manager.move(LEFT)
    assert manager.won
    assert manager.is_game_terminated()
    assert manager.actuator.last_metadata["terminated"]
    # 胜利存档保留
    assert manager.storage_manager.get_game_state()["won"]

    before = manager.grid.to_list()
    assert manager.move(RIGHT) is None
    assert manager.grid.to_list() == before

    manager.keep_playing()
    assert manager.keep_going
    assert manager.won
    assert not manager.is_game_terminated()
    assert manager.actuator.continue_calls == 1
    assert manager.grid.to_list() == before

    result = manager.move(RIGHT)
    assert result.moved
    assert manager.won
    assert not manager.is_game_terminated()
    assert manager.storage_manager.get_game_state()["keepPlaying"]


def test_restart_resets_everything():
    manager = make_manager(empty_with_row([1024, 1024, 0, 0]))
    manager.move(LEFT)
    manager.keep_playing()
    manager.over = True

    manager.restart()

    assert manager.score == 0
    assert not manager.over and not manager.won and not manager.keep_going
    assert manager.grid.tile_count() == manager.start_tiles
    assert manager.actuator.continue_calls == 2
    assert manager.storage_manager.get_best_score() == 2048


class StickyStorage(MemoryStorageManager):
    """clear_game_state 不生效的存储，用来确认 restart 不会重新读档。"""
    def clear_game_state(self) -> None:
        pass


def test_restart_does_not_reload_snapshot():
    storage = StickyStorage()
    manager = make_manager(storage=storage)
    manager.score = 500
    manager.actuate()
    assert storage.get_game_state()["score"] == 500

    manager.restart()
    assert manager.score == 0


def test_setup_restores_snapshot_verbatim():
    storage = MemoryStorageManager()
    storage.set_game_state({
        "grid": {"size": 4, "cells": empty_with_row([2048, 8, 0, 2])},
        "score": 30000,
        "over": False,
        "won": True,
        "keepPlaying": True,
    })
    manager = GameManager(GameConfig(seed=0), storage_manager=storage, actuator=HeadlessActuator())
    assert manager.grid.to_list() == empty_with_row([2048, 8, 0, 2])
    assert manager.score == 30000
    assert manager.won and manager.keep_going
    assert not manager.is_game_terminated()
    assert storage.get_best_score() == 30000


def test_input_events_drive_the_game():
    input_manager = InputManager()
    manager = GameManager(
        GameConfig(seed=3),
        input_manager=input_manager,
        actuator=HeadlessActuator(),
    )
    manager.grid = Grid(4, empty_with_row([2, 2, 0, 0]))

    input_manager.emit("move", LEFT)
    assert manager.score == 4

    input_manager.emit("keepPlaying")
    assert manager.keep_going

    input_manager.emit("restart")
    assert manager.score == 0
    assert not manager.keep_going


def test_best_score_only_grows():
    manager = make_manager(empty_with_row([2, 2, 0, 0]))
    manager.storage_manager.set_best_score(50)
    manager.move(LEFT)
    assert manager.storage_manager.get_best_score() == 50
    assert manager.actuator.last_metadata["best_score"] == 50


def test_random_tile_value_distribution():
    manager = make_manager(rng=SequenceRandom([0.0, 0.09, 0.1, 0.99]))
    assert [manager.random_tile_value() for _ in range(4)] == [4, 4, 2, 2]


def test_same_seed_same_game():
    a = make_manager(seed=99)
    b = make_manager(seed=99)
    for direction in [LEFT, UP, RIGHT, DOWN, LEFT, LEFT]:
        a.move(direction)
        b.move(direction)
    assert a.grid.to_list() == b.grid.to_list()
    assert a.score == b.score


def test_hard_game_reaches_game_over():
    manager = make_manager(difficulty=Difficulty.HARD, seed=5)
    rng = random.Random(5)
    for _ in range(5000):
        if manager.is_game_terminated():
            break
        legal = manager.grid.legal_actions()
        manager.move(rng.choice(legal))
    assert manager.over
    assert not manager.grid.moves_available()
    assert manager.storage_manager.get_game_state() is None


def test_noop_move_does_not_flip_won():
    # 棋盘上已有达到胜利值的块，但 won 仍为 False（例如读档而来）
    manager = GameManager(
        GameConfig(seed=0, win_value=8),
        actuator=HeadlessActuator(),
        storage_manager=MemoryStorageManager(),
    )
    manager.grid = Grid(4, empty_with_row([8, 4, 2, 16]), win_value=8)
    manager.won = False
    calls = manager.actuator.actuate_calls

    result = manager.move(UP)

    assert not result.moved
    assert not manager.won
    assert not manager.is_game_terminated()
    assert manager.actuator.actuate_calls == calls
