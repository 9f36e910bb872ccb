import json
import os

import pygame
import pytest

from fishfighters.game import Game, main


def _fighter(uid):
    return {
        "UID": uid,
        "name": f"Fish {uid}",
        "description": "test fish",
        "health": 100.0,
        "attackPower": 10.0,
        "attackRange": 30.0,
        "attackType": 1,
        "attackFrequency": 1.0,
        "foreswing": 0.0,
        "backswing": 0.0,
        "movementSpeed": 1.0,
        "knockbackCount": 1,
        "texture": f"missing{uid}.png",
        "frameCount": 1,
        "knockbackFrameIndex": 1,
    }


def _write_data(root):
    folder = root / "game_data"
    folder.mkdir()
    (folder / "units.json").write_text(json.dumps({"a": _fighter(1), "b": _fighter(2)}))
    (folder / "enemies.json").write_text(json.dumps({"x": _fighter(1)}))
    stage = {
        "UID": 1,
        "stageName": "Kelp Forest",
        "enemiesLimit": 4,
        "unitsLimit": 4,
        "baseHealth": 300.0,
        "baseTexture": "base.png",
        "backgroundTexture": "bg.png",
        "numberOfDifferentEnemies": 1,
        "enemies": [
            {
                "UID": 1,
                "amount": 1,
                "respawnTime": 1.0,
                "spawnStart": 0.0,
                "layer": 2,
                "baseHealth": 100.0,
                "magnification": [1.0, 1.0],
                "isBoss": 0,
                "bypassEnemyLimit": 0,
            }
        ],
    }
    (folder / "stages.json").write_text(json.dumps({"1": stage}))


@pytest.fixture
def display_env(monkeypatch):
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_VIDEO_WINDOW_POS", "0,0")
    yield
    pygame.quit()


@pytest.fixture
def game(tmp_path, display_env):
    _write_data(tmp_path)
    return Game(tmp_path)


def _key(key):
    pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=key, mod=0, unicode="", scancode=0))


def test_game_loads_data(game):
    assert game.is_open
    assert game.data_loader.get_unit_data(2).name == "Fish 2"
    assert game.stage.uid == -1
    assert game.window_size == Game.LOGICAL_RESOLUTION


def test_game_without_data_uses_defaults(tmp_path, display_env):
    instance = Game(tmp_path)
    assert instance.is_open
    assert instance.data_loader.get_unit_data(1).name == "Unknown Unit"


def test_resize_window(game):
    game.resize_window((640, 360))
    assert game.window_size == (640, 360)
    assert pygame.display.get_surface().get_size() == (640, 360)


def test_numpad_resizes_window(game):
    _key(pygame.K_KP3)
    game.poll_events()
    assert game.window_size == (640, 360)


def test_center_window_records_position(game):
    x, y = game.center_window()
    assert game.window_position == (x, y)
    assert os.environ["SDL_VIDEO_WINDOW_POS"] == f"{x},{y}"


def test_escape_closes(game):
    _key(pygame.K_ESCAPE)
    game.poll_events()
    assert not game.is_open


def test_quit_event_closes(game):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    game.poll_events()
    assert not game.is_open


def test_spawn_keys_spawn_units(game):
    game.stage.load(1)
    _key(pygame.K_a)
    _key(pygame.K_e)
    game.poll_events()
    assert game.stage.units_count == 2
    names = sorted(u.data.name for units in game.stage.units.values() for u in units)
    assert names == ["Fish 1", "Fish 2"]


def test_other_keys_do_not_spawn(game):
    game.stage.load(1)
    _key(pygame.K_b)
    game.poll_events()
    assert game.stage.units_count == 0
    assert game.is_open


def test_run_game_loop_loads_first_stage_and_stops(game):
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    game.run_game_loop()
    assert game.stage.uid == 1
    assert game.stage.stage_name == "Kelp Forest"
    assert not game.is_open


def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit):
        main(["--no-such-option"])