# fishfighters

A small real-time lane battle game built on pygame. Your fish base stands on
the right side of the screen and the enemy base on the left. Enemies march in
waves that a stage file defines. You spawn fish units, which walk toward the
enemy base and fight whatever gets in their way. Units and enemies attack with
a wind-up (foreswing) and a recovery (backswing). They are knocked back each
time they lose another share of their health, and a boss arriving sends a
shockwave that knocks every fish back.

## Installing

```
pip install .
```

This also installs pygame.

## Playing

```
fishfighters [--data-dir DIR]
```

`--data-dir` names the directory that holds `game_data/` and `assets/`. It
defaults to the current directory. The game reads `game_data/units.json`,
`game_data/enemies.json` and `game_data/stages.json` from there and loads
stage 1. If the data cannot be read, the error is logged and the game runs
with default records. Texture paths in the data are resolved against the same
directory. A texture that is missing is simply not drawn.

The window opens at 1280 × 720 and runs at 60 frames per second. The picture
is scaled to whatever size the window has.

Keys:

| Key        | Action                       |
|------------|------------------------------|
| `A`        | spawn fish unit 1            |
| `E`        | spawn fish unit 2            |
| Numpad `1` | resize window to 1920 × 1080 |
| Numpad `2` | resize window to 1280 × 720  |
| Numpad `3` | resize window to 640 × 360   |
| `Esc`      | quit                         |

## Game data

Each JSON file is either an object whose values are records or an array of
records. A missing key, a value of the wrong type or an unknown attack type
raises `fishfighters.loader.DataLoadError`.

A unit or enemy record holds these keys:

- `UID`, `name`, `description`, `health`
- `attackPower`, `attackRange`, `attackType`, `attackFrequency`
- `foreswing`, `backswing`, `movementSpeed`, `knockbackCount`
- `texture`, `frameCount`, `knockbackFrameIndex`

`attackType` is `1` (`AttackType.SINGLE`) to hit only the closest target, and
`2` (`AttackType.AREA`) to hit everything in range.

A stage record holds these keys:

- `UID`, `stageName`, `enemiesLimit`, `unitsLimit`, `baseHealth`
- `baseTexture`, `backgroundTexture`
- `numberOfDifferentEnemies`
- a list of `enemies`

Each spawn entry in the `enemies` list holds these keys:

- `UID`
- `amount`: `-1` for endless.
- `respawnTime`
- `spawnStart`: in seconds.
- `layer`: `-1` for a random layer from 0 to 50.
- `baseHealth`: the entry becomes active once the enemy base's health is at or below this percentage.
- `magnification`: `[hp, attack]` multipliers.
- `isBoss`
- `bypassEnemyLimit`

## Using the pieces

The simulation runs without a window. `DataLoader` takes the directory that
contains `game_data/`:

```python
from fishfighters.loader import DataLoader
from fishfighters.stage import Stage

loader = DataLoader(".")
loader.load_all()

stage = Stage()
stage.init(loader)
stage.load(1)
stage.spawn_unit(loader.get_unit_data(1))
for _ in range(60):
    stage.update(1 / 60)
```

The loader methods behave as follows:

- `load_units`, `load_enemies` and `load_stages` take a path relative to the loader's root.
- Each of them raises `DataLoadError` if it is called a second time.
- `get_unit_data`, `get_enemy_data` and `get_stage_data` return a default record for an unknown UID.

`Stage` takes two optional arguments:

- `texture_sizer` maps a texture path to its pixel size. By default the image is read with pygame, and a missing file counts as `(0, 0)`.
- `rng` is a `random.Random` used for spawn layers.

`Stage.draw_order()` lists the entities in the order the game draws them.

`fishfighters.tween.Tween` provides the frame-stepped easing used by the
knockback animation. A tween is built by chaining calls:
`Tween(0).to(10).during(60).via(quadratic_out)`. It is then advanced with
`step(frames)`, and `progress()` and `value()` report where it stands. The
module offers the `linear`, `quadratic_out` and `bounce_out` easings.

## What it does not do

- Destroying a base does not end the stage. No victory or defeat is reported.
- Bases only take damage; they never attack.
- There is no menu, no stage selection, no sound and no saved progress.
- The game always loads stage 1.

## Tests

```
pip install .[test]
pytest
```