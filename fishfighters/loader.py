"""Loading of unit, enemy and stage data from JSON files."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, TypeVar

from fishfighters.data import AttackType, EnemyData, EnemyStageData, StageData, UnitData

UNITS_PATH = "game_data/units.json"
ENEMIES_PATH = "game_data/enemies.json"
STAGES_PATH = "game_data/stages.json"

_F = TypeVar("_F", UnitData, EnemyData)


class DataLoadError(Exception):
    """Raised when game data cannot be read or is malformed."""


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as handle:
            return json.load(handle)
    except OSError as exc:
        raise DataLoadError(f"failed to load from: {path}") from exc
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"invalid JSON in {path}: {exc}") from exc


def _records(document: Any) -> Iterable[Any]:
    if isinstance(document, dict):
        return document.values()
    if isinstance(document, list):
        return document
    raise DataLoadError("expected a JSON object or array of records")


def _get(record: Any, key: str) -> Any:
    if not isinstance(record, dict):
        raise DataLoadError(f"expected an object holding {key!r}")
    try:
        return record[key]
    except KeyError:
        raise DataLoadError(f"missing key {key!r}") from None


def _number(record: Any, key: str) -> float | int:
    value = _get(record, key)
    if not isinstance(value, (int, float)):
        raise DataLoadError(f"{key!r} must be a number")
    return value


def _int(record: Any, key: str) -> int:
    return int(_number(record, key))


def _float(record: Any, key: str) -> float:
    return float(_number(record, key))


def _str(record: Any, key: str) -> str:
    value = _get(record, key)
    if not isinstance(value, str):
        raise DataLoadError(f"{key!r} must be a string")
    return value


def _fighter(cls: type[_F], record: Any) -> _F:
    try:
        attack_type = AttackType(_int(record, "attackType"))
    except ValueError as exc:
        raise DataLoadError(f"unknown attack type: {exc}") from exc
    return cls(
        uid=_int(record, "UID"),
        name=_str(record, "name"),
        description=_str(record, "description"),
        health=_float(record, "health"),
        attack_power=_float(record, "attackPower"),
        attack_range=_float(record, "attackRange"),
        attack_type=attack_type,
        attack_frequency=_float(record, "attackFrequency"),
        foreswing_time=_float(record, "foreswing"),
        backswing_time=_float(record, "backswing"),
        movement_speed=_float(record, "movementSpeed"),
        knockback_count=_int(record, "knockbackCount"),
        texture=_str(record, "texture"),
        frame_count=_int(record, "frameCount"),
        knockback_frame_index=_int(record, "knockbackFrameIndex"),
    )


def _magnification(record: Any) -> tuple[float, float]:
    value = _get(record, "magnification")
    try:
        return float(value[0]), float(value[1])
    except (IndexError, KeyError, TypeError, ValueError) as exc:
        raise DataLoadError("'magnification' must hold two numbers") from exc


def _enemy_spawn(record: Any) -> EnemyStageData:
    respawn_time = _float(record, "respawnTime")
    return EnemyStageData(
        uid=_int(record, "UID"),
        amount=_int(record, "amount"),
        respawn_time=respawn_time,
        spawn_start=_float(record, "spawnStart"),
        layer=_int(record, "layer"),
        base_health_threshold=_float(record, "baseHealth"),
        magnification=_magnification(record),
        is_boss=bool(_int(record, "isBoss")),
        bypass_enemy_limit=bool(_int(record, "bypassEnemyLimit")),
        current_timer=respawn_time,
    )


def _stage(record: Any) -> StageData:
    _int(record, "numberOfDifferentEnemies")
    enemies = _get(record, "enemies")
    if not isinstance(enemies, list):
        raise DataLoadError("'enemies' must be an array")
    return StageData(
        uid=_int(record, "UID"),
        name=_str(record, "stageName"),
        enemies_limit=_int(record, "enemiesLimit"),
        units_limit=_int(record, "unitsLimit"),
        base_health=_float(record, "baseHealth"),
        base_texture=_str(record, "baseTexture"),
        background_texture=_str(record, "backgroundTexture"),
        enemies=[_enemy_spawn(entry) for entry in enemies],
    )


class DataLoader:
    """Holds every unit, enemy and stage record, looked up by UID."""

    def __init__(self, root: str | Path = ".") -> None:
        self._root = Path(root)
        self._units: dict[int, UnitData] = {}
        self._enemies: dict[int, EnemyData] = {}
        self._stages: dict[int, StageData] = {}
        self._units_loaded = False
        self._enemies_loaded = False
        self._stages_loaded = False

    def _resolve(self, path: str | Path) -> Path:
        return self._root / path

    def load_all(self) -> None:
        """Load units, enemies and stages from their default paths under the root."""
        self.load_units(UNITS_PATH)
        self.load_enemies(ENEMIES_PATH)
        self.load_stages(STAGES_PATH)

    def load_units(self, path: str | Path) -> None:
        """Load unit records; raises DataLoadError if already loaded or unreadable."""
        if self._units_loaded:
            raise DataLoadError("units data already loaded")
        document = _read_json(self._resolve(path))
        loaded = [_fighter(UnitData, record) for record in _records(document)]
        self._units.update((data.uid, data) for data in loaded)
        self._units_loaded = True

    def load_enemies(self, path: str | Path) -> None:
        """Load enemy records; raises DataLoadError if already loaded or unreadable."""
        if self._enemies_loaded:
            raise DataLoadError("enemies data already loaded")
        document = _read_json(self._resolve(path))
        loaded = [_fighter(EnemyData, record) for record in _records(document)]
        self._enemies.update((data.uid, data) for data in loaded)
        self._enemies_loaded = True

    def load_stages(self, path: str | Path) -> None:
        """Load stage records; raises DataLoadError if already loaded or unreadable."""
        if self._stages_loaded:
            raise DataLoadError("stages data already loaded")
        document = _read_json(self._resolve(path))
        loaded = [_stage(record) for record in _records(document)]
        self._stages.update((data.uid, data) for data in loaded)
        self._stages_loaded = True

    def get_unit_data(self, uid: int) -> UnitData:
        """The unit with this UID, or a default unit if there is none."""
        found = self._units.get(uid)
        return found if found is not None else UnitData()

    def get_enemy_data(self, uid: int) -> EnemyData:
        """The enemy with this UID, or a default enemy if there is none."""
        found = self._enemies.get(uid)
        return found if found is not None else EnemyData()

    def get_stage_data(self, uid: int) -> StageData:
        """The stage with this UID, or a default stage if there is none."""
        found = self._stages.get(uid)
        return found if found is not None else StageData()