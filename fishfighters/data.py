"""Static game data records for units, enemies and stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class AttackType(IntEnum):
    """Whether an attack hits only the closest target or everything in range."""

    SINGLE = 1
    AREA = 2


@dataclass
class _FighterData:
    uid: int = -1
    name: str = "Unknown"
    description: str = "???"
    health: float = 1.0
    attack_power: float = 1.0
    attack_range: float = 1.0
    attack_type: AttackType = AttackType.SINGLE
    attack_frequency: float = 1.0
    foreswing_time: float = 0.0  # time before the attack lands
    backswing_time: float = 0.0  # time after the attack, before going idle
    movement_speed: float = 1.0
    knockback_count: int = 1
    texture: str = ""
    frame_count: int = 1
    knockback_frame_index: int = 1


@dataclass
class UnitData(_FighterData):
    """Template for a player unit."""

    name: str = "Unknown Unit"


@dataclass
class EnemyData(_FighterData):
    """Template for an enemy."""

    name: str = "Unknown Enemy"


@dataclass
class EnemyStageData:
    """How one kind of enemy spawns within a stage, with its spawn bookkeeping."""

    uid: int = -1
    amount: int = 0  # -1 means infinite
    respawn_time: float = 0.0
    spawn_start: float = 0.0  # seconds
    layer: int = -1  # -1 means any
    base_health_threshold: float = 100.0  # percent of the enemy base's health
    magnification: tuple[float, float] = (1.0, 1.0)  # (health, attack) multipliers
    is_boss: bool = False
    bypass_enemy_limit: bool = False
    spawned_count: int = 0
    current_timer: float = 0.0
    has_started: bool = False


@dataclass
class StageData:
    """A level: limits, base health, textures and enemy spawns."""

    uid: int = -1
    name: str = "Unknown Stage"
    enemies_limit: int = 10
    units_limit: int = 10
    base_health: float = 100.0
    enemies: list[EnemyStageData] = field(default_factory=list)
    base_texture: str = ""
    background_texture: str = ""