"""Geometry helpers and the common state of every battle entity."""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Mapping, Sequence

from fishfighters.tween import Tween


@dataclass(frozen=True)
class Vec2:
    """A 2D vector."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)


@dataclass
class Rect:
    """An axis-aligned rectangle given by its corner position and size."""

    position: Vec2
    size: Vec2

    def _span(self) -> tuple[float, float, float, float]:
        x0, x1 = self.position.x, self.position.x + self.size.x
        y0, y1 = self.position.y, self.position.y + self.size.y
        return min(x0, x1), max(x0, x1), min(y0, y1), max(y0, y1)

    def find_intersection(self, other: Rect) -> Rect | None:
        """The overlapping rectangle, or None if the two do not overlap."""
        left_a, right_a, top_a, bottom_a = self._span()
        left_b, right_b, top_b, bottom_b = other._span()
        left, right = max(left_a, left_b), min(right_a, right_b)
        top, bottom = max(top_a, top_b), min(bottom_a, bottom_b)
        if left < right and top < bottom:
            return Rect(Vec2(left, top), Vec2(right - left, bottom - top))
        return None

    def intersects(self, other: Rect) -> bool:
        """Whether the two rectangles overlap."""
        return self.find_intersection(other) is not None


class State(IntEnum):
    """Battle state of an entity."""

    IDLE = 1
    WALK = 2
    ATTACK = 3
    KNOCKBACK = 4
    DEAD = 5


class TargetSet:
    """Targets ordered by attack range width, closest reach first.

    Entities whose attack range width equals one already held are not added,
    so a single-target attacker always hits the first, closest entry.
    """

    def __init__(self) -> None:
        self._keys: list[float] = []
        self._entities: list[BattleEntity] = []

    def add(self, entity: BattleEntity) -> bool:
        """Insert ``entity``; return False if an equivalent one is already held."""
        key = entity.attack_range_zone.size.x
        index = bisect.bisect_left(self._keys, key)
        if index < len(self._keys) and self._keys[index] == key:
            return False
        self._keys.insert(index, key)
        self._entities.insert(index, entity)
        return True

    def first(self) -> BattleEntity:
        """The entity with the smallest attack range width."""
        if not self._entities:
            raise IndexError("the target set is empty")
        return self._entities[0]

    def clear(self) -> None:
        """Remove every target."""
        self._keys.clear()
        self._entities.clear()

    def __iter__(self) -> Iterator[BattleEntity]:
        return iter(list(self._entities))

    def __len__(self) -> int:
        return len(self._entities)


EntityMap = Mapping[int, Sequence["BattleEntity"]]


class BattleEntity(ABC):
    """Shared state of units, enemies and bases on the battlefield."""

    def __init__(self) -> None:
        self.current_health = 1.0

        self.tween_x = Tween(0.0)  # knockback animation tweens
        self.tween_y = Tween(0.0)
        self.knockback_duration = 1.0  # seconds
        self.knockback_distance_px = 150.0
        self.current_knockback_cooldown = 0.0
        self.entered_knockback = True
        self.is_on_shockwave = False
        self.health_left_before_next_knockback = 0.0

        self.current_attack_cooldown = 0.0
        self.current_attack_swing_time = 0.0
        self.is_entity_on_range = False
        self.is_attack_ready = False
        self.has_attacked = False

        self.current_layer = 0
        self.is_dead = False

        self.state = State.IDLE
        self.next_state = State.IDLE

        self.magnification = Vec2(1.0, 1.0)  # x: health, y: attack
        self.position = Vec2(0.0, 0.0)
        self.velocity = Vec2(0.0, 0.0)

        self.hitbox = Rect(self.position, Vec2(1.0, 720.0))
        self.attack_range_zone = Rect(self.position, Vec2(1.0, 720.0))
        self.damage_zone = Rect(self.position, Vec2(1.0, 720.0))

        self.targets = TargetSet()

        self.texture_size: tuple[int, int] = (0, 0)
        self.sprite_position = Vec2(0.0, 0.0)
        self.sprite_origin = Vec2(0.0, 0.0)
        self.texture_rect = Rect(Vec2(0.0, 0.0), Vec2(0.0, 0.0))
        self.time_until_next_frame = 0.1  # seconds per animation frame
        self.current_frame_cooldown = 0.0
        self.current_frame_index = 0

    @abstractmethod
    def update(self, delta_time: float, entity_list: EntityMap) -> None:
        """Advance the entity by one frame against the opposing entities."""

    @abstractmethod
    def update_position(self) -> None:
        """Move the sprite and battle zones to follow the entity's position."""

    @abstractmethod
    def update_sprite(self) -> None:
        """Select the animation frame for the current state."""