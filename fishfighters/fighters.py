"""Units and enemies that walk, attack and get knocked back on the battlefield."""

from __future__ import annotations

from abc import abstractmethod
from typing import Iterator, Sequence, Union

from fishfighters.base import BattleBase
from fishfighters.data import AttackType, EnemyData, UnitData
from fishfighters.entity import BattleEntity, EntityMap, Rect, State, Vec2
from fishfighters.tween import Tween, bounce_out, quadratic_out

__all__ = ["Fighter", "BattleEnemy", "BattleUnit", "BattleBase"]

FighterData = Union[UnitData, EnemyData]

_GROUND_Y = 720.0 * 2 / 3
_ZONE_HEIGHT = 720.0
_SPEED_SCALE = 10.0  # makes movement speeds from the data feel brisker
_KNOCKBACK_LIFT = 50.0
_FRAMES_PER_SECOND = 60.0


def _as_vec2(value: Vec2 | Sequence[float]) -> Vec2:
    if isinstance(value, Vec2):
        return value
    return Vec2(float(value[0]), float(value[1]))


def _opponents(entity_list: EntityMap) -> Iterator[BattleEntity]:
    for layer in sorted(entity_list):
        yield from entity_list[layer]


class Fighter(BattleEntity):
    """A moving fighter driven by an idle/walk/attack/knockback state machine.

    ``_FACING`` is +1 for fighters that advance towards increasing x and -1
    for those advancing towards decreasing x; knockback pushes the other way.
    """

    _FACING: int = 1
    _SPAWN_X: float = 0.0

    def __init__(self, data: FighterData, texture_size: tuple[int, int]) -> None:
        super().__init__()
        if data.frame_count < 1:
            raise ValueError("frame_count must be at least 1")
        if data.knockback_count < 1:
            raise ValueError("knockback_count must be at least 1")
        self.data = data

        width, height = (int(v) for v in texture_size)
        self.texture_size = (width, height)
        self._frame_width = width // data.frame_count
        self._half_width = self._frame_width // 2

        self.current_health = data.health
        self.health_left_before_next_knockback = (
            data.health - data.health / data.knockback_count
        )
        self.state = State.IDLE
        self.position = Vec2(self._SPAWN_X, _GROUND_Y)

        # Start with a full cooldown so the first attack comes at once.
        self.current_attack_cooldown = data.attack_frequency
        self.current_attack_swing_time = 0.0
        self.current_knockback_cooldown = 0.0

        self.sprite_origin = Vec2(float(self._half_width), float(height))
        self.current_frame_index = 0
        self._apply_frame()

        half = float(self._half_width)
        reach = data.attack_range + half
        zone_x = self.position.x + self._FACING * data.attack_range + half
        self.hitbox = Rect(self.position, Vec2(half, _ZONE_HEIGHT))
        self.attack_range_zone = Rect(Vec2(zone_x, self.position.y), Vec2(reach, _ZONE_HEIGHT))
        self.damage_zone = Rect(Vec2(zone_x, self.position.y), Vec2(reach, _ZONE_HEIGHT))

    @abstractmethod
    def _attack_zone_x(self) -> float:
        """Left edge of the attack and damage zones for the current position."""

    @abstractmethod
    def _sprite_x(self, x: float) -> float:
        """Sprite x coordinate for an entity standing at ``x``."""

    def _apply_frame(self) -> None:
        height = self.texture_size[1]
        self.texture_rect = Rect(
            Vec2(float(self._frame_width * self.current_frame_index), 0.0),
            Vec2(float(self._frame_width), float(height)),
        )

    def _idle(self, entity_list: EntityMap) -> None:
        self.velocity = Vec2(0.0, 0.0)
        if self.current_health < 0.0 or self.current_health <= self.health_left_before_next_knockback:
            self.state = State.KNOCKBACK
        else:
            if len(self.targets):
                self.is_entity_on_range = True
            else:
                self.is_entity_on_range = any(
                    self.attack_range_zone.intersects(other.hitbox)
                    for other in _opponents(entity_list)
                )
            if not self.is_entity_on_range:
                self.state = State.WALK
            if self.is_entity_on_range and self.current_attack_cooldown >= self.data.attack_frequency:
                self.state = State.ATTACK
        self.is_entity_on_range = False

    def _walk(self, delta_time: float) -> None:
        self.velocity = Vec2(self.data.movement_speed * _SPEED_SCALE * delta_time, 0.0)
        self.position = Vec2(self.position.x + self._FACING * self.velocity.x, self.position.y)
        if self.current_health < 0.0:
            self.state = State.KNOCKBACK
        else:
            self.next_state = State.IDLE

    def _attack(self, delta_time: float, entity_list: EntityMap) -> None:
        data = self.data
        if self.current_attack_swing_time <= data.foreswing_time + data.backswing_time:
            swung = self.current_attack_swing_time >= data.foreswing_time
            self.is_attack_ready = swung and not self.has_attacked
            self.current_attack_swing_time += delta_time
            self.next_state = State.ATTACK
        else:
            self.has_attacked = False
            self.is_attack_ready = False
            self.current_attack_swing_time = 0.0
            self.current_attack_cooldown = 0.0
            self.next_state = State.IDLE

        if self.is_attack_ready and not self.has_attacked:
            self.has_attacked = True
            for other in _opponents(entity_list):
                if self.damage_zone.intersects(other.hitbox) and other.state != State.KNOCKBACK:
                    self.targets.add(other)

            if not len(self.targets):
                self.next_state = State.IDLE
            else:
                damage = data.attack_power * self.magnification.y
                if data.attack_type == AttackType.SINGLE:
                    self.targets.first().current_health -= damage
                else:
                    for target in self.targets:
                        target.current_health -= damage

        self.targets.clear()

    def _start_knockback(self) -> None:
        start_x = self.position.x
        end_x = start_x - self._FACING * self.knockback_distance_px
        self.position = Vec2(end_x, self.position.y)
        frames = _FRAMES_PER_SECOND * self.knockback_duration
        self.tween_x = Tween(start_x).to(end_x).during(frames).via(quadratic_out)
        ground = self.position.y - self.current_layer
        self.tween_y = (
            Tween(ground)
            .to(ground - _KNOCKBACK_LIFT).during(frames / 2).via(quadratic_out)
            .to(ground).during(frames / 2).via(bounce_out)
        )
        self.is_attack_ready = False
        self.has_attacked = False
        self.current_attack_swing_time = 0.0
        self.entered_knockback = False

    def _knockback(self, delta_time: float) -> None:
        if self.entered_knockback:
            self._start_knockback()

        self.current_knockback_cooldown += delta_time
        if self.current_knockback_cooldown < self.knockback_duration:
            self.next_state = State.KNOCKBACK
            return

        if self.current_health < 0.0:
            self.state = State.DEAD
            return

        self.next_state = State.IDLE
        self.current_knockback_cooldown = 0.0
        self.entered_knockback = True
        if not self.is_on_shockwave:
            self.health_left_before_next_knockback -= self.data.health / self.data.knockback_count
        self.is_on_shockwave = False

    def update(self, delta_time: float, entity_list: EntityMap) -> None:
        """Run one frame of the state machine against the opposing entities."""
        self.state = self.next_state

        if self.state == State.IDLE:
            self._idle(entity_list)
        if self.state == State.WALK:
            self._walk(delta_time)
        if self.state == State.ATTACK:
            self._attack(delta_time, entity_list)
        if self.state == State.KNOCKBACK:
            self._knockback(delta_time)
        if self.state == State.DEAD:
            self.is_dead = True
            return

        self.update_position()
        self.update_sprite()

        self.current_attack_cooldown += delta_time
        self.current_frame_cooldown += delta_time

    def update_position(self) -> None:
        """Move the sprite (along the knockback tweens if knocked back) and the zones."""
        if self.state == State.KNOCKBACK:
            if self.tween_x.progress() < 1.0 and self.tween_y.progress() < 1.0:
                x = self.tween_x.step(1)
                y = self.tween_y.step(1)
                self.sprite_position = Vec2(self._sprite_x(x), y)
        else:
            self.sprite_position = Vec2(
                self._sprite_x(self.position.x), self.position.y - self.current_layer
            )

        zone = Vec2(self._attack_zone_x(), self.position.y)
        self.hitbox.position = self.position
        self.attack_range_zone.position = zone
        self.damage_zone.position = zone

    def update_sprite(self) -> None:
        """Advance the animation frame once its cooldown has elapsed."""
        if self.current_frame_cooldown >= self.time_until_next_frame or self.state == State.KNOCKBACK:
            self.current_frame_cooldown = 0.0
        else:
            return

        knockback_frame = self.data.knockback_frame_index
        index = self.current_frame_index
        if self.state == State.IDLE:
            index = 0
        elif self.state == State.WALK:
            index = index + 1 if index < knockback_frame - 1 else 0
        elif self.state == State.ATTACK:
            if index <= knockback_frame:
                index = knockback_frame
            width = self.texture_size[0]
            if index * self._frame_width < width - self._frame_width:
                index += 1
            else:
                index = 0
        elif self.state == State.KNOCKBACK:
            index = knockback_frame
        else:
            index = 0

        self.current_frame_index = index
        self._apply_frame()


class BattleEnemy(Fighter):
    """An enemy spawned at the left edge that advances to the right."""

    _FACING = 1
    _SPAWN_X = 0.0

    def __init__(
        self,
        data: EnemyData,
        magnification: Vec2 | Sequence[float],
        texture_size: tuple[int, int],
    ) -> None:
        super().__init__(data, texture_size)
        self.magnification = _as_vec2(magnification)
        self.current_health = data.health * self.magnification.x

    def _attack_zone_x(self) -> float:
        return self.position.x

    def _sprite_x(self, x: float) -> float:
        return x + self._half_width


class BattleUnit(Fighter):
    """A player unit spawned near the right edge that advances to the left."""

    _FACING = -1
    _SPAWN_X = 1080.0

    def __init__(self, data: UnitData, texture_size: tuple[int, int]) -> None:
        super().__init__(data, texture_size)

    def _attack_zone_x(self) -> float:
        return self.position.x - self.data.attack_range

    def _sprite_x(self, x: float) -> float:
        return x