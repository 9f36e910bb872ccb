"""A player or enemy base standing at one end of the stage."""

from __future__ import annotations

from fishfighters.entity import BattleEntity, EntityMap, Rect, State, Vec2


class BattleBase(BattleEntity):
    """A stationary base with health; it never attacks or moves on its own."""

    def __init__(self, health: float, texture_size: tuple[int, int]) -> None:
        super().__init__()
        self.max_health = float(health)
        self.current_health = self.max_health
        self.state = State.IDLE
        self.position = Vec2(0.0, 360.0)
        self.current_layer = 51

        self.hitbox = Rect(self.position, Vec2(200.0, 720.0))
        self.attack_range_zone = Rect(self.position, Vec2(0.0, 720.0))
        self.damage_zone = Rect(self.position, Vec2(0.0, 720.0))

        width, height = texture_size
        self.texture_size = (int(width), int(height))
        self.texture_rect = Rect(Vec2(0.0, 0.0), Vec2(float(width), float(height)))

    def update(self, delta_time: float, entity_list: EntityMap) -> None:
        """Keep the sprite and zones in step with the base's position."""
        self.update_position()

    def update_position(self) -> None:
        """Place the sprite above the base's layer and move the zones with it."""
        self.sprite_position = Vec2(self.position.x, self.position.y - self.current_layer)
        self.hitbox.position = self.position
        self.attack_range_zone.position = self.position
        self.damage_zone.position = self.position

    def update_sprite(self) -> None:
        """Bases have a single still frame, so there is nothing to animate."""
        return None