"""The currently loaded level: its bases, spawned fighters and enemy waves."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Callable, Optional, Sequence

from fishfighters.base import BattleBase
from fishfighters.data import EnemyData, UnitData
from fishfighters.entity import BattleEntity, State, Vec2
from fishfighters.fighters import BattleEnemy, BattleUnit
from fishfighters.loader import DataLoader

logger = logging.getLogger(__name__)

FISH_BASE_TEXTURE = "assets/images/textures/bases/fishBaseTEST.png"
FISH_BASE_HEALTH = 350.0
STAGE_WIDTH = 1280.0
BASE_CENTER_Y = 360.0
MAX_SPAWN_LAYER = 50

TextureSizer = Callable[[str], "tuple[int, int]"]
FighterMap = dict[int, list[BattleEntity]]


def _image_file_size(path: str) -> tuple[int, int]:
    """Pixel size of the image at ``path``, or (0, 0) when it cannot be loaded."""
    if not path or not Path(path).is_file():
        return (0, 0)
    import pygame

    try:
        width, height = pygame.image.load(path).get_size()
    except (pygame.error, OSError):
        return (0, 0)
    return (int(width), int(height))


class Stage:
    """Everything about the loaded level: bases, enemies, units and enemy spawns.

    Only one level is loaded at a time. Fighters are kept per layer, and
    ``texture_sizer`` maps a texture path to its pixel size (0, 0 if missing).
    """

    def __init__(
        self,
        texture_sizer: Optional[TextureSizer] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._texture_size = texture_sizer or _image_file_size
        self._rng = rng if rng is not None else random.Random()

        self.uid = -1
        self.stage_name = "Unknown Area ???"
        self.enemies_limit = 5
        self.units_limit = 5
        self.enemies_count = 0
        self.units_count = 0

        self.data_loader: Optional[DataLoader] = None
        self.enemy_stage_datas: list = []

        self.enemies: FighterMap = {}
        self.units: FighterMap = {}

        self.enemy_base: Optional[BattleBase] = None
        self.fish_base: Optional[BattleBase] = None
        self.base_texture = ""
        self.background_texture = ""

        self.elapsed_time = 0.0
        self.is_loaded = False

    def init(self, data_loader: DataLoader) -> None:
        """Attach the data source and start with nothing loaded."""
        self.data_loader = data_loader
        self.unload()

    def load(self, uid: int) -> None:
        """Load the stage with this UID, replacing any stage already loaded."""
        if self.data_loader is None:
            raise RuntimeError("the stage has no data loader; call init() first")
        if self.uid != -1:
            self.unload()

        stage_data = self.data_loader.get_stage_data(uid)
        self.uid = uid
        self.stage_name = stage_data.name
        self.enemies_limit = stage_data.enemies_limit
        self.units_limit = stage_data.units_limit
        self.enemies_count = 0
        self.units_count = 0

        self._spawn_bases(stage_data.base_health, stage_data.base_texture)
        self.enemy_stage_datas = list(stage_data.enemies)
        self.background_texture = stage_data.background_texture
        self.is_loaded = True

    def unload(self) -> None:
        """Drop every fighter, base and spawn of the current stage."""
        self.uid = -1
        self.enemies.clear()
        self.units.clear()
        self.enemy_stage_datas.clear()
        self.enemy_base = None
        self.fish_base = None
        self.is_loaded = False

    def _bases(self) -> tuple[BattleBase, BattleBase]:
        if self.enemy_base is None or self.fish_base is None:
            raise RuntimeError("no stage is loaded")
        return self.enemy_base, self.fish_base

    def update(self, delta_time: float) -> None:
        """Advance spawns, bases, enemies and units by one frame."""
        if not self.is_loaded:
            return
        self.elapsed_time += delta_time
        enemy_base, _ = self._bases()

        for spawn in self.enemy_stage_datas:
            threshold = enemy_base.max_health * (spawn.base_health_threshold / 100.0)
            if threshold < enemy_base.current_health:
                continue
            if self.elapsed_time >= spawn.spawn_start:
                spawn.has_started = True
            if not spawn.has_started:
                continue
            if spawn.amount != -1 and spawn.spawned_count >= spawn.amount:
                continue

            spawn.current_timer += delta_time
            if spawn.current_timer >= spawn.respawn_time:
                data = self.data_loader.get_enemy_data(spawn.uid)
                self.spawn_enemy(
                    data, spawn.magnification, spawn.layer, spawn.is_boss, spawn.is_boss
                )
                spawn.current_timer = 0.0
                spawn.spawned_count += 1

        self.update_bases(delta_time)
        self.update_enemies(delta_time)
        self.update_units(delta_time)

    def _update_side(
        self,
        side: FighterMap,
        target_base: BattleBase,
        opponents: FighterMap,
        delta_time: float,
        label: str,
    ) -> int:
        removed = 0
        for layer in sorted(side):
            survivors = []
            for fighter in side[layer]:
                if fighter.is_dead:
                    logger.info("%s dead", label)
                    removed += 1
                    continue
                if fighter.attack_range_zone.intersects(target_base.hitbox):
                    fighter.targets.add(target_base)
                fighter.update(delta_time, opponents)
                survivors.append(fighter)
            side[layer] = survivors
        return removed

    def update_enemies(self, delta_time: float) -> None:
        """Remove dead enemies and update the rest against the units."""
        if not self.enemies:
            return
        _, fish_base = self._bases()
        self.enemies_count -= self._update_side(
            self.enemies, fish_base, self.units, delta_time, "Enemy"
        )

    def update_units(self, delta_time: float) -> None:
        """Remove dead units and update the rest against the enemies."""
        if not self.units:
            return
        enemy_base, _ = self._bases()
        self.units_count -= self._update_side(
            self.units, enemy_base, self.enemies, delta_time, "Unit"
        )

    def update_bases(self, delta_time: float) -> None:
        """Update both bases."""
        enemy_base, fish_base = self._bases()
        enemy_base.update(delta_time, self.units)
        fish_base.update(delta_time, self.enemies)

    def draw_order(self) -> list[BattleEntity]:
        """Entities in drawing order: bases, then enemies, then units, highest layer first."""
        if self.enemy_base is None or self.fish_base is None:
            return []
        order: list[BattleEntity] = [self.enemy_base, self.fish_base]
        for side in (self.enemies, self.units):
            for layer in sorted(side, reverse=True):
                order.extend(side[layer])
        return order

    def _spawn_bases(self, health: float, texture: str) -> None:
        self.base_texture = texture
        enemy_size = self._texture_size(texture)
        self.enemy_base = BattleBase(health, enemy_size)
        self.enemy_base.position = Vec2(0.0, BASE_CENTER_Y - enemy_size[1] // 2)

        fish_size = self._texture_size(FISH_BASE_TEXTURE)
        self.fish_base = BattleBase(FISH_BASE_HEALTH, fish_size)
        self.fish_base.position = Vec2(
            STAGE_WIDTH - fish_size[0], BASE_CENTER_Y - fish_size[1] // 2
        )

    def spawn_enemy(
        self,
        enemy_data: EnemyData,
        magnification: Vec2 | Sequence[float],
        layer: int = -1,
        is_boss: bool = False,
        bypass_limit: bool = False,
    ) -> Optional[BattleEnemy]:
        """Spawn an enemy unless the limit is reached; return it, or None."""
        if self.enemies_count >= self.enemies_limit and not bypass_limit:
            return None

        enemy = BattleEnemy(enemy_data, magnification, self._texture_size(enemy_data.texture))
        enemy.current_layer = layer if layer > 0 else self.generate_random_spawn_layer()
        enemy.update_position()
        enemy.update_sprite()

        if is_boss:
            self.generate_boss_shockwave()

        self.enemies_count += 1
        self.enemies.setdefault(enemy.current_layer, []).append(enemy)
        return enemy

    def spawn_unit(self, unit_data: UnitData) -> Optional[BattleUnit]:
        """Spawn a unit on a random layer unless the limit is reached; return it, or None."""
        if self.units_count >= self.units_limit:
            return None

        unit = BattleUnit(unit_data, self._texture_size(unit_data.texture))
        unit.current_layer = self.generate_random_spawn_layer()
        unit.update_position()
        unit.update_sprite()

        self.units_count += 1
        self.units.setdefault(unit.current_layer, []).append(unit)
        return unit

    def remove_enemy(self, enemy: BattleEntity) -> None:
        """Drop the whole enemy layer the given enemy stands in."""
        self.enemies.pop(enemy.current_layer, None)

    def remove_unit(self, unit: BattleEntity) -> None:
        """Drop the whole unit layer the given unit stands in."""
        self.units.pop(unit.current_layer, None)

    def generate_random_spawn_layer(self) -> int:
        """A random layer from 0 to 50 inclusive."""
        return self._rng.randint(0, MAX_SPAWN_LAYER)

    def generate_boss_shockwave(self) -> None:
        """Knock back every unit that is not already knocked back or dead."""
        for units in self.units.values():
            for unit in units:
                if unit.state in (State.KNOCKBACK, State.DEAD):
                    continue
                unit.next_state = State.KNOCKBACK
                unit.entered_knockback = True
                unit.is_on_shockwave = True
                unit.current_knockback_cooldown = 0.0