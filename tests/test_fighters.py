import pytest

from fishfighters.base import BattleBase
from fishfighters.data import AttackType, EnemyData, UnitData
from fishfighters.entity import State, Vec2
from fishfighters.fighters import BattleEnemy, BattleUnit

TEXTURE = (400, 100)


def unit_data(**overrides):
    values = dict(
        health=100.0,
        attack_power=10.0,
        attack_range=50.0,
        attack_frequency=1.0,
        foreswing_time=0.0,
        backswing_time=0.5,
        movement_speed=2.0,
        knockback_count=2,
        frame_count=4,
        knockback_frame_index=2,
    )
    values.update(overrides)
    return UnitData(**values)


def enemy_data(**overrides):
    values = dict(
        health=100.0,
        attack_power=10.0,
        attack_range=50.0,
        attack_frequency=1.0,
        foreswing_time=0.0,
        backswing_time=0.5,
        movement_speed=2.0,
        knockback_count=2,
        frame_count=4,
        knockback_frame_index=2,
    )
    values.update(overrides)
    return EnemyData(**values)


def place(entity, x):
    entity.position = Vec2(x, entity.position.y)
    entity.update_position()
    return entity


def test_enemy_init_applies_health_magnification():
    data = enemy_data()
    enemy = BattleEnemy(data, (2.0, 3.0), TEXTURE)
    assert enemy.current_health == data.health * 2.0
    assert enemy.magnification == Vec2(2.0, 3.0)
    assert enemy.current_attack_cooldown == data.attack_frequency
    assert enemy.position.x == 0.0
    assert enemy.state == State.IDLE


def test_zone_sizes_follow_frame_width():
    data = unit_data()
    unit = BattleUnit(data, TEXTURE)
    half = TEXTURE[0] // data.frame_count // 2
    assert unit.hitbox.size.x == half
    assert unit.attack_range_zone.size.x == data.attack_range + half
    assert unit.damage_zone.size == unit.attack_range_zone.size
    assert unit.texture_rect.size == Vec2(TEXTURE[0] / data.frame_count, TEXTURE[1])


def test_unit_spawns_on_right_and_ignores_magnification():
    data = unit_data()
    unit = BattleUnit(data, TEXTURE)
    assert unit.position.x == 1080.0
    assert unit.current_health == data.health
    assert unit.position.y == pytest.approx(720.0 * 2 / 3)


def test_invalid_frame_count_rejected():
    with pytest.raises(ValueError):
        BattleUnit(unit_data(frame_count=0), TEXTURE)


def test_invalid_knockback_count_rejected():
    with pytest.raises(ValueError):
        BattleEnemy(enemy_data(knockback_count=0), (1.0, 1.0), TEXTURE)


def test_unit_walks_left_and_enemy_walks_right():
    unit = BattleUnit(unit_data(), TEXTURE)
    enemy = BattleEnemy(enemy_data(), (1.0, 1.0), TEXTURE)
    unit.update(0.5, {})
    enemy.update(0.5, {})
    assert unit.state == State.WALK
    assert unit.position.x == pytest.approx(1070.0)
    assert enemy.position.x > 0.0
    assert enemy.next_state == State.IDLE


def test_unit_attacks_enemy_in_range():
    unit = place(BattleUnit(unit_data(), TEXTURE), 1080.0)
    enemy = place(BattleEnemy(enemy_data(), (1.0, 1.0), TEXTURE), 1060.0)
    before = enemy.current_health
    unit.update(0.1, {0: [enemy]})
    assert unit.state == State.ATTACK
    assert unit.has_attacked is True
    assert enemy.current_health == pytest.approx(before - unit.data.attack_power)
    assert len(unit.targets) == 0


def test_enemy_damage_uses_attack_magnification():
    enemy = place(BattleEnemy(enemy_data(), (1.0, 3.0), TEXTURE), 0.0)
    unit = place(BattleUnit(unit_data(), TEXTURE), 60.0)
    before = unit.current_health
    enemy.update(0.1, {0: [unit]})
    assert unit.current_health == pytest.approx(before - enemy.data.attack_power * 3.0)


def test_attack_hits_only_once_per_swing():
    unit = place(BattleUnit(unit_data(), TEXTURE), 1080.0)
    enemy = place(BattleEnemy(enemy_data(), (1.0, 1.0), TEXTURE), 1060.0)
    before = enemy.current_health
    for _ in range(10):
        unit.update(0.1, {0: [enemy]})
    assert enemy.current_health == pytest.approx(before - unit.data.attack_power)
    assert unit.state == State.IDLE
    assert unit.current_attack_swing_time == 0.0


def _two_enemies():
    close = place(BattleEnemy(enemy_data(attack_range=10.0), (1.0, 1.0), TEXTURE), 1060.0)
    far = place(BattleEnemy(enemy_data(attack_range=80.0), (1.0, 1.0), TEXTURE), 1060.0)
    return close, far


def test_single_attack_hits_target_with_shortest_reach():
    unit = place(BattleUnit(unit_data(attack_type=AttackType.SINGLE), TEXTURE), 1080.0)
    close, far = _two_enemies()
    unit.update(0.1, {0: [far], 1: [close]})
    assert close.current_health < close.data.health
    assert far.current_health == far.data.health


def test_area_attack_hits_every_target():
    unit = place(BattleUnit(unit_data(attack_type=AttackType.AREA), TEXTURE), 1080.0)
    close, far = _two_enemies()
    unit.update(0.1, {0: [close, far]})
    assert close.current_health == pytest.approx(close.data.health - unit.data.attack_power)
    assert far.current_health == pytest.approx(far.data.health - unit.data.attack_power)


def test_knocked_back_targets_are_skipped():
    unit = place(BattleUnit(unit_data(), TEXTURE), 1080.0)
    enemy = place(BattleEnemy(enemy_data(), (1.0, 1.0), TEXTURE), 1060.0)
    enemy.state = State.KNOCKBACK
    unit.update(0.1, {0: [enemy]})
    assert enemy.current_health == enemy.data.health
    assert unit.next_state == State.IDLE


def test_unit_attacks_base_held_in_targets():
    unit = place(BattleUnit(unit_data(), TEXTURE), 1080.0)
    base = BattleBase(500.0, (200, 300))
    unit.targets.add(base)
    unit.update(0.1, {})
    assert unit.state == State.ATTACK
    assert base.current_health == pytest.approx(base.max_health - unit.data.attack_power)


def test_unit_knockback_pushes_right_then_recovers():
    data = unit_data()
    unit = BattleUnit(data, TEXTURE)
    unit.current_health = 40.0
    start_x = unit.position.x
    threshold = unit.health_left_before_next_knockback
    unit.update(0.1, {})
    assert unit.state == State.KNOCKBACK
    assert unit.next_state == State.KNOCKBACK
    assert unit.position.x == pytest.approx(start_x + unit.knockback_distance_px)
    assert unit.current_frame_index == data.knockback_frame_index

    unit.update(1.0, {})
    assert unit.next_state == State.IDLE
    assert unit.entered_knockback is True
    assert threshold - unit.health_left_before_next_knockback == pytest.approx(
        data.health / data.knockback_count
    )


def test_enemy_knockback_pushes_left():
    enemy = place(BattleEnemy(enemy_data(), (1.0, 1.0), TEXTURE), 300.0)
    enemy.current_health = 10.0
    enemy.update(0.1, {})
    assert enemy.state == State.KNOCKBACK
    assert enemy.position.x == pytest.approx(300.0 - enemy.knockback_distance_px)


def test_knockback_sprite_follows_tween_between_ends():
    unit = BattleUnit(unit_data(), TEXTURE)
    unit.current_health = 40.0
    start_x = unit.position.x
    unit.update(0.1, {})
    assert start_x < unit.sprite_position.x < unit.position.x
    assert unit.sprite_position.y < unit.position.y - unit.current_layer


def test_negative_health_leads_to_death():
    unit = BattleUnit(unit_data(), TEXTURE)
    unit.current_health = -1.0
    unit.update(2.0, {})
    assert unit.state == State.DEAD
    assert unit.is_dead is True


def test_shockwave_knockback_keeps_threshold():
    unit = BattleUnit(unit_data(), TEXTURE)
    threshold = unit.health_left_before_next_knockback
    unit.next_state = State.KNOCKBACK
    unit.is_on_shockwave = True
    unit.update(2.0, {})
    assert unit.health_left_before_next_knockback == threshold
    assert unit.is_on_shockwave is False
    assert unit.next_state == State.IDLE


def test_walk_animation_cycles_before_knockback_frame():
    data = unit_data()
    unit = BattleUnit(data, TEXTURE)
    unit.state = State.WALK
    seen = []
    for _ in range(4):
        unit.current_frame_cooldown = 1.0
        unit.update_sprite()
        seen.append(unit.current_frame_index)
        assert unit.texture_rect.position.x == unit.current_frame_index * unit.texture_rect.size.x
    assert all(0 <= index < data.knockback_frame_index for index in seen)
    assert seen[0] == 1 and seen[1] == 0


def test_attack_animation_starts_after_knockback_frame_then_resets():
    data = unit_data()
    unit = BattleUnit(data, TEXTURE)
    unit.state = State.ATTACK
    unit.current_frame_cooldown = 1.0
    unit.update_sprite()
    assert unit.current_frame_index == data.knockback_frame_index + 1
    unit.current_frame_cooldown = 1.0
    unit.update_sprite()
    assert unit.current_frame_index == 0


def test_frame_cooldown_gates_animation_except_knockback():
    data = unit_data()
    unit = BattleUnit(data, TEXTURE)
    unit.state = State.WALK
    unit.current_frame_cooldown = 0.0
    unit.update_sprite()
    assert unit.current_frame_index == 0
    unit.state = State.KNOCKBACK
    unit.update_sprite()
    assert unit.current_frame_index == data.knockback_frame_index