"""Tests for adaptive physics computation."""

import logging
import math

import pytest

from photo_platformer.config import PhysicsConfig, CONFIGS
from photo_platformer.level_gen import build_level
from photo_platformer.physics import (
    analyze_scene_gaps,
    collect_landing_ys,
    compute_physics,
    max_vertical_gap,
    playable_platforms,
    world_rect,
)
from photo_platformer.scene import Bounds, ImageSize, SceneObject, SceneV1, SpawnPoint, Spawns

from conftest import make_scene, random_response


def _scene_with_widths(widths):
    objects = tuple(
        SceneObject(
            id=f"plat_{i}", type="platform", label="ledge", confidence=1.0,
            bounds_normalized=Bounds(x=0.1, y=0.8 - 0.1 * i, w=w, h=0.03),
        )
        for i, w in enumerate(widths)
    )
    return SceneV1(
        image=ImageSize(w=1000, h=1000),
        objects=objects,
        spawns=Spawns(player=SpawnPoint(0.08, 0.86), exit=SpawnPoint(0.7, 0.2)),
    )


class TestComputePhysics:
    def test_square_world(self):
        phys = compute_physics(1000, 1000)
        assert phys.gravity_y == pytest.approx(1200)
        assert phys.jump_velocity == pytest.approx(-math.sqrt(2 * 1200 * 350))
        assert phys.player_speed == pytest.approx(400)
        assert phys.player_size_px == 60
        assert phys.player_body_width == 35
        assert phys.player_body_height == 45
        assert phys.exit_size_px == 60
        assert phys.pickup_size_px == 40
        assert phys.min_platform_width == pytest.approx(25)
        assert phys.min_platform_height == pytest.approx(8)
        assert phys.jump_fraction == 0.35

    def test_jump_height_matches_fraction(self):
        phys = compute_physics(1280, 720)
        assert phys.jump_height_px == pytest.approx(0.35 * 720)

    def test_tiny_world_uses_minimum_sizes(self):
        phys = compute_physics(100, 100)
        assert phys.player_size_px == 16
        assert phys.exit_size_px == 16
        assert phys.pickup_size_px == 12
        assert phys.player_body_width == 9
        assert phys.player_body_height == 12

    def test_jump_is_upward(self):
        assert compute_physics(800, 600).jump_velocity < 0

    @pytest.mark.parametrize("w,h", [(-5, 100), (100, -1)])
    def test_rejects_negative_world(self, w, h):
        with pytest.raises(ValueError):
            compute_physics(w, h)

    def test_zero_height_world_degrades(self):
        phys = compute_physics(1000, 0)
        assert phys.gravity_y == 0.0
        assert phys.jump_velocity == 0.0
        assert phys.jump_height_px == 0.0
        assert phys.player_size_px == 16
        assert phys.exit_size_px == 16
        assert phys.pickup_size_px == 12
        assert phys.player_speed == pytest.approx(400)

    def test_zero_width_world_degrades(self):
        phys = compute_physics(0, 1000)
        assert phys.player_speed == 0.0
        assert phys.min_platform_width == 0.0
        assert phys.gravity_y == pytest.approx(1200)

    def test_scales_with_world(self):
        small = compute_physics(500, 500)
        large = compute_physics(1000, 1000)
        assert large.gravity_y == pytest.approx(2 * small.gravity_y)
        assert large.player_speed == pytest.approx(2 * small.player_speed)
        # v scales with sqrt(g * h), both linear in world height
        assert large.jump_velocity == pytest.approx(2 * small.jump_velocity)

    def test_scene_aware_jump(self):
        phys = compute_physics(1000, 1000, make_scene([0.7], 0.7))
        assert phys.jump_fraction == pytest.approx(0.345)
        assert phys.jump_height_px == pytest.approx(345)

    def test_preset_changes_feel(self):
        default = compute_physics(1000, 1000, config=CONFIGS["default"])
        heavy = compute_physics(1000, 1000, config=CONFIGS["heavy"])
        assert heavy.gravity_y > default.gravity_y
        assert heavy.jump_height_px == pytest.approx(default.jump_height_px)

    def test_to_dict_wire_names(self):
        d = compute_physics(1000, 1000).to_dict()
        assert set(d) == {
            "gravityY", "playerSpeed", "jumpVelocity", "playerSizePx",
            "playerBodyWidth", "playerBodyHeight", "exitSizePx", "pickupSizePx",
            "minPlatformWidth", "minPlatformHeight",
        }


class TestSceneGaps:
    def test_landing_ys_include_ground_and_exit(self):
        ys = collect_landing_ys(make_scene([0.6, 0.4], 0.3, player_y=0.5))
        assert ys == [0.3, 0.4, 0.6, 1.0]

    def test_max_vertical_gap(self):
        assert max_vertical_gap([0.2, 0.5, 0.6]) == pytest.approx(0.3)
        assert max_vertical_gap([0.5]) == 0.0
        assert max_vertical_gap([]) == 0.0

    def test_single_large_gap(self):
        assert analyze_scene_gaps(make_scene([0.7], 0.7)) == pytest.approx(0.345)

    def test_clamped_high(self):
        assert analyze_scene_gaps(make_scene([0.05], 0.05)) == pytest.approx(0.45)

    def test_clamped_low(self):
        ys = [0.95, 0.9, 0.85, 0.8]
        assert analyze_scene_gaps(make_scene(ys, 0.75)) == pytest.approx(0.15)

    def test_more_gap_never_less_jump(self):
        previous = 0.0
        for y in [0.9, 0.8, 0.7, 0.6, 0.5, 0.3, 0.1]:
            fraction = analyze_scene_gaps(make_scene([y], y))
            assert fraction >= previous
            previous = fraction

    def test_custom_margin(self):
        config = PhysicsConfig(jump_margin=0.0)
        assert analyze_scene_gaps(make_scene([0.7], 0.7), config) == pytest.approx(0.3)

    def test_logs_analysis(self, caplog):
        caplog.set_level(logging.INFO, logger="photo_platformer.physics")
        analyze_scene_gaps(make_scene([0.7], 0.7))
        assert "jumpFraction=0.345" in caplog.text

    def test_built_levels_stay_in_range(self):
        for seed in range(50):
            scene = build_level(random_response(seed))
            phys = compute_physics(1280, 720, scene)
            assert 0.15 <= phys.jump_fraction <= 0.45
            assert phys.jump_height_px >= max_vertical_gap(collect_landing_ys(scene)) * 720


class TestWorldConversion:
    def test_world_rect(self):
        rect = world_rect(Bounds(0.1, 0.5, 0.25, 0.03), 1000, 800)
        assert rect.x == pytest.approx(100)
        assert rect.y == pytest.approx(400)
        assert rect.w == pytest.approx(250)
        assert rect.h == pytest.approx(24)

    def test_narrow_platforms_dropped(self):
        scene = _scene_with_widths([0.2, 0.02, 0.3])
        phys = compute_physics(1000, 1000)
        kept = playable_platforms(scene, phys, 1000, 1000)
        assert [p.id for p in kept] == ["plat_0", "plat_2"]

    def test_small_world_drops_thin_platforms(self):
        scene = _scene_with_widths([0.2])
        phys = compute_physics(1000, 1000)
        # 0.03 * 200 = 6px, under the 8px minimum computed for a 1000px world
        assert playable_platforms(scene, phys, 1000, 200) == []
