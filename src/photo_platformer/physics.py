"""Adaptive, scene-aware physics values.

All gameplay values are fractions of world dimensions, so the game feels the
same at any photo resolution. When a scene is provided the jump height adapts
to the largest vertical gap the player must clear, which keeps every level
completable no matter where its platforms landed.

Usage:
    phys = compute_physics(world_w, world_h, scene)
    phys.gravity_y, phys.jump_velocity, phys.player_speed, ...

Screen coordinates: y grows downward, so gravity is positive and the jump
velocity is negative.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .config import PhysicsConfig
from .geometry import clamp, round_half_up
from .scene import Bounds, SceneObject, SceneV1

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComputedPhysics:
    """Pixel physics values for one world size. Recomputed per scene load."""
    gravity_y: float  # px/s², positive = down
    player_speed: float  # px/s
    jump_velocity: float  # px/s, negative = up
    player_size_px: int
    player_body_width: int
    player_body_height: int
    exit_size_px: int
    pickup_size_px: int
    min_platform_width: float  # px
    min_platform_height: float  # px
    jump_fraction: float  # Jump apex as fraction of world height

    @property
    def jump_height_px(self) -> float:
        """Apex height implied by jump_velocity and gravity_y: v² / 2g."""
        if self.gravity_y <= 0:
            return 0.0
        return self.jump_velocity ** 2 / (2 * self.gravity_y)

    def to_dict(self) -> Dict[str, float]:
        """Wire names used by the renderer."""
        return {
            "gravityY": self.gravity_y,
            "playerSpeed": self.player_speed,
            "jumpVelocity": self.jump_velocity,
            "playerSizePx": self.player_size_px,
            "playerBodyWidth": self.player_body_width,
            "playerBodyHeight": self.player_body_height,
            "exitSizePx": self.exit_size_px,
            "pickupSizePx": self.pickup_size_px,
            "minPlatformWidth": self.min_platform_width,
            "minPlatformHeight": self.min_platform_height,
        }


# ---------------------------------------------------------------------------
# Scene gap analysis
# ---------------------------------------------------------------------------

def collect_landing_ys(scene: SceneV1, config: Optional[PhysicsConfig] = None) -> List[float]:
    """Normalized y of every surface the player must jump between, sorted.

    Includes the absolute ground (1.0), each platform's top edge and the exit
    (it must be reachable, not just landed near). The player spawn is left
    out: the player falls to the nearest surface below it, so including it
    would hide the real gap.
    """
    config = config or PhysicsConfig()
    ys = [config.ABSOLUTE_GROUND_Y]
    ys.extend(obj.bounds_normalized.y for obj in scene.objects if obj.type == "platform")
    ys.append(scene.spawns.exit.y)
    return sorted(ys)


def max_vertical_gap(ys: List[float]) -> float:
    """Largest difference between consecutive sorted values (0 for < 2 values)."""
    if len(ys) < 2:
        return 0.0
    return float(np.max(np.diff(np.asarray(ys, dtype=float))))


def analyze_scene_gaps(scene: SceneV1, config: Optional[PhysicsConfig] = None) -> float:
    """Return the jump height (fraction of world height) the scene needs.

    Largest gap between consecutive landing surfaces, plus jump_margin,
    clamped to [min_jump_fraction, max_jump_fraction].
    """
    config = config or PhysicsConfig()
    ys = collect_landing_ys(scene, config)
    max_gap = max_vertical_gap(ys)
    required = max_gap * (1 + config.jump_margin)
    fraction = clamp(required, config.min_jump_fraction, config.max_jump_fraction)

    logger.info(
        "Scene gap analysis: positions=[%s], maxGap=%.3f, required=%.3f, jumpFraction=%.3f",
        ", ".join(f"{y:.2f}" for y in ys), max_gap, required, fraction,
    )
    return fraction


# ---------------------------------------------------------------------------
# Computed physics
# ---------------------------------------------------------------------------

def _sprite_size(fraction: float, world_h: float, min_px: int) -> int:
    return max(round_half_up(fraction * world_h), min_px)


def compute_physics(
    world_w: float,
    world_h: float,
    scene: Optional[SceneV1] = None,
    config: Optional[PhysicsConfig] = None,
) -> ComputedPhysics:
    """Compute every pixel physics value from world dimensions.

    With a scene, the jump adapts to its largest vertical gap; without one
    the default jump fraction is used. Call once per scene load (and again
    on restart if the world was refitted). A zero-sized world (e.g. before
    the first layout pass) degrades to minimum sprite sizes with no gravity,
    speed or jump.

    Raises:
        ValueError: if either world dimension is negative.
    """
    if world_w < 0 or world_h < 0:
        raise ValueError(f"World size must not be negative, got {world_w}x{world_h}")
    config = config or PhysicsConfig()

    player_size = _sprite_size(config.player_size, world_h, config.min_player_size_px)
    exit_size = _sprite_size(config.exit_size, world_h, config.min_exit_size_px)
    pickup_size = _sprite_size(config.pickup_size, world_h, config.min_pickup_size_px)

    gravity_y = config.gravity_multiplier * world_h

    if scene is not None:
        jump_fraction = analyze_scene_gaps(scene, config)
    else:
        jump_fraction = config.default_jump_fraction

    # v = sqrt(2 * g * h), negative because up is -y on screen
    jump_height_px = jump_fraction * world_h
    jump_velocity = -math.sqrt(2 * gravity_y * jump_height_px)

    return ComputedPhysics(
        gravity_y=gravity_y,
        player_speed=config.speed_fraction * world_w,
        jump_velocity=jump_velocity,
        player_size_px=player_size,
        player_body_width=round_half_up(player_size * config.body_width_ratio),
        player_body_height=round_half_up(player_size * config.body_height_ratio),
        exit_size_px=exit_size,
        pickup_size_px=pickup_size,
        min_platform_width=config.min_platform_width_fraction * world_w,
        min_platform_height=config.min_platform_height_fraction * world_h,
        jump_fraction=jump_fraction,
    )


# ---------------------------------------------------------------------------
# Normalized -> world conversion
# ---------------------------------------------------------------------------

def world_rect(bounds: Bounds, world_w: float, world_h: float) -> Bounds:
    """Convert a normalized rectangle to world pixels."""
    return Bounds(
        x=bounds.x * world_w,
        y=bounds.y * world_h,
        w=bounds.w * world_w,
        h=bounds.h * world_h,
    )


def playable_platforms(
    scene: SceneV1,
    physics: ComputedPhysics,
    world_w: float,
    world_h: float,
) -> List[SceneObject]:
    """Platforms big enough to stand on at this world size.

    Anything narrower than min_platform_width or thinner than
    min_platform_height px is dropped by the renderer.
    """
    playable = []
    for obj in scene.platforms:
        rect = world_rect(obj.bounds_normalized, world_w, world_h)
        if rect.w < physics.min_platform_width or rect.h < physics.min_platform_height:
            continue
        playable.append(obj)
    return playable
