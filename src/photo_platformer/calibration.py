"""Measure what a computed jump actually does in a rigid-body simulation.

compute_physics() derives the jump velocity from h = v² / 2g. This module
runs that jump in a headless pymunk side-simulation and measures the apex,
so tests and tools can confirm the player really clears the scene's largest
gap once discrete stepping is involved.

Usage:
    phys = compute_physics(world_w, world_h, scene)
    profile = calibrate_jump(phys)
    profile.apex_height_px  # measured, not declared
"""

from dataclasses import dataclass, asdict
from typing import Dict, Tuple

import pymunk

from .physics import ComputedPhysics

# Simulation parameters
_DT = 1.0 / 60.0  # 60fps frame, matches the game loop
_SUBSTEPS = 3
_MAX_FRAMES = 600  # 10s safety cutoff for a single jump
_PLAYER_MASS = 1.0


@dataclass
class JumpProfile:
    """Measured outcome of one standing jump (no horizontal input)."""
    apex_height_px: float  # Highest point above the launch position
    apex_time: float  # s from launch to apex
    total_airtime: float  # s from launch back to launch height

    def apex_fraction(self, world_h: float) -> float:
        """Apex height as a fraction of world height."""
        return self.apex_height_px / world_h

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> "JumpProfile":
        return cls(**d)


def _create_test_space(physics: ComputedPhysics) -> Tuple[pymunk.Space, pymunk.Body]:
    """Space with screen-down gravity and a single player body at the origin.

    No platforms: the jump is measured from launch height back to launch
    height, so nothing can interrupt it.
    """
    space = pymunk.Space()
    space.gravity = (0, physics.gravity_y)

    size = (physics.player_body_width, physics.player_body_height)
    body = pymunk.Body(_PLAYER_MASS, pymunk.moment_for_box(_PLAYER_MASS, size))
    body.position = (0, 0)
    shape = pymunk.Poly.create_box(body, size)
    space.add(body, shape)
    return space, body


def calibrate_jump(physics: ComputedPhysics) -> JumpProfile:
    """Run a standing jump with the computed velocity and measure it.

    Raises:
        ValueError: if gravity is not positive (the jump would never land).
    """
    if physics.gravity_y <= 0:
        raise ValueError(f"Gravity must be positive (screen-down), got {physics.gravity_y}")

    space, body = _create_test_space(physics)
    body.velocity = (0, physics.jump_velocity)
    launch_y = body.position.y

    highest_y = launch_y
    apex_frame = 0
    landed_frame = _MAX_FRAMES - 1

    for frame in range(_MAX_FRAMES):
        for _ in range(_SUBSTEPS):
            space.step(_DT / _SUBSTEPS)

        y = body.position.y
        if y < highest_y:
            highest_y = y
            apex_frame = frame

        # Back at (or below) launch height after going up
        if frame > 0 and y >= launch_y:
            landed_frame = frame
            break

    return JumpProfile(
        apex_height_px=launch_y - highest_y,
        apex_time=(apex_frame + 1) * _DT,
        total_airtime=(landed_frame + 1) * _DT,
    )
