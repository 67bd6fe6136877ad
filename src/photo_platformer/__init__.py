"""photo-platformer: completable 2D platformer levels from photo detections.

Turns a noisy list of AI-detected real-world objects into a SceneV1 level
that is guaranteed completable, and derives resolution-independent physics
(gravity, jump velocity, speed, sprite sizes) sized to the level's largest
vertical gap. Both halves are pure, deterministic functions.
"""

from .config import LevelConfig, PhysicsConfig, CONFIGS
from .scene import (
    Bounds,
    Detection,
    DetectionResponse,
    SceneObject,
    SpawnPoint,
    EnemySpawn,
    PickupSpawn,
    SceneV1,
)
from .rng import Mulberry32, derive_seed
from .level_gen import LevelBuilder, LevelPlan, build_level
from .physics import ComputedPhysics, analyze_scene_gaps, compute_physics
from .constraints import SceneConstraints, ConstraintResult, ConstraintViolation

__all__ = [
    "LevelConfig",
    "PhysicsConfig",
    "CONFIGS",
    "Bounds",
    "Detection",
    "DetectionResponse",
    "SceneObject",
    "SpawnPoint",
    "EnemySpawn",
    "PickupSpawn",
    "SceneV1",
    "Mulberry32",
    "derive_seed",
    "LevelBuilder",
    "LevelPlan",
    "build_level",
    "ComputedPhysics",
    "analyze_scene_gaps",
    "compute_physics",
    "SceneConstraints",
    "ConstraintResult",
    "ConstraintViolation",
]
