"""Playability constraints for built scenes.

Checks that a SceneV1 is valid to hand to the renderer and possible to
complete:
1. Bounds: every normalized rectangle and spawn lies inside the image
2. Caps: per-type object counts stay under the renderer's hard limits
3. Reachability: no vertical gap between landing surfaces exceeds one jump
4. Physics: the computed jump actually covers the scene's largest gap

Key insight: a "valid" scene is POSSIBLE to complete, not necessarily easy.
Difficulty is a separate dimension.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .config import LevelConfig
from .physics import ComputedPhysics, collect_landing_ys, max_vertical_gap
from .scene import Bounds, SceneV1

_EPSILON = 1e-9


@dataclass
class ConstraintViolation:
    """Describes a constraint violation."""
    param: str
    message: str
    severity: str  # "error" = unplayable/invalid, "warning" = odd but playable


@dataclass
class ConstraintResult:
    """Result of constraint validation."""
    valid: bool
    violations: List[ConstraintViolation]

    def __bool__(self) -> bool:
        return self.valid

    @property
    def errors(self) -> List[ConstraintViolation]:
        return [v for v in self.violations if v.severity == "error"]


def _result(violations: List[ConstraintViolation]) -> ConstraintResult:
    errors = [v for v in violations if v.severity == "error"]
    return ConstraintResult(valid=len(errors) == 0, violations=violations)


class SceneConstraints:
    """Defines and checks constraints on built scenes.

    - Hard constraints (errors): out-of-range bounds, caps exceeded,
      unreachable surfaces, a jump too weak for the scene
    - Soft constraints (warnings): e.g. a scene with no pickups
    """

    # Hard caps on objects per scene
    MAX_OBJECTS = 25
    TYPE_CAPS: Dict[str, int] = {
        "platform": 12,
        "obstacle": 8,
        "collectible": 10,
        "hazard": 8,
    }

    @classmethod
    def validate_bounds(cls, scene: SceneV1) -> ConstraintResult:
        """Every rectangle in [0,1] with x+w <= 1 and y+h <= 1, spawns in [0,1]."""
        violations = []

        for obj in scene.objects:
            message = cls._bounds_problem(obj.bounds_normalized)
            if message:
                violations.append(ConstraintViolation(obj.id, message, "error"))

        spawns = [("player", scene.spawns.player), ("exit", scene.spawns.exit)]
        spawns += [(f"enemy_{i}", s) for i, s in enumerate(scene.spawns.enemies)]
        spawns += [(f"pickup_{i}", s) for i, s in enumerate(scene.spawns.pickups)]
        for name, point in spawns:
            if not (0.0 <= point.x <= 1.0 and 0.0 <= point.y <= 1.0):
                violations.append(ConstraintViolation(
                    name,
                    f"Spawn ({point.x:.3f}, {point.y:.3f}) outside [0, 1]",
                    "error",
                ))

        return _result(violations)

    @staticmethod
    def _bounds_problem(b: Bounds) -> Optional[str]:
        for name in ("x", "y", "w", "h"):
            value = getattr(b, name)
            if not (0.0 <= value <= 1.0):
                return f"{name}={value:.3f} outside [0, 1]"
        if b.right > 1.0 + _EPSILON:
            return f"x+w={b.right:.3f} > 1"
        if b.bottom > 1.0 + _EPSILON:
            return f"y+h={b.bottom:.3f} > 1"
        return None

    @classmethod
    def validate_caps(cls, scene: SceneV1) -> ConstraintResult:
        """Total and per-type object counts within the hard caps."""
        violations = []

        if len(scene.objects) > cls.MAX_OBJECTS:
            violations.append(ConstraintViolation(
                "objects",
                f"Too many objects: {len(scene.objects)} (max {cls.MAX_OBJECTS})",
                "error",
            ))

        counts: Dict[str, int] = {}
        for obj in scene.objects:
            counts[obj.type] = counts.get(obj.type, 0) + 1
        for object_type, cap in cls.TYPE_CAPS.items():
            count = counts.get(object_type, 0)
            if count > cap:
                violations.append(ConstraintViolation(
                    object_type,
                    f"Too many {object_type} objects: {count} (max {cap})",
                    "error",
                ))

        ids = [obj.id for obj in scene.objects]
        if len(set(ids)) != len(ids):
            violations.append(ConstraintViolation("id", "Object ids are not unique", "error"))

        if not scene.spawns.pickups:
            violations.append(ConstraintViolation("pickups", "Scene has no pickups", "warning"))

        return _result(violations)

    @classmethod
    def validate_reachability(
        cls,
        scene: SceneV1,
        max_step: Optional[float] = None,
    ) -> ConstraintResult:
        """No gap between sorted landing surfaces (ground, platforms, exit) exceeds max_step."""
        if max_step is None:
            max_step = LevelConfig().max_jump_height

        ys = collect_landing_ys(scene)
        violations = []
        for lower, upper in zip(ys[1:], ys[:-1]):
            gap = lower - upper
            if gap > max_step + _EPSILON:
                violations.append(ConstraintViolation(
                    "reachability",
                    f"Gap {gap:.3f} between y={upper:.3f} and y={lower:.3f} > {max_step:.3f}",
                    "error",
                ))
        return _result(violations)

    @classmethod
    def validate_physics(
        cls,
        scene: SceneV1,
        physics: ComputedPhysics,
        world_h: float,
    ) -> ConstraintResult:
        """The computed jump height covers the largest gap, in world pixels."""
        violations = []
        gap_px = max_vertical_gap(collect_landing_ys(scene)) * world_h
        if physics.jump_height_px + _EPSILON < gap_px:
            violations.append(ConstraintViolation(
                "jump_velocity",
                f"Jump height {physics.jump_height_px:.1f}px < largest gap {gap_px:.1f}px",
                "error",
            ))
        return _result(violations)

    @classmethod
    def validate_scene(cls, scene: SceneV1, max_step: Optional[float] = None) -> ConstraintResult:
        """Bounds, caps and reachability combined."""
        all_violations = []
        all_violations.extend(cls.validate_bounds(scene).violations)
        all_violations.extend(cls.validate_caps(scene).violations)
        all_violations.extend(cls.validate_reachability(scene, max_step).violations)
        return _result(all_violations)

    @classmethod
    def require_valid(cls, scene: SceneV1) -> SceneV1:
        """Return the scene unchanged, or raise if any hard constraint fails.

        Raises:
            ValueError: listing every error-severity violation.
        """
        result = cls.validate_scene(scene)
        if not result.valid:
            raise ValueError(f"Invalid scene: {result.errors}")
        return scene
