"""Configuration for the level builder and the adaptive physics calculator.

All values are unitless fractions so the game feels identical regardless of
photo resolution or screen size:
- LevelConfig: normalized (0..1) layout constants used by the level builder
- PhysicsConfig: ratios that turn world pixel dimensions into physics values

The defaults are tuned together. MAX_JUMP_HEIGHT in LevelConfig stays below
the default jump fraction in PhysicsConfig, so a level built with the stock
LevelConfig is completable even without scene-aware physics.
"""

from dataclasses import dataclass, asdict
from typing import Tuple, Dict, Any, ClassVar


@dataclass
class LevelConfig:
    """Normalized layout constants for the level builder.

    y grows downward (0 = top of the image, 1 = bottom), matching the
    photo and the screen.
    """

    # === VERTICAL FRAME ===
    ground_y: float = 0.92  # Top edge of the full-width ground platform
    exit_y: float = 0.18  # Target height for the exit (near top of screen)
    max_jump_height: float = 0.22  # Largest vertical step a player can clear
    platform_thickness: float = 0.03
    entity_offset_y: float = 0.06  # How far above a surface entities are placed

    # === PLATFORM COUNT / SIZE ===
    min_platforms: int = 5  # Excluding ground
    max_platforms: int = 8
    min_platform_width: float = 0.12
    max_platform_width: float = 0.35
    pad_platform_width: float = 0.18  # Width of synthetic "ledge" padding
    bonus_platform_width: float = 0.14
    max_bonus_platforms: int = 2

    # === JITTER ===
    y_jitter: float = 0.2  # Fraction of vert_step
    width_jitter: float = 0.3  # Fraction of candidate width
    s_curve_jitter: float = 0.03

    # === HORIZONTAL FRAME ===
    x_min: float = 0.02
    x_max: float = 0.98

    # === ENTITIES ===
    player_x: float = 0.08
    max_collectibles: int = 5
    max_pickups: int = 6
    min_pickups: int = 3
    collectible_size: float = 0.03
    single_bonus_probability: float = 0.6

    # Strategy x ranges (min, max). Platforms are placed in range minus width.
    LEFT_BAND: ClassVar[Tuple[float, float]] = (0.02, 0.42)
    RIGHT_BAND: ClassVar[Tuple[float, float]] = (0.50, 0.96)
    SPIRAL_RANGES: ClassVar[Tuple[Tuple[float, float], ...]] = (
        (0.02, 0.30),
        (0.65, 0.96),
        (0.25, 0.55),
        (0.45, 0.75),
    )
    SCATTER_RANGE: ClassVar[Tuple[float, float]] = (0.05, 0.93)
    S_CURVE_CENTERS: ClassVar[Tuple[float, float]] = (0.15, 0.80)

    # Bonus platforms go in the half opposite their upper neighbour
    LEFT_HALF: ClassVar[Tuple[float, float]] = (0.04, 0.48)
    RIGHT_HALF: ClassVar[Tuple[float, float]] = (0.52, 0.96)

    # Exit x is kept on the right-hand side of the screen
    EXIT_X_RANGE: ClassVar[Tuple[float, float]] = (0.6, 0.95)
    PICKUP_X_RANGE: ClassVar[Tuple[float, float]] = (0.05, 0.95)
    COLLECTIBLE_X_RANGE: ClassVar[Tuple[float, float]] = (0.02, 0.95)
    GROUND_PICKUP_XS: ClassVar[Tuple[float, ...]] = (0.3, 0.6)

    @property
    def total_rise(self) -> float:
        """Vertical distance from the ground to the exit target."""
        return self.ground_y - self.exit_y

    @property
    def platform_y_range(self) -> Tuple[float, float]:
        """Range every floating platform's top edge is clamped into."""
        return (self.exit_y - 0.02, self.ground_y - 0.04)

    @property
    def max_floating_platforms(self) -> int:
        return self.max_platforms + self.max_bonus_platforms

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "LevelConfig":
        """Create from dictionary. Unknown keys are ignored, missing keys use defaults."""
        known = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class PhysicsConfig:
    """Ratios that turn world dimensions into pixel physics values.

    Gravity is a fixed multiple of world height. The jump height is
    adaptive: when a scene is available it is sized to the largest vertical
    gap the player must clear (plus margin), otherwise the default fraction
    is used. Jump velocity is then solved from h = v² / 2g.
    """

    # === SPRITE SIZES (fraction of worldH) ===
    player_size: float = 0.06
    exit_size: float = 0.06
    pickup_size: float = 0.04

    # Floor sizes in px so sprites stay visible on tiny screens
    min_player_size_px: int = 16
    min_exit_size_px: int = 16
    min_pickup_size_px: int = 12

    # Player physics body relative to sprite size (centered sub-rectangle)
    body_width_ratio: float = 0.58
    body_height_ratio: float = 0.75

    # === MOTION ===
    gravity_multiplier: float = 1.2  # gravityY = multiplier * worldH (px/s²)
    default_jump_fraction: float = 0.35  # Fallback when no scene is available
    jump_margin: float = 0.15  # Headroom on top of the largest gap
    min_jump_fraction: float = 0.15
    max_jump_fraction: float = 0.45
    speed_fraction: float = 0.40  # playerSpeed = fraction * worldW per second

    # === PLATFORM PLAYABILITY ===
    min_platform_width_fraction: float = 0.025  # of worldW
    min_platform_height_fraction: float = 0.008  # of worldH

    # Where the ground sits when scanning a scene for landing surfaces
    ABSOLUTE_GROUND_Y: ClassVar[float] = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PhysicsConfig":
        """Create from dictionary. Unknown keys are ignored, missing keys use defaults."""
        known = {k: v for k, v in d.items() if k in cls.__dataclass_fields__}
        return cls(**known)


# Named physics presets. Jump velocity is always derived from the scene, so
# these only change how the jump *feels*, never whether a level is completable.
CONFIGS = {
    # Default balanced feel
    "default": PhysicsConfig(),

    # Low gravity, extra headroom - forgiving
    "floaty": PhysicsConfig(
        gravity_multiplier=0.9,
        jump_margin=0.25,
        speed_fraction=0.35,
    ),

    # Strong gravity, fast run - snappy
    "heavy": PhysicsConfig(
        gravity_multiplier=1.8,
        jump_margin=0.10,
        speed_fraction=0.50,
    ),
}
