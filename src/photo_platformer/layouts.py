"""Detection classification and the platform layout strategies.

Detections are split into platform sources and collectible sources, then
one of four layout strategies turns the platform sources into a staircase of
rectangles from the ground up to the exit height.

Every strategy shares the same vertical scheme: row i sits at
GROUND_Y - (i + 1) * vert_step, jittered by at most ±20% of vert_step, so
consecutive rows (and the ground and row 0) never differ by more than
1.4 * vert_step. With at least MIN_PLATFORMS rows, vert_step is at most
total_rise / 6 and that bound stays under MAX_JUMP_HEIGHT. Strategies differ
only in how they pick x.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence, Tuple

from .config import LevelConfig
from .geometry import clamp, lerp
from .rng import Mulberry32
from .scene import CATEGORIES, Bounds, Detection

ENEMY_ANCHOR_CATEGORIES = ("plant", "electric")


@dataclass(frozen=True)
class PlatformInfo:
    """What a platform was made from. Width is already clamped."""
    label: str
    category: str
    confidence: float
    width: float
    enemy_anchor: bool = False


def classify_detections(
    detections: Sequence[Detection],
    config: LevelConfig,
) -> Tuple[List[PlatformInfo], List[Detection]]:
    """Split detections into platform infos and collectible (food) detections.

    Platform infos are padded with synthetic ledges up to min_platforms and
    truncated to max_platforms, so the result always has between
    min_platforms and max_platforms entries.

    Returns:
        (platform_infos, collectible_detections)
    """
    infos = []
    collectibles = []

    for det in detections:
        # Dataclass input skips from_dict, so unknown categories are caught here too
        category = det.category if det.category in CATEGORIES else "other"
        if category == "food":
            collectibles.append(det)
            continue

        infos.append(PlatformInfo(
            label=det.label,
            category=category,
            confidence=clamp(det.confidence, 0.0, 1.0),
            width=clamp(det.bounds_normalized.w, config.min_platform_width, config.max_platform_width),
            enemy_anchor=category in ENEMY_ANCHOR_CATEGORIES,
        ))

    plat_count = int(clamp(len(infos), config.min_platforms, config.max_platforms))
    while len(infos) < plat_count:
        infos.append(PlatformInfo(
            label="ledge",
            category="other",
            confidence=1.0,
            width=config.pad_platform_width,
        ))

    return infos[:plat_count], collectibles


def vertical_step(plat_count: int, config: LevelConfig) -> float:
    """Row spacing that spreads plat_count rows between ground and exit.

    Capped at max_jump_height. The cap never engages for
    min_platforms <= plat_count <= max_platforms with the stock config.
    """
    step = config.total_rise / (plat_count + 1)
    return min(step, config.max_jump_height)


# ---------------------------------------------------------------------------
# Shared row helpers
# ---------------------------------------------------------------------------

def _row_y(rng: Mulberry32, i: int, vert_step: float, config: LevelConfig) -> float:
    jitter = rng.uniform(-config.y_jitter, config.y_jitter) * vert_step
    return config.ground_y - (i + 1) * vert_step + jitter


def _row_width(rng: Mulberry32, info: PlatformInfo, config: LevelConfig) -> float:
    scale = rng.uniform(1.0 - config.width_jitter, 1.0 + config.width_jitter)
    return clamp(info.width * scale, config.min_platform_width, config.max_platform_width)


def pick_x(rng: Mulberry32, x_range: Tuple[float, float], width: float) -> float:
    lo, hi = x_range
    return rng.uniform(lo, max(lo, hi - width))


def platform_bounds(x: float, y: float, width: float, config: LevelConfig) -> Bounds:
    y_lo, y_hi = config.platform_y_range
    return Bounds(
        x=clamp(x, config.x_min, config.x_max - width),
        y=clamp(y, y_lo, y_hi),
        w=width,
        h=config.platform_thickness,
    )


# ---------------------------------------------------------------------------
# Strategies: (rng, infos, vert_step, config) -> one Bounds per info, in order
# ---------------------------------------------------------------------------

def zigzag_layout(
    rng: Mulberry32,
    infos: Sequence[PlatformInfo],
    vert_step: float,
    config: LevelConfig,
) -> List[Bounds]:
    """Alternate between the left and right bands."""
    rows = []
    for i, info in enumerate(infos):
        y = _row_y(rng, i, vert_step, config)
        width = _row_width(rng, info, config)
        band = config.LEFT_BAND if i % 2 == 0 else config.RIGHT_BAND
        x = pick_x(rng, band, width)
        rows.append(platform_bounds(x, y, width, config))
    return rows


def spiral_layout(
    rng: Mulberry32,
    infos: Sequence[PlatformInfo],
    vert_step: float,
    config: LevelConfig,
) -> List[Bounds]:
    """Cycle through four x ranges: far left, far right, centre-left, centre-right."""
    rows = []
    for i, info in enumerate(infos):
        y = _row_y(rng, i, vert_step, config)
        width = _row_width(rng, info, config)
        x = pick_x(rng, config.SPIRAL_RANGES[i % len(config.SPIRAL_RANGES)], width)
        rows.append(platform_bounds(x, y, width, config))
    return rows


def scattered_layout(
    rng: Mulberry32,
    infos: Sequence[PlatformInfo],
    vert_step: float,
    config: LevelConfig,
) -> List[Bounds]:
    """Anywhere across nearly the full width, independent of row parity."""
    rows = []
    for i, info in enumerate(infos):
        y = _row_y(rng, i, vert_step, config)
        width = _row_width(rng, info, config)
        x = pick_x(rng, config.SCATTER_RANGE, width)
        rows.append(platform_bounds(x, y, width, config))
    return rows


def s_curve_layout(
    rng: Mulberry32,
    infos: Sequence[PlatformInfo],
    vert_step: float,
    config: LevelConfig,
) -> List[Bounds]:
    """Platform centres follow one sine period from left to right and back."""
    rows = []
    last = max(len(infos) - 1, 1)
    left, right = config.S_CURVE_CENTERS
    for i, info in enumerate(infos):
        y = _row_y(rng, i, vert_step, config)
        width = _row_width(rng, info, config)
        progress = i / last
        wave = (math.sin(progress * 2 * math.pi - math.pi / 2) + 1) / 2
        center = lerp(left, right, wave)
        x = center - width / 2 + rng.uniform(-config.s_curve_jitter, config.s_curve_jitter)
        rows.append(platform_bounds(x, y, width, config))
    return rows


LayoutFn = Callable[[Mulberry32, Sequence[PlatformInfo], float, LevelConfig], List[Bounds]]

LAYOUT_STRATEGIES: Dict[str, LayoutFn] = {
    "zigzag": zigzag_layout,
    "spiral": spiral_layout,
    "scattered": scattered_layout,
    "s_curve": s_curve_layout,
}

STRATEGY_NAMES = tuple(LAYOUT_STRATEGIES)


def choose_strategy(rng: Mulberry32) -> str:
    """Pick a strategy name uniformly."""
    return rng.choice(STRATEGY_NAMES)
