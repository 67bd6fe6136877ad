"""Per-level metrics for built scenes and multi-photo surveys.

Computes a flat set of layout metrics for one SceneV1, and runs the level
builder over many detection responses into a DataFrame for checking
strategy coverage, gap distributions and entity counts.

Usage:
    # Single level
    metrics = level_metrics(scene)

    # Many photos -> DataFrame
    df = survey_levels(responses)
    df.groupby("strategy")["max_gap"].max()
"""

import logging
from typing import Any, Dict, Iterable, Optional, Union

import numpy as np
import pandas as pd

from ..config import LevelConfig, PhysicsConfig
from ..level_gen import LevelBuilder
from ..physics import analyze_scene_gaps, collect_landing_ys
from ..scene import DetectionResponse, SceneV1

logger = logging.getLogger(__name__)


def level_metrics(scene: SceneV1, physics_config: Optional[PhysicsConfig] = None) -> Dict[str, Any]:
    """Compute layout metrics for one scene.

    Returns:
        Dict of metric name -> value. Flat structure (no nesting)
        suitable for direct insertion into a DataFrame row.
    """
    platforms = [obj for obj in scene.platforms if not obj.id.startswith("ground")]
    ys = np.asarray(collect_landing_ys(scene, physics_config), dtype=float)
    gaps = np.diff(ys)

    metrics = {
        "num_objects": len(scene.objects),
        "num_platforms": len(platforms),
        "num_collectibles": len(scene.collectibles),
        "num_pickups": len(scene.spawns.pickups),
        "num_enemies": len(scene.spawns.enemies),
        "num_enemy_anchors": sum(1 for p in platforms if p.enemy_spawn_anchor),
        "max_gap": float(gaps.max()) if gaps.size else 0.0,
        "mean_gap": float(gaps.mean()) if gaps.size else 0.0,
        "exit_x": scene.spawns.exit.x,
        "exit_y": scene.spawns.exit.y,
        "jump_fraction": analyze_scene_gaps(scene, physics_config),
    }

    # Horizontal spread of the staircase
    if platforms:
        lefts = np.array([p.bounds_normalized.x for p in platforms])
        rights = np.array([p.bounds_normalized.right for p in platforms])
        centers = (lefts + rights) / 2
        metrics["x_span"] = float(rights.max() - lefts.min())
        metrics["center_x_std"] = float(centers.std())
    else:
        metrics["x_span"] = 0.0
        metrics["center_x_std"] = 0.0

    return metrics


def survey_levels(
    responses: Iterable[Union[DetectionResponse, Dict[str, Any]]],
    config: Optional[LevelConfig] = None,
    physics_config: Optional[PhysicsConfig] = None,
) -> pd.DataFrame:
    """Build one level per response and collect its metrics.

    Returns:
        DataFrame with one row per response: seed, strategy, vert_step,
        bonus_count plus every level_metrics() column.
    """
    builder = LevelBuilder(config)
    rows = []
    for i, response in enumerate(responses):
        plan = builder.plan(response)
        row = {
            "index": i,
            "seed": plan.seed,
            "strategy": plan.strategy,
            "vert_step": plan.vert_step,
            "platform_count": plan.platform_count,
            "bonus_count": plan.bonus_count,
        }
        row.update(level_metrics(plan.scene, physics_config))
        rows.append(row)

    df = pd.DataFrame(rows)
    logger.info("Surveyed %d levels", len(df))
    return df
