"""Deterministic level builder: AI detections in, completable SceneV1 out.

The vision model only does perception. Every gameplay decision is made here,
in deterministic code, as a pipeline of stages over immutable values:

1. derive a seed from the detections and create a local PRNG
2. classify detections into platform sources and collectibles
3. lay out the staircase with a strategy picked by the PRNG
4. inject 1-2 bonus platforms between existing rows
5. append the full-width ground
6. place player, exit, collectibles, pickups and enemies
7. assemble SceneObjects with every derived flag already resolved

Key design: AI-reported positions are discarded. Vertical steps are bounded
by MAX_JUMP_HEIGHT, so every level is completable by construction.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .config import LevelConfig
from .geometry import clamp
from .layouts import (
    LAYOUT_STRATEGIES,
    PlatformInfo,
    choose_strategy,
    classify_detections,
    pick_x,
    platform_bounds,
    vertical_step,
)
from .rng import Mulberry32, derive_seed
from .scene import (
    Bounds,
    Detection,
    DetectionResponse,
    EnemySpawn,
    PickupSpawn,
    SceneObject,
    SceneV1,
    SpawnPoint,
    Spawns,
)

logger = logging.getLogger(__name__)

GROUND_INFO = PlatformInfo(label="ground", category="furniture", confidence=1.0, width=1.0)


@dataclass(frozen=True)
class PlatformDescriptor:
    """One staircase entry: where it is and what it was made from."""
    info: PlatformInfo
    bounds: Bounds
    is_ground: bool = False


@dataclass(frozen=True)
class EntityPlan:
    """Spawns and collectible placements derived from the finished staircase.

    enemy_platforms holds indices into the non-ground platform list.
    """
    player: SpawnPoint
    exit: SpawnPoint
    pickups: Tuple[PickupSpawn, ...]
    enemies: Tuple[EnemySpawn, ...]
    enemy_platforms: Tuple[int, ...]
    collectibles: Tuple[Tuple[Detection, Bounds], ...]


@dataclass(frozen=True)
class LevelPlan:
    """A built level plus the decisions that produced it."""
    scene: SceneV1
    seed: int
    strategy: str
    vert_step: float
    platform_count: int  # From detections + padding, before bonus platforms
    bonus_count: int


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

def inject_bonus_platforms(
    rng: Mulberry32,
    staircase: Sequence[PlatformDescriptor],
    config: LevelConfig,
) -> List[PlatformDescriptor]:
    """Add 1 (probability 0.6) or 2 bonus platforms between adjacent rows.

    Each bonus is vertically centred between two distinct neighbouring rows
    and placed on the half of the screen opposite the upper neighbour. The
    floating total never exceeds max_floating_platforms.
    """
    wanted = 1 if rng.chance(config.single_bonus_probability) else 2
    room = config.max_floating_platforms - len(staircase)
    count = max(0, min(wanted, room, len(staircase) - 1))

    open_gaps = list(range(len(staircase) - 1))
    chosen = set()
    for _ in range(count):
        chosen.add(open_gaps.pop(rng.index(len(open_gaps))))

    result = []
    for j, below in enumerate(staircase):
        result.append(below)
        if j in chosen:
            above = staircase[j + 1]
            result.append(_bonus_between(rng, below, above, config))
    return result


def _bonus_between(
    rng: Mulberry32,
    below: PlatformDescriptor,
    above: PlatformDescriptor,
    config: LevelConfig,
) -> PlatformDescriptor:
    width = config.bonus_platform_width
    half = config.RIGHT_HALF if above.bounds.center_x < 0.5 else config.LEFT_HALF
    x = pick_x(rng, half, width)
    y = (above.bounds.y + below.bounds.y) / 2
    info = PlatformInfo(label="bonus ledge", category="other", confidence=1.0, width=width)
    return PlatformDescriptor(info=info, bounds=platform_bounds(x, y, width, config))


def with_ground(
    staircase: Sequence[PlatformDescriptor],
    config: LevelConfig,
) -> List[PlatformDescriptor]:
    """Append the full-width ground platform."""
    ground = PlatformDescriptor(
        info=GROUND_INFO,
        bounds=Bounds(x=0.0, y=config.ground_y, w=1.0, h=config.platform_thickness),
        is_ground=True,
    )
    return list(staircase) + [ground]


def place_entities(
    real_platforms: Sequence[Bounds],
    collectibles: Sequence[Detection],
    config: LevelConfig,
) -> EntityPlan:
    """Derive every spawn from the non-ground platforms, in staircase order.

    Raises:
        ValueError: if there are no non-ground platforms. The builder always
            produces at least min_platforms, so this means a caller bug.
    """
    if not real_platforms:
        raise ValueError("Cannot place entities without at least one non-ground platform")

    offset = config.entity_offset_y
    ground_spawn_y = config.ground_y - offset
    n = len(real_platforms)

    player = SpawnPoint(x=config.player_x, y=ground_spawn_y)

    # Highest = smallest y. min() keeps the first on ties.
    highest = min(real_platforms, key=lambda b: b.y)
    exit_spawn = SpawnPoint(
        x=clamp(highest.right - 0.04, *config.EXIT_X_RANGE),
        y=highest.y - offset,
    )

    placed = []
    size = config.collectible_size
    for i, det in enumerate(collectibles[:config.max_collectibles]):
        plat = real_platforms[i % n]
        placed.append((det, Bounds(
            x=clamp(plat.x + plat.w * 0.3, *config.COLLECTIBLE_X_RANGE),
            y=plat.y - 0.04,
            w=size,
            h=size,
        )))

    pickups = []
    for i, plat in enumerate(real_platforms[:config.max_pickups]):
        pickups.append(PickupSpawn(
            x=clamp(plat.center_x, *config.PICKUP_X_RANGE),
            y=plat.y - offset,
            type="health" if i == 0 else "coin",
        ))
    if len(pickups) < config.min_pickups:
        for x in config.GROUND_PICKUP_XS:
            pickups.append(PickupSpawn(x=x, y=ground_spawn_y, type="coin"))

    # Enemies roughly a third and two thirds of the way up
    enemy_platforms = [n // 3, (2 * n) // 3] if n >= 4 else [n // 3]
    enemies = []
    for idx in enemy_platforms:
        plat = real_platforms[idx]
        enemies.append(EnemySpawn(
            x=clamp(plat.center_x, *config.PICKUP_X_RANGE),
            y=plat.y - offset,
            type="walker",
        ))

    return EntityPlan(
        player=player,
        exit=exit_spawn,
        pickups=tuple(pickups),
        enemies=tuple(enemies),
        enemy_platforms=tuple(enemy_platforms),
        collectibles=tuple(placed),
    )


def assemble_scene(
    response: DetectionResponse,
    platforms: Sequence[PlatformDescriptor],
    entities: EntityPlan,
) -> SceneV1:
    """Emit SceneObjects for platforms (ground last) then collectibles.

    IDs share one counter in emission order: plat_0..plat_k, ground_k+1,
    col_k+2, ...
    """
    objects = []
    enemy_anchors = set(entities.enemy_platforms)
    real_index = 0

    for desc in platforms:
        if desc.is_ground:
            anchor = desc.info.enemy_anchor
            prefix = "ground"
        else:
            anchor = desc.info.enemy_anchor or real_index in enemy_anchors
            prefix = "plat"
            real_index += 1
        objects.append(SceneObject(
            id=f"{prefix}_{len(objects)}",
            type="platform",
            label=desc.info.label,
            confidence=desc.info.confidence,
            bounds_normalized=desc.bounds,
            surface_type="solid",
            category=desc.info.category,
            enemy_spawn_anchor=anchor,
        ))

    for det, bounds in entities.collectibles:
        objects.append(SceneObject(
            id=f"col_{len(objects)}",
            type="collectible",
            label=det.label,
            confidence=clamp(det.confidence, 0.0, 1.0),
            bounds_normalized=bounds,
            category="food",
        ))

    return SceneV1(
        image=response.image,
        objects=tuple(objects),
        spawns=Spawns(
            player=entities.player,
            exit=entities.exit,
            enemies=entities.enemies,
            pickups=entities.pickups,
        ),
        rules=(),
    )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------

class LevelBuilder:
    """Builds SceneV1 levels from detections.

    Holds configuration only. Each call derives its own seed and PRNG, so a
    single builder can serve concurrent requests.
    """

    def __init__(self, config: Optional[LevelConfig] = None):
        self.config = config or LevelConfig()

    def plan(
        self,
        response: Union[DetectionResponse, Dict[str, Any]],
        strategy: Optional[str] = None,
    ) -> LevelPlan:
        """Build a level and report the seed, strategy and counts used.

        Args:
            response: Detections for one photo (dataclass or wire dict).
            strategy: Force a layout strategy. The PRNG draw that would pick
                one still happens, so the rest of the level is unchanged.

        Raises:
            ValueError: if strategy is not a known layout strategy name.
        """
        if isinstance(response, dict):
            response = DetectionResponse.from_dict(response)
        if strategy is not None and strategy not in LAYOUT_STRATEGIES:
            raise ValueError(f"Unknown layout strategy: {strategy}")

        config = self.config
        seed = derive_seed(response)
        rng = Mulberry32.from_seed(seed)

        infos, collectibles = classify_detections(response.detections, config)
        vert_step = vertical_step(len(infos), config)

        chosen = choose_strategy(rng)
        strategy = strategy or chosen
        rows = LAYOUT_STRATEGIES[strategy](rng, infos, vert_step, config)
        staircase = [PlatformDescriptor(info=info, bounds=b) for info, b in zip(infos, rows)]

        staircase = inject_bonus_platforms(rng, staircase, config)
        bonus_count = len(staircase) - len(infos)
        platforms = with_ground(staircase, config)

        real = [desc.bounds for desc in platforms if not desc.is_ground]
        entities = place_entities(real, collectibles, config)
        scene = assemble_scene(response, platforms, entities)

        logger.debug(
            "Built level seed=%d strategy=%s platforms=%d bonus=%d collectibles=%d enemies=%d",
            seed, strategy, len(infos), bonus_count,
            len(entities.collectibles), len(entities.enemies),
        )

        return LevelPlan(
            scene=scene,
            seed=seed,
            strategy=strategy,
            vert_step=vert_step,
            platform_count=len(infos),
            bonus_count=bonus_count,
        )

    def build(self, response: Union[DetectionResponse, Dict[str, Any]]) -> SceneV1:
        """Build the SceneV1 for one photo's detections."""
        return self.plan(response).scene


def build_level(
    response: Union[DetectionResponse, Dict[str, Any]],
    config: Optional[LevelConfig] = None,
) -> SceneV1:
    """Build a completable SceneV1 from one photo's detections."""
    return LevelBuilder(config).build(response)
