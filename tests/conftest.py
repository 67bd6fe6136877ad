"""Pytest configuration and shared fixtures."""

import random

import pytest

from photo_platformer.config import LevelConfig, PhysicsConfig
from photo_platformer.level_gen import LevelBuilder
from photo_platformer.scene import (
    Bounds,
    Detection,
    DetectionResponse,
    ImageSize,
    SceneObject,
    SceneV1,
    SpawnPoint,
    Spawns,
)

CATEGORIES = ["furniture", "food", "plant", "electric", "other"]


def make_detection(label="chair", category="furniture", w=0.2, x=0.4, y=0.5, confidence=0.9):
    return Detection(
        label=label,
        category=category,
        confidence=confidence,
        bounds_normalized=Bounds(x=x, y=y, w=w, h=0.1),
    )


def make_response(detections=(), w=1024, h=768):
    return DetectionResponse(image=ImageSize(w=w, h=h), detections=tuple(detections))


def random_response(seed):
    """A noisy detection list, the way a vision model might return it."""
    r = random.Random(seed)
    detections = []
    for i in range(r.randint(0, 14)):
        detections.append(Detection(
            label=r.choice(["sofa", "lamp", "apple", "fern", "tv", "box", "mug"]) + str(i),
            category=r.choice(CATEGORIES),
            confidence=r.uniform(-0.2, 1.2),
            bounds_normalized=Bounds(
                x=r.random(), y=r.random(), w=r.uniform(0.0, 0.9), h=r.random(),
            ),
        ))
    return make_response(detections, w=r.randint(200, 4000), h=r.randint(200, 4000))


def make_scene(platform_ys, exit_y, player_y=0.86):
    """Minimal scene: one platform per y plus an exit, no ground object."""
    objects = tuple(
        SceneObject(
            id=f"plat_{i}",
            type="platform",
            label="ledge",
            confidence=1.0,
            bounds_normalized=Bounds(x=0.1, y=y, w=0.2, h=0.03),
            surface_type="solid",
        )
        for i, y in enumerate(platform_ys)
    )
    return SceneV1(
        image=ImageSize(w=1000, h=1000),
        objects=objects,
        spawns=Spawns(player=SpawnPoint(0.08, player_y), exit=SpawnPoint(0.7, exit_y)),
    )


@pytest.fixture
def level_config():
    """Default level configuration."""
    return LevelConfig()


@pytest.fixture
def physics_config():
    """Default physics configuration."""
    return PhysicsConfig()


@pytest.fixture
def builder():
    return LevelBuilder()


@pytest.fixture
def empty_response():
    return make_response()


@pytest.fixture
def furniture_response():
    """Eight furniture detections, no food."""
    return make_response([
        make_detection(label=f"chair{i}", w=0.05 * (i + 1), x=0.1 * i, y=0.05 * i)
        for i in range(8)
    ])


@pytest.fixture
def mixed_response():
    """Furniture, plants, electrics and seven food items."""
    detections = [
        make_detection("sofa", "furniture", w=0.5),
        make_detection("fern", "plant", w=0.1),
        make_detection("tv", "electric", w=0.3),
    ]
    detections += [make_detection(f"apple{i}", "food", w=0.05) for i in range(7)]
    return make_response(detections)
