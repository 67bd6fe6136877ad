"""Scene data model: detection input and the SceneV1 level description.

All coordinates are normalized (0..1), with (0, 0) the top-left of the photo.
Input types (Detection, DetectionResponse) come from the vision model and are
treated as untrusted. Output types (SceneObject, spawns, SceneV1) are
immutable once built; `to_dict()` produces the JSON wire shape and
`from_dict()` reads it back.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Dict, Any

from .geometry import clamp

CATEGORIES = ("furniture", "food", "plant", "electric", "other")
OBJECT_TYPES = ("platform", "obstacle", "collectible", "hazard", "decoration")
SURFACE_TYPES = ("solid", "bouncy", "slippery", "breakable", "soft")


@dataclass(frozen=True)
class Bounds:
    """Normalized rectangle, (x, y) is the top-left corner."""
    x: float
    y: float
    w: float
    h: float

    @property
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Bounds":
        return cls(
            x=float(d.get("x", 0.0)),
            y=float(d.get("y", 0.0)),
            w=float(d.get("w", 0.0)),
            h=float(d.get("h", 0.0)),
        )


@dataclass(frozen=True)
class ImageSize:
    w: int
    h: int

    def to_dict(self) -> Dict[str, int]:
        return {"w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ImageSize":
        return cls(w=d.get("w", 0), h=d.get("h", 0))


# ---------------------------------------------------------------------------
# Input: AI detections
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Detection:
    """One object reported by the vision model.

    Only category, label, confidence and width are trusted by the level
    builder. The reported x/y are discarded for layout (photo positions
    cluster in the centre and make unplayable levels) and only feed the seed.
    """
    label: str
    category: str
    confidence: float
    bounds_normalized: Bounds

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Detection":
        category = d.get("category", "other")
        if category not in CATEGORIES:
            category = "other"
        return cls(
            label=str(d.get("label", "")),
            category=category,
            confidence=float(d.get("confidence", 0.0)),
            bounds_normalized=Bounds.from_dict(d.get("bounds_normalized", {})),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "category": self.category,
            "confidence": self.confidence,
            "bounds_normalized": self.bounds_normalized.to_dict(),
        }


@dataclass(frozen=True)
class DetectionResponse:
    """Vision model output for one photo."""
    image: ImageSize
    detections: Tuple[Detection, ...] = ()

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionResponse":
        return cls(
            image=ImageSize.from_dict(d.get("image", {})),
            detections=tuple(Detection.from_dict(det) for det in d.get("detections", [])),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "image": self.image.to_dict(),
            "detections": [det.to_dict() for det in self.detections],
        }


# ---------------------------------------------------------------------------
# Output: SceneV1
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SceneObject:
    """A level object. Optional fields set to None are left out of the wire dict."""
    id: str
    type: str
    label: str
    confidence: float
    bounds_normalized: Bounds
    surface_type: Optional[str] = None
    category: Optional[str] = None
    enemy_spawn_anchor: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "type": self.type,
            "label": self.label,
            "confidence": self.confidence,
            "bounds_normalized": self.bounds_normalized.to_dict(),
        }
        for key in ("surface_type", "category", "enemy_spawn_anchor"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SceneObject":
        return cls(
            id=d["id"],
            type=d["type"],
            label=d.get("label", ""),
            confidence=clamp(float(d.get("confidence", 1.0)), 0.0, 1.0),
            bounds_normalized=Bounds.from_dict(d["bounds_normalized"]),
            surface_type=d.get("surface_type"),
            category=d.get("category"),
            enemy_spawn_anchor=d.get("enemy_spawn_anchor"),
        )


@dataclass(frozen=True)
class SpawnPoint:
    x: float
    y: float

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SpawnPoint":
        return cls(x=float(d["x"]), y=float(d["y"]))


@dataclass(frozen=True)
class EnemySpawn(SpawnPoint):
    type: str = "walker"

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "type": self.type}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "EnemySpawn":
        return cls(x=float(d["x"]), y=float(d["y"]), type=d.get("type", "walker"))


@dataclass(frozen=True)
class PickupSpawn(SpawnPoint):
    type: str = "coin"

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "type": self.type}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "PickupSpawn":
        return cls(x=float(d["x"]), y=float(d["y"]), type=d.get("type", "coin"))


@dataclass(frozen=True)
class Spawns:
    player: SpawnPoint
    exit: SpawnPoint
    enemies: Tuple[EnemySpawn, ...] = ()
    pickups: Tuple[PickupSpawn, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player": self.player.to_dict(),
            "exit": self.exit.to_dict(),
            "enemies": [e.to_dict() for e in self.enemies],
            "pickups": [p.to_dict() for p in self.pickups],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Spawns":
        return cls(
            player=SpawnPoint.from_dict(d["player"]),
            exit=SpawnPoint.from_dict(d["exit"]),
            enemies=tuple(EnemySpawn.from_dict(e) for e in d.get("enemies", [])),
            pickups=tuple(PickupSpawn.from_dict(p) for p in d.get("pickups", [])),
        )


@dataclass(frozen=True)
class SceneV1:
    """A complete level. Created once per photo and never mutated."""
    image: ImageSize
    objects: Tuple[SceneObject, ...]
    spawns: Spawns
    rules: Tuple[Any, ...] = ()
    version: int = field(default=1)

    def objects_of_type(self, object_type: str) -> List[SceneObject]:
        return [obj for obj in self.objects if obj.type == object_type]

    @property
    def platforms(self) -> List[SceneObject]:
        return self.objects_of_type("platform")

    @property
    def collectibles(self) -> List[SceneObject]:
        return self.objects_of_type("collectible")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "image": self.image.to_dict(),
            "objects": [obj.to_dict() for obj in self.objects],
            "spawns": self.spawns.to_dict(),
            "rules": list(self.rules),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SceneV1":
        return cls(
            version=d.get("version", 1),
            image=ImageSize.from_dict(d["image"]),
            objects=tuple(SceneObject.from_dict(o) for o in d.get("objects", [])),
            spawns=Spawns.from_dict(d["spawns"]),
            rules=tuple(d.get("rules", [])),
        )
