"""Per-photo seed derivation and the seeded PRNG used by the level builder.

The same detections (by value) always produce the same seed, and the same
seed always produces the same level. There is no module-level generator:
each build creates its own Mulberry32 so concurrent builds never interfere.
"""

from dataclasses import dataclass
from typing import Sequence, TypeVar

from .geometry import to_int32, to_uint32, imul, round_half_up
from .scene import DetectionResponse

T = TypeVar("T")

WIDTH_PRIME = 7919
HEIGHT_PRIME = 6271
HASH_MULTIPLIER = 31
MULBERRY_INCREMENT = 0x6D2B79F5
TWO_POW_32 = 4294967296.0


def derive_seed(response: DetectionResponse) -> int:
    """Signed 32-bit seed from image size and each detection's label/position.

    Positions are rounded to thousandths so float noise below that does not
    change the level.
    """
    seed = to_int32(
        int(response.image.w) * WIDTH_PRIME + int(response.image.h) * HEIGHT_PRIME
    )
    for det in response.detections:
        bounds = det.bounds_normalized
        seed = to_int32(seed * HASH_MULTIPLIER + len(det.label))
        seed = to_int32(seed * HASH_MULTIPLIER + round_half_up(bounds.x * 1000))
        seed = to_int32(seed * HASH_MULTIPLIER + round_half_up(bounds.y * 1000))
    return seed


@dataclass
class Mulberry32:
    """Small deterministic generator. State is a single unsigned 32-bit int."""
    state: int

    def __post_init__(self):
        self.state = to_uint32(self.state)

    @classmethod
    def from_seed(cls, seed: int) -> "Mulberry32":
        return cls(state=seed)

    def next_float(self) -> float:
        """Advance the state and return a float in [0, 1)."""
        self.state = to_uint32(self.state + MULBERRY_INCREMENT)
        a = self.state
        t = imul(a ^ (a >> 15), 1 | a)
        t = to_uint32(t + imul(t ^ (t >> 7), 61 | t)) ^ t
        return to_uint32(t ^ (t >> 14)) / TWO_POW_32

    def uniform(self, lo: float, hi: float) -> float:
        return lo + (hi - lo) * self.next_float()

    def chance(self, probability: float) -> bool:
        return self.next_float() < probability

    def index(self, n: int) -> int:
        """Uniform integer in [0, n)."""
        assert n > 0
        return min(int(self.next_float() * n), n - 1)

    def choice(self, seq: Sequence[T]) -> T:
        return seq[self.index(len(seq))]

    def snapshot(self) -> int:
        return self.state

    def restore(self, state: int) -> None:
        self.state = to_uint32(state)
