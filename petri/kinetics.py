"""
Gray-Scott kinetics. A is the substrate, B the autocatalyst: A + 2B -> 3B at rate A*B^2.
A is fed toward 1 at feed_rate; B is removed at kill_rate + feed_rate.
"""

from dataclasses import asdict, dataclass, fields

import numpy as np

from petri.constants import (
    DEFAULT_DIFFUSION_A,
    DEFAULT_DIFFUSION_B,
    DEFAULT_FEED_RATE,
    DEFAULT_KILL_RATE,
    DEFAULT_SPEED,
)


@dataclass(frozen=True)
class ReactionParams:
    diffusion_a: float = DEFAULT_DIFFUSION_A
    diffusion_b: float = DEFAULT_DIFFUSION_B
    feed_rate: float = DEFAULT_FEED_RATE
    kill_rate: float = DEFAULT_KILL_RATE
    speed: float = DEFAULT_SPEED

    @classmethod
    def from_dict(cls, data: dict | None) -> "ReactionParams":
        """Build from a config section; unknown keys are ignored, missing keys take defaults."""
        data = data or {}
        known = {f.name for f in fields(cls)}
        return cls(**{k: float(v) for k, v in data.items() if k in known})

    def as_dict(self) -> dict:
        return asdict(self)


def react(
    a: np.ndarray,
    b: np.ndarray,
    lap_a: np.ndarray,
    lap_b: np.ndarray,
    params: ReactionParams,
) -> tuple[np.ndarray, np.ndarray]:
    """One explicit Euler update for a block of cells. Inputs are read-only; returns new (A, B)."""
    rate = a * b * b
    new_a = a + params.speed * (params.diffusion_a * lap_a - rate + params.feed_rate * (1.0 - a))
    new_b = b + params.speed * (params.diffusion_b * lap_b + rate - (params.kill_rate + params.feed_rate) * b)
    return new_a, new_b
