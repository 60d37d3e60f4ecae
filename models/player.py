"""
Player state for one round of Echoes.
"""

import enum
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from config import FITNESS_SETTINGS
from models.speed_history import SpeedHistory


class Side(enum.Enum):
    """The two player slots."""
    P1 = "p1"
    P2 = "p2"

    @property
    def opponent(self) -> "Side":
        """The other player slot."""
        return Side.P2 if self is Side.P1 else Side.P1


def clamp_fitness(value: float) -> float:
    """Clamp a fitness value into the allowed echo meter range."""
    return min(FITNESS_SETTINGS.maximum, max(FITNESS_SETTINGS.minimum, float(value)))


@dataclass
class PlayerState:
    """
    A player's live state, created at round start and discarded at round end.

    Fitness (the echo meter) is only ever written through set_fitness()
    or adjust_fitness(), both of which clamp to [0, 100].

    Attributes:
        side: Which player slot this is
        position: Field position as a 2-element float array
        velocity: Velocity as a 2-element float array
        speed_history: Most recent scalar speeds
        last_resonance_ms: Timestamp of the last accepted resonance (None = never)
        last_dash_ms: Timestamp of the last dash attempt past cooldown (None = never)
        is_carrier: Echo Chase carrier marker
    """
    side: Side
    position: np.ndarray = field(default_factory=lambda: np.zeros(2))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(2))
    speed_history: SpeedHistory = field(
        default_factory=lambda: SpeedHistory(FITNESS_SETTINGS.history_capacity)
    )
    last_resonance_ms: Optional[float] = None
    last_dash_ms: Optional[float] = None
    is_carrier: bool = False
    _fitness: float = field(default=FITNESS_SETTINGS.initial, repr=False)

    def __post_init__(self) -> None:
        self.position = np.asarray(self.position, dtype=float).copy()
        self.velocity = np.asarray(self.velocity, dtype=float).copy()
        self._fitness = clamp_fitness(self._fitness)

    @classmethod
    def spawn(cls, side: Side, position: tuple[float, float],
              fitness: float = FITNESS_SETTINGS.initial) -> "PlayerState":
        """Create a fresh player at a spawn point."""
        player = cls(side=side, position=np.array(position, dtype=float))
        player.set_fitness(fitness)
        return player

    @property
    def fitness(self) -> float:
        """Current echo meter value in [0, 100]."""
        return self._fitness

    def set_fitness(self, value: float) -> float:
        """Write the echo meter, clamped. Returns the stored value."""
        self._fitness = clamp_fitness(value)
        return self._fitness

    def adjust_fitness(self, delta: float) -> float:
        """Add delta to the echo meter, clamped. Returns the stored value."""
        return self.set_fitness(self._fitness + delta)

    @property
    def speed(self) -> float:
        """Scalar velocity magnitude."""
        return float(np.hypot(self.velocity[0], self.velocity[1]))

    @property
    def meets_scoring_threshold(self) -> bool:
        """True when fitness is high enough for resonance to score."""
        return self._fitness >= FITNESS_SETTINGS.scoring_threshold

    def distance_to(self, other: "PlayerState") -> float:
        """Euclidean distance to another player."""
        return float(np.linalg.norm(self.position - other.position))
