"""
Regularity Tracker - Derives echo meter drift from movement rhythm.

Steady movement (small spread of recent speeds) slowly fills the echo
meter; erratic movement drains it.
"""

from config import FITNESS_SETTINGS
from models.player import PlayerState
from models.speed_history import SpeedHistory


class RegularityTracker:
    """
    Per-player fitness drift computed from a bounded speed history.

    The tracker reads and writes the player's own SpeedHistory so the
    history lives and dies with the PlayerState.
    """

    MIN_SAMPLES = FITNESS_SETTINGS.min_samples
    PIVOT = FITNESS_SETTINGS.regularity_pivot
    GAIN = FITNESS_SETTINGS.regularity_gain

    def __init__(self, history: SpeedHistory):
        self.history = history

    @classmethod
    def for_player(cls, player: PlayerState) -> "RegularityTracker":
        return cls(player.speed_history)

    def record_speed(self, speed: float) -> None:
        """Push one speed sample, evicting the oldest when full."""
        self.history.push(speed)

    def regularity_bonus(self) -> float:
        """clamp((pivot - mean_abs_deviation) / pivot, -1, 1)."""
        deviation = self.history.mean_abs_deviation()
        bonus = (self.PIVOT - deviation) / self.PIVOT
        return max(-1.0, min(1.0, bonus))

    def fitness_delta(self, delta_ms: float) -> float:
        """Fitness change for a step of delta_ms. 0 below MIN_SAMPLES samples."""
        if self.history.size < self.MIN_SAMPLES:
            return 0.0
        return self.regularity_bonus() * delta_ms * self.GAIN

    def update(self, player: PlayerState, delta_ms: float) -> float:
        """
        Record the player's current speed and apply the resulting drift.

        Returns:
            The player's clamped fitness after the update
        """
        self.record_speed(player.speed)
        return player.adjust_fitness(self.fitness_delta(delta_ms))
