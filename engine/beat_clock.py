"""
Beat Clock - Shared periodic pulse both players play against.

Phase math is pure: proximity is a triangular wave that peaks at 1.0 on
every beat instant and bottoms out at 0.0 half a period later.
"""

from typing import Optional

from config import BEAT_SETTINGS
from models.action import BeatQuality


class BeatClock:
    """
    Periodic phase generator and beat window classifier.

    Usage:
        clock = BeatClock()
        clock.start(timestamp_ms)

        if clock.is_perfect_beat(now_ms):
            ...
    """

    PERIOD_MS = BEAT_SETTINGS.period_ms
    ON_BEAT_THRESHOLD = BEAT_SETTINGS.on_beat_threshold
    PERFECT_THRESHOLD = BEAT_SETTINGS.perfect_threshold

    def __init__(self, period_ms: float = None):
        self.period_ms = float(period_ms or self.PERIOD_MS)
        self._start_ms: Optional[float] = None
        self.dissonant = False

    @property
    def start_ms(self) -> Optional[float]:
        """Timestamp the clock was started at, or None before start()."""
        return self._start_ms

    @property
    def is_started(self) -> bool:
        return self._start_ms is not None

    def start(self, timestamp_ms: float) -> None:
        """Anchor beat zero at the given timestamp."""
        self._start_ms = float(timestamp_ms)

    def phase(self, timestamp_ms: float) -> float:
        """Position within the current beat, in [0, 1). 0 before start()."""
        if self._start_ms is None:
            return 0.0
        phase = ((timestamp_ms - self._start_ms) % self.period_ms) / self.period_ms
        # Float modulo of tiny negatives can land exactly on 1.0
        if phase >= 1.0:
            phase = 0.0
        return phase

    def beat_proximity(self, timestamp_ms: float) -> float:
        """1.0 on the beat, 0.0 halfway between beats."""
        phase = self.phase(timestamp_ms)
        return 1.0 - 2.0 * min(phase, 1.0 - phase)

    def is_on_beat(self, timestamp_ms: float) -> bool:
        return self.beat_proximity(timestamp_ms) > self.ON_BEAT_THRESHOLD

    def is_perfect_beat(self, timestamp_ms: float) -> bool:
        return self.beat_proximity(timestamp_ms) > self.PERFECT_THRESHOLD

    def classify(self, timestamp_ms: float) -> BeatQuality:
        """Perfect, good or miss for an action at this timestamp."""
        proximity = self.beat_proximity(timestamp_ms)
        if proximity > self.PERFECT_THRESHOLD:
            return BeatQuality.PERFECT
        if proximity > self.ON_BEAT_THRESHOLD:
            return BeatQuality.GOOD
        return BeatQuality.MISS

    def toggle_dissonance(self) -> None:
        """Flip the dissonance flag. Has no effect on phase math."""
        self.dissonant = not self.dissonant
