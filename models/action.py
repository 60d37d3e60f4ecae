"""
Timed actions and their outcomes.
"""

import enum
from dataclasses import dataclass

from config import ACTION_SETTINGS
from models.player import Side


class ActionKind(enum.Enum):
    """
    Discrete things a player can do.

    - RESONANCE: a timed press scored against beat proximity
    - DASH: a timed movement burst, also judged against the beat
    - KNOCKBACK: reported by the physics layer when one player hits the other
    """
    RESONANCE = "resonance"
    DASH = "dash"
    KNOCKBACK = "knockback"


class BeatQuality(enum.Enum):
    """How well an action lined up with the pulse."""
    PERFECT = "perfect"
    GOOD = "good"
    MISS = "miss"
    COOLDOWN = "cooldown"


# Standard ledger points per resonance quality
RESONANCE_POINTS = {
    BeatQuality.PERFECT: 3,
    BeatQuality.GOOD: 1,
    BeatQuality.MISS: 0,
    BeatQuality.COOLDOWN: 0,
}

# Echo meter change applied after a dash fires
DASH_FITNESS_DELTAS = {
    BeatQuality.PERFECT: ACTION_SETTINGS.dash_perfect_bonus,
    BeatQuality.GOOD: ACTION_SETTINGS.dash_good_bonus,
    BeatQuality.MISS: -ACTION_SETTINGS.dash_miss_penalty,
}


@dataclass(frozen=True)
class OutcomeEvent:
    """One resolved action, handed to presentation layers."""
    side: Side
    kind: ActionKind
    quality: BeatQuality
    points_awarded: int = 0
    timestamp_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "player_id": self.side.value,
            "kind": self.kind.value,
            "quality": self.quality.value,
            "points_awarded": self.points_awarded,
            "timestamp_ms": self.timestamp_ms,
        }
