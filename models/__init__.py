"""
Echoes Data Models

Plain state objects and validation schemas shared by the engine.
"""

from models.speed_history import SpeedHistory
from models.player import PlayerState, Side, clamp_fitness
from models.action import (
    ActionKind, BeatQuality, OutcomeEvent, RESONANCE_POINTS, DASH_FITNESS_DELTAS,
)
from models.match import (
    ModeKind, ModeIntro, MODE_INTROS, Winner, ScorePair, ModeResult, FinalResult,
)

__all__ = [
    "SpeedHistory",
    "PlayerState",
    "Side",
    "clamp_fitness",
    "ActionKind",
    "BeatQuality",
    "OutcomeEvent",
    "RESONANCE_POINTS",
    "DASH_FITNESS_DELTAS",
    "ModeKind",
    "ModeIntro",
    "MODE_INTROS",
    "Winner",
    "ScorePair",
    "ModeResult",
    "FinalResult",
]
