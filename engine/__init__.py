"""
Echoes Game Engine

Timing, scoring and round logic for the Echoes duel.
This module contains no rendering or audio dependencies.
"""

from engine.beat_clock import BeatClock
from engine.regularity import RegularityTracker
from engine.actions import ActionResolver
from engine.scoring import ScoringLedger
from engine.rules import RulesEngine
from engine.modes import GameMode, ModeNotice, PulseZone
from engine.sequencer import RoundSequencer
from engine.motion import ArcadeMotion
from engine.session import MatchSession, SessionState, SessionSnapshot
from engine.timer import FrameDriver

__all__ = [
    "BeatClock",
    "RegularityTracker",
    "ActionResolver",
    "ScoringLedger",
    "RulesEngine",
    "GameMode",
    "ModeNotice",
    "PulseZone",
    "RoundSequencer",
    "ArcadeMotion",
    "MatchSession",
    "SessionState",
    "SessionSnapshot",
    "FrameDriver",
]
