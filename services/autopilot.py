"""
Autopilot - Scripted input for headless sessions.

Steers both players around the field and presses resonance/dash with a
configurable sense of rhythm, so a session can run end to end without a
keyboard.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from engine.session import MatchSession
from models.action import ActionKind
from models.player import Side


@dataclass
class PilotProfile:
    """How one scripted player behaves."""
    # Chance per step of pressing resonance when the clock is near the beat
    timing_skill: float = 0.6
    # Chance per step of an off-beat press
    noise: float = 0.002
    # Chance per step of attempting a dash
    dash_rate: float = 0.004
    # Chance per step of picking a new heading
    turn_rate: float = 0.02


class Autopilot:
    """
    Feeds directions and actions into a MatchSession before every step.

    Usage:
        pilot = Autopilot(session, seed=7)
        driver.tick.connect(pilot.on_tick)   # connect before session.step
        driver.tick.connect(session.step)
    """

    def __init__(self, session: MatchSession, seed: Optional[int] = None,
                 profiles: Optional[dict[Side, PilotProfile]] = None):
        self.session = session
        self._rng = np.random.default_rng(seed)
        self.profiles = profiles or {Side.P1: PilotProfile(), Side.P2: PilotProfile(timing_skill=0.45)}
        self._headings = {side: self._random_heading() for side in Side}

    def _random_heading(self) -> np.ndarray:
        angle = self._rng.uniform(0.0, 2.0 * np.pi)
        return np.array([np.cos(angle), np.sin(angle)])

    def on_tick(self, timestamp_ms: float, delta_ms: float) -> None:
        """Queue this frame's input for both players."""
        session = self.session
        if session.clock is None or not session.players:
            return

        near_beat = session.clock.is_on_beat(timestamp_ms)
        for side, profile in self.profiles.items():
            if self._rng.random() < profile.turn_rate:
                self._headings[side] = self._random_heading()
            heading = self._headings[side]
            session.set_direction(side, float(heading[0]), float(heading[1]))

            press_chance = profile.timing_skill * 0.1 if near_beat else profile.noise
            if self._rng.random() < press_chance:
                session.queue_action(side, ActionKind.RESONANCE)
            if self._rng.random() < profile.dash_rate:
                session.queue_action(side, ActionKind.DASH)
