"""
Echoes Application Controller

Top-level controller that wires together all application components.
"""

import logging
from typing import Optional

from PySide6.QtCore import QObject

from services.event_bus import EventBus
from services.autopilot import Autopilot
from engine.session import MatchSession
from engine.timer import FrameDriver
from models.match import ModeResult, FinalResult
from models.schemas import RoundSummary, SessionSummary

logger = logging.getLogger(__name__)


class EchoesApp(QObject):
    """
    Top-level application controller.
    Wires the frame driver, the session and the event bus together and
    moves the session from round to round.
    """

    def __init__(self, seed: Optional[int] = None, use_autopilot: bool = True):
        super().__init__()

        # Core services
        self.event_bus = EventBus()
        self.session = MatchSession()
        self.driver = FrameDriver()

        # Scripted input (headless play)
        self.autopilot = Autopilot(self.session, seed=seed) if use_autopilot else None

        self._next_round_due = False
        self.final: Optional[FinalResult] = None

        # Frame order: pending round start -> input -> session step
        self.driver.tick.connect(self._on_frame)
        self.driver.tick.connect(self.event_bus.frame_tick.emit)

        # Wire up signals to event bus
        self.session.score_updated.connect(self.event_bus.score_updated.emit)
        self.session.outcome_resolved.connect(self.event_bus.emit_outcome)
        self.session.round_started.connect(self.event_bus.round_started.emit)
        self.session.carrier_changed.connect(self.event_bus.carrier_changed.emit)
        self.session.dissonance_shifted.connect(self.event_bus.dissonance_shifted.emit)
        self.session.beat_cue.connect(self.event_bus.beat_cue.emit)

        self.session.round_ended.connect(self._on_round_ended)
        self.session.session_completed.connect(self._on_session_completed)

    def start_session(self, timestamp_ms: float = 0.0) -> None:
        """Reset the session and start its first round."""
        self.final = None
        self._next_round_due = False
        self.session.start_session()
        self.event_bus.session_started.emit()
        self.session.start_round(timestamp_ms=timestamp_ms)

    def start(self) -> None:
        """Start a session driven by the real-time frame clock."""
        self.start_session(0.0)
        self.driver.start()

    def run_headless(self, step_ms: float = None) -> FinalResult:
        """
        Play a whole session as fast as possible with fixed-size steps.

        Returns:
            The session's FinalResult
        """
        step_ms = float(step_ms or self.driver.interval_ms)
        self.start_session(0.0)
        now = 0.0
        while self.final is None:
            now += step_ms
            self.driver.advance(now)
        return self.final

    def stop(self) -> None:
        self.driver.stop()

    def _on_frame(self, timestamp_ms: float, delta_ms: float) -> None:
        if self._next_round_due:
            self._next_round_due = False
            self.session.start_round(timestamp_ms=timestamp_ms)
        if self.autopilot is not None:
            self.autopilot.on_tick(timestamp_ms, delta_ms)
        self.session.step(timestamp_ms, delta_ms)

    def _on_round_ended(self, result: ModeResult) -> None:
        summary = RoundSummary.from_result(result)
        self.event_bus.round_ended.emit(summary.model_dump())
        self.event_bus.emit_message(
            "info", f"{summary.title}: {summary.winner} ({result.scores.p1}-{result.scores.p2})"
        )
        if not self.session.is_session_complete():
            self._next_round_due = True

    def _on_session_completed(self, final: FinalResult) -> None:
        self.final = final
        self.driver.stop()
        self.event_bus.session_completed.emit(SessionSummary.from_result(final).model_dump())
