"""
Event Bus - Central signal hub for inter-module communication.

The game core, the frame driver and any presentation layer (renderer,
audio, result screens) connect to this single object rather than to each
other.
"""

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """
    Central signal hub for Echoes.

    The EventBus acts as a mediator between components:
    - MatchSession emits outcomes, round and session results
    - FrameDriver emits frame ticks
    - Renderers and audio listen and react

    Usage:
        # In EchoesApp
        session.outcome_resolved.connect(bus.outcome_resolved.emit)

        # In an audio layer
        bus.beat_cue.connect(self._play_beat)
    """

    # ============ Session Lifecycle ============
    session_started = Signal()
    session_completed = Signal(dict)    # SessionSummary dict

    # ============ Round Lifecycle ============
    round_started = Signal(str)         # mode id
    round_ended = Signal(dict)          # RoundSummary dict

    # ============ Gameplay Events ============
    outcome_resolved = Signal(dict)     # {player_id, kind, quality, points_awarded, timestamp_ms}
    score_updated = Signal(object)      # SessionSnapshot
    carrier_changed = Signal(str)       # side id
    dissonance_shifted = Signal()

    # ============ Timing Events ============
    frame_tick = Signal(float, float)   # timestamp_ms, delta_ms
    beat_cue = Signal(float)            # timestamp_ms

    # ============ System Events ============
    system_message = Signal(str, str)   # (level, message) - e.g., ("info", "Round started")

    def __init__(self):
        super().__init__()

    def emit_outcome(self, outcome) -> None:
        """Convenience method to emit an OutcomeEvent as a plain dict."""
        self.outcome_resolved.emit(outcome.to_dict())

    def emit_message(self, level: str, message: str) -> None:
        """Emit a system message (info, warning, error)."""
        self.system_message.emit(level, message)
