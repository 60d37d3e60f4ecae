"""
Match Session - Step-driven game core for one Echoes session.

The MatchSession runs independently of any renderer. An external clock
calls step() once per frame; everything inside a step runs synchronously
in a fixed order:

    clock phase -> movement/fitness -> actions -> mode update -> end check

Misuse of the lifecycle (stepping with no round, ending a round that is
still running) degrades to an empty result and a log warning.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np
from PySide6.QtCore import QObject, Signal

from config import BEAT_SETTINGS, FIELD_SETTINGS
from engine.actions import ActionResolver
from engine.beat_clock import BeatClock
from engine.modes import GameMode
from engine.motion import ArcadeMotion
from engine.regularity import RegularityTracker
from engine.scoring import ScoringLedger
from engine.sequencer import RoundSequencer
from models.action import ActionKind, BeatQuality, OutcomeEvent
from models.match import ModeKind, ModeResult, FinalResult
from models.player import PlayerState, Side
from models.schemas import ActionEventIn, DirectionIn, CollisionIn, MotionIn

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State machine states for the session lifecycle."""
    IDLE = "idle"
    READY = "ready"
    ROUND_ACTIVE = "round_active"
    ROUND_COMPLETE = "round_complete"
    COMPLETED = "completed"


@dataclass
class SessionSnapshot:
    """
    Snapshot of the session for presentation layers.
    Emitted whenever scores change.
    """
    state: SessionState = SessionState.IDLE
    mode: Optional[str] = None
    round_number: int = 0
    total_rounds: int = 0
    round_p1: int = 0
    round_p2: int = 0
    total_p1: int = 0
    total_p2: int = 0
    p1_fitness: float = 0.0
    p2_fitness: float = 0.0
    carrier: Optional[str] = None
    time_remaining_ms: float = 0.0
    dissonant: bool = False


class MatchSession(QObject):
    """
    Owns the beat clock, players, ledger, active mode and the sequencer
    for one session. Emits Qt Signals so outer layers can react without
    polling.

    Usage:
        session = MatchSession()
        session.start_session()
        session.start_round(timestamp_ms=now)

        # every frame
        session.set_direction("p1", 1.0, 0.0)
        session.queue_action("p1", "resonance")
        outcomes = session.step(now, delta)

        if session.is_session_complete():
            final = session.final_result()
    """

    # Signals
    outcome_resolved = Signal(object)       # OutcomeEvent
    round_started = Signal(str)             # mode id
    round_ended = Signal(object)            # ModeResult
    session_completed = Signal(object)      # FinalResult
    dissonance_shifted = Signal()
    carrier_changed = Signal(str)           # side id
    beat_cue = Signal(float)                # timestamp of the perfect beat
    state_changed = Signal(str)             # new state name
    score_updated = Signal(object)          # SessionSnapshot

    BEAT_CUE_GAP_MS = BEAT_SETTINGS.beat_cue_gap_ms

    def __init__(self, motion: Optional[ArcadeMotion] = None, use_builtin_motion: bool = True):
        """
        Initialize the session.

        Args:
            motion: Movement integrator; defaults to ArcadeMotion
            use_builtin_motion: False when an external physics layer
                reports positions through report_motion()
        """
        super().__init__()
        self.resolver = ActionResolver()
        self.motion = (motion or ArcadeMotion()) if use_builtin_motion else None
        self.sequencer = RoundSequencer()
        self._state = SessionState.IDLE
        self._now_ms: float = 0.0
        self._reset_round_state()

    def _reset_round_state(self) -> None:
        """Drop everything that belongs to a single round."""
        self.clock: Optional[BeatClock] = None
        self.ledger = ScoringLedger()
        self.mode: Optional[GameMode] = None
        self.players: dict[Side, PlayerState] = {}
        self._trackers: dict[Side, RegularityTracker] = {}
        self._directions: dict[Side, np.ndarray] = {}
        self._pending: list[tuple[Side, ActionKind]] = []
        self._last_beat_cue_ms: Optional[float] = None
        self._round_result: Optional[ModeResult] = None

    @property
    def state(self) -> SessionState:
        """Current state of the session."""
        return self._state

    @state.setter
    def state(self, new_state: SessionState) -> None:
        """Set the session state and emit signal."""
        self._state = new_state
        self.state_changed.emit(new_state.value)

    # ============ Session Surface ============

    def start_session(self) -> None:
        """Begin a fresh session: rewind the mode order and zero the totals."""
        if self.mode is not None and not self.mode.is_ended:
            self.mode.cleanup()
        self.sequencer.reset()
        self._reset_round_state()
        self.state = SessionState.READY
        logger.info("Session started: %s",
                    ", ".join(m.value for m in self.sequencer.modes))

    def start_round(self, mode_id=None, timestamp_ms: float = None) -> Optional[ModeKind]:
        """
        Start the next round of the session.

        Each call consumes the next slot of the fixed mode order. Passing
        mode_id plays that mode in the slot instead; an unknown id falls
        back to Pulse Duel.

        Args:
            mode_id: Optional mode override (ModeKind or its string id)
            timestamp_ms: Round start time (defaults to the last step time)

        Returns:
            The mode now being played, or None if no round could start
        """
        if self.state not in (SessionState.READY, SessionState.ROUND_COMPLETE):
            logger.warning("Cannot start round from state: %s", self.state.value)
            return None

        slot = self.sequencer.next_mode()
        if slot is None:
            logger.warning("No rounds left in this session")
            return None

        if mode_id is None:
            kind = slot
        else:
            if not ModeKind.is_known(mode_id):
                logger.warning("Unknown mode %r, falling back to %s",
                               mode_id, ModeKind.PULSE_DUEL.value)
            kind = ModeKind.from_id(mode_id)

        start_ms = self._now_ms if timestamp_ms is None else float(timestamp_ms)
        self._now_ms = start_ms
        self._reset_round_state()

        self.clock = BeatClock()
        self.clock.start(start_ms)
        self.players = {
            Side.P1: PlayerState.spawn(Side.P1, FIELD_SETTINGS.p1_spawn),
            Side.P2: PlayerState.spawn(Side.P2, FIELD_SETTINGS.p2_spawn),
        }
        self._trackers = {
            side: RegularityTracker.for_player(player) for side, player in self.players.items()
        }
        self._directions = {side: np.zeros(2) for side in self.players}

        self.mode = GameMode(kind, self.clock, self.ledger, self.players)
        self.mode.setup(start_ms)
        self._dispatch_notices()

        self.state = SessionState.ROUND_ACTIVE
        self.round_started.emit(kind.value)
        logger.info("Round %d/%d started: %s",
                    self.sequencer.cursor, len(self.sequencer.modes), kind.display_name)
        self._emit_score_update()
        return kind

    def step(self, timestamp_ms: float, delta_ms: float) -> list[OutcomeEvent]:
        """
        Advance the active round by one frame.

        Returns:
            Outcome events resolved during this step (empty if no round is active)
        """
        self._now_ms = float(timestamp_ms)
        if self.state != SessionState.ROUND_ACTIVE:
            self._pending.clear()
            return []

        scores_before = self.ledger.scores

        # Clock phase
        self._check_beat_cue(timestamp_ms)

        # Movement and fitness
        for side, player in self.players.items():
            if self.motion is not None:
                self.motion.integrate(player, self._directions[side], delta_ms)
            self._trackers[side].update(player, delta_ms)

        # Discrete actions
        outcomes = [self._resolve_action(side, kind, timestamp_ms)
                    for side, kind in self._pending]
        outcomes = [o for o in outcomes if o is not None]
        self._pending.clear()

        # Mode rules
        self.mode.update(timestamp_ms, delta_ms)
        self._dispatch_notices()

        for outcome in outcomes:
            self.outcome_resolved.emit(outcome)

        # Termination
        result = self.mode.check_end(timestamp_ms)
        if result is not None:
            self._finish_round(result)
        elif self.ledger.scores != scores_before:
            self._emit_score_update()

        return outcomes

    def end_round(self) -> Optional[ModeResult]:
        """
        Result of the current round.

        Idempotent: once a round has ended every call returns the same
        result and nothing is counted twice. Returns None while the round
        is still running.
        """
        if self._round_result is not None:
            return self._round_result

        if self.state != SessionState.ROUND_ACTIVE:
            logger.warning("No round to end in state: %s", self.state.value)
            return None

        result = self.mode.check_end(self._now_ms)
        if result is None:
            logger.warning("Round still running (%.0fms left)",
                           self.mode.time_remaining_ms(self._now_ms))
            return None
        self._finish_round(result)
        return result

    def is_session_complete(self) -> bool:
        return self.state == SessionState.COMPLETED

    def final_result(self) -> Optional[FinalResult]:
        """Aggregate result, available once every round has been played."""
        if not self.is_session_complete():
            logger.warning("Final result requested before session completion")
            return None
        return self.sequencer.final_result()

    # ============ Input Boundary ============

    def set_direction(self, player_id, dx: float, dy: float) -> None:
        """Set a player's movement direction for the coming steps."""
        direction = DirectionIn(player_id=player_id, dx=dx, dy=dy)
        if direction.player_id in self._directions:
            self._directions[direction.player_id] = np.array([direction.dx, direction.dy])

    def queue_action(self, player_id, kind) -> bool:
        """
        Queue a discrete action for the next step.

        Raises:
            pydantic.ValidationError: unknown player id or action kind

        Returns:
            False if a round is not active or the same action is already queued
        """
        event = ActionEventIn(player_id=player_id, kind=kind)
        if self.state != SessionState.ROUND_ACTIVE:
            return False
        entry = (event.player_id, event.kind)
        if entry in self._pending:
            return False
        self._pending.append(entry)
        return True

    def report_motion(self, player_id, position, velocity) -> None:
        """
        Accept the resulting position and velocity from an external physics layer.

        Raises:
            pydantic.ValidationError: unknown player id, or a vector that is
                not two finite numbers
        """
        motion = MotionIn(player_id=player_id, position=position, velocity=velocity)
        player = self.players.get(motion.player_id)
        if player is None:
            return
        player.position = np.array(motion.position, dtype=float)
        player.velocity = np.array(motion.velocity, dtype=float)

    def report_collision(self, attacker_id, timestamp_ms: float = None) -> Optional[OutcomeEvent]:
        """
        Score a knockback reported by the physics layer.

        The attacker earns 1 point when the hit lands on the beat, and the
        victim is pushed away from the attacker.
        """
        attacker_side = CollisionIn(attacker_id=attacker_id).attacker_id
        if self.state != SessionState.ROUND_ACTIVE:
            return None

        ts = self._now_ms if timestamp_ms is None else float(timestamp_ms)
        attacker = self.players[attacker_side]
        victim = self.players[attacker_side.opponent]

        quality = self.clock.classify(ts)
        points = self.ledger.process_knockback(attacker_side, self.clock.is_on_beat(ts))
        self.resolver.apply_knockback(victim, attacker)

        outcome = OutcomeEvent(
            side=attacker_side,
            kind=ActionKind.KNOCKBACK,
            quality=quality,
            points_awarded=points,
            timestamp_ms=ts,
        )
        self.outcome_resolved.emit(outcome)
        if points:
            self._emit_score_update()
        return outcome

    # ============ Internals ============

    def _resolve_action(self, side: Side, kind: ActionKind,
                        timestamp_ms: float) -> Optional[OutcomeEvent]:
        player = self.players[side]

        if kind is ActionKind.RESONANCE:
            quality = self.resolver.resolve_resonance(player, self.clock, timestamp_ms)
            points = 0
            if quality is not BeatQuality.COOLDOWN:
                points = self.mode.process_resonance(player, quality, timestamp_ms)
            return OutcomeEvent(side, kind, quality, points, timestamp_ms)

        quality = self.resolver.resolve_dash(player, self.clock, timestamp_ms)
        if quality is None:
            return None
        return OutcomeEvent(side, kind, quality, 0, timestamp_ms)

    def _check_beat_cue(self, timestamp_ms: float) -> None:
        if not self.clock.is_perfect_beat(timestamp_ms):
            return
        if (self._last_beat_cue_ms is not None
                and timestamp_ms - self._last_beat_cue_ms <= self.BEAT_CUE_GAP_MS):
            return
        self._last_beat_cue_ms = timestamp_ms
        self.beat_cue.emit(timestamp_ms)

    def _dispatch_notices(self) -> None:
        for notice in self.mode.drain_notices():
            if notice.name == "dissonance_shift":
                self.dissonance_shifted.emit()
            elif notice.name in ("carrier_changed", "steal") and notice.side is not None:
                self.carrier_changed.emit(notice.side.value)

    def _finish_round(self, result: ModeResult) -> None:
        """Archive a finished round and move the session forward."""
        self.mode.cleanup()
        self._round_result = result
        self._pending.clear()
        self.sequencer.record_round_result(result)

        logger.info("Round %s ended: winner=%s p1=%d p2=%d",
                    result.mode.value, result.winner.value,
                    result.scores.p1, result.scores.p2)

        if self.sequencer.is_exhausted:
            self.state = SessionState.COMPLETED
        else:
            self.state = SessionState.ROUND_COMPLETE
        self.round_ended.emit(result)
        self._emit_score_update()

        if self.state == SessionState.COMPLETED:
            final = self.sequencer.final_result()
            logger.info("Session complete: winner=%s p1=%d p2=%d",
                        final.winner.value, final.totals.p1, final.totals.p2)
            self.session_completed.emit(final)

    def snapshot(self) -> SessionSnapshot:
        """Get the current session snapshot."""
        round_scores = self.ledger.scores
        totals = self.sequencer.totals
        p1 = self.players.get(Side.P1)
        p2 = self.players.get(Side.P2)
        carrier = self.mode.carrier if self.mode is not None else None
        return SessionSnapshot(
            state=self.state,
            mode=self.mode.kind.value if self.mode is not None else None,
            round_number=self.sequencer.cursor,
            total_rounds=len(self.sequencer.modes),
            round_p1=round_scores.p1,
            round_p2=round_scores.p2,
            total_p1=totals.p1,
            total_p2=totals.p2,
            p1_fitness=p1.fitness if p1 else 0.0,
            p2_fitness=p2.fitness if p2 else 0.0,
            carrier=carrier.value if carrier else None,
            time_remaining_ms=(self.mode.time_remaining_ms(self._now_ms)
                               if self.mode is not None else 0.0),
            dissonant=bool(self.clock.dissonant) if self.clock is not None else False,
        )

    def _emit_score_update(self) -> None:
        self.score_updated.emit(self.snapshot())
