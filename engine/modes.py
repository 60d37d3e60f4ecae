"""
Game Modes - Round-local rules for the three Echoes variants.

A round is one GameMode tagged with a ModeKind. Each kind carries its own
small state record; the shared lifecycle (setup, update, resonance
scoring, end check, cleanup) dispatches on the kind.

Periodic rules (zone flips, carrier auto-score, the Dissonance shift) are
stored as "next due" timestamps and checked on every update.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

import numpy as np

from config import (
    ROUND_SETTINGS, PULSE_DUEL_SETTINGS, ECHO_CHASE_SETTINGS,
    DISSONANCE_SETTINGS, FIELD_SETTINGS,
)
from engine.beat_clock import BeatClock
from engine.scoring import ScoringLedger
from models.action import BeatQuality
from models.match import ModeKind, ModeResult
from models.player import PlayerState, Side

logger = logging.getLogger(__name__)


@dataclass
class PulseZone:
    """Pulse Duel scoring circle. The angle only matters to renderers."""
    center: np.ndarray = field(default_factory=lambda: np.array(FIELD_SETTINGS.center))
    radius: float = PULSE_DUEL_SETTINGS.initial_radius
    angle: float = 0.0
    growing: bool = True
    next_flip_ms: float = 0.0

    def contains(self, position: np.ndarray) -> bool:
        return float(np.linalg.norm(np.asarray(position) - self.center)) <= self.radius


@dataclass
class ChaseState:
    """Echo Chase carrier bookkeeping."""
    carrier: Optional[Side] = None
    next_auto_score_ms: float = 0.0


@dataclass
class DissonanceState:
    """Dissonance phase bookkeeping."""
    inverted: bool = False
    transition_ms: float = 0.0


ModeRules = Union[PulseZone, ChaseState, DissonanceState]


@dataclass(frozen=True)
class ModeNotice:
    """Something the mode did on its own that presentation may want to show."""
    name: str           # "auto_score", "carrier_changed", "steal", "dissonance_shift", "zone_flip"
    side: Optional[Side] = None
    points: int = 0


class GameMode:
    """
    One round of a single mode.

    Usage:
        mode = GameMode(ModeKind.ECHO_CHASE, clock, ledger, players)
        mode.setup(now_ms)
        ...
        mode.update(now_ms, delta_ms)
        points = mode.process_resonance(player, quality, now_ms)
        result = mode.check_end(now_ms)  # ModeResult once, then None
        mode.cleanup()
    """

    DURATION_MS = ROUND_SETTINGS.duration_ms

    def __init__(self, kind: ModeKind, clock: BeatClock, ledger: ScoringLedger,
                 players: dict[Side, PlayerState], duration_ms: float = None):
        self.kind = ModeKind.from_id(kind)
        self.clock = clock
        self.ledger = ledger
        self.players = players
        self.duration_ms = float(duration_ms or self.DURATION_MS)
        self.start_ms: float = 0.0
        self._ended = False
        self._notices: list[ModeNotice] = []
        self.rules: ModeRules = self._new_rules()

    def _new_rules(self) -> ModeRules:
        if self.kind is ModeKind.ECHO_CHASE:
            return ChaseState()
        elif self.kind is ModeKind.DISSONANCE:
            return DissonanceState()
        return PulseZone()

    # ============ Lifecycle ============

    def setup(self, timestamp_ms: float) -> None:
        """Capture the round start time and zero the round score."""
        self.start_ms = float(timestamp_ms)
        self._ended = False
        self._notices.clear()
        self.ledger.reset()
        self.rules = self._new_rules()

        if self.kind is ModeKind.PULSE_DUEL:
            self.rules.next_flip_ms = self.start_ms + PULSE_DUEL_SETTINGS.flip_interval_ms
        elif self.kind is ModeKind.ECHO_CHASE:
            self._determine_carrier()
            # First auto-score comes one full interval after the start
            self.rules.next_auto_score_ms = (
                self.start_ms + ECHO_CHASE_SETTINGS.auto_score_interval_ms
            )
        elif self.kind is ModeKind.DISSONANCE:
            self.clock.dissonant = False
            self.rules.transition_ms = self.start_ms + DISSONANCE_SETTINGS.transition_ms

    def update(self, timestamp_ms: float, delta_ms: float) -> None:
        """Advance the mode's own rules by one step."""
        if self._ended:
            return
        if self.kind is ModeKind.PULSE_DUEL:
            self._update_zone(timestamp_ms, delta_ms)
        elif self.kind is ModeKind.ECHO_CHASE:
            self._update_chase(timestamp_ms)
        elif self.kind is ModeKind.DISSONANCE:
            self._sync_dissonance(timestamp_ms)

    def process_resonance(self, player: PlayerState, quality: BeatQuality,
                          timestamp_ms: float = None) -> int:
        """
        Score a judged resonance under this mode's rules.

        Args:
            player: Acting player
            quality: Result from the ActionResolver
            timestamp_ms: When the press happened; lets Dissonance flip
                phase before judging a press that lands past the boundary

        Returns:
            Points awarded for this press
        """
        if quality is BeatQuality.COOLDOWN or self._ended:
            return 0
        if self.kind is ModeKind.PULSE_DUEL:
            in_zone = self.rules.contains(player.position)
            return self.ledger.process_resonance(
                player.side, quality, in_zone, player.meets_scoring_threshold
            )
        elif self.kind is ModeKind.ECHO_CHASE:
            return self._try_steal(player, quality)
        elif self.kind is ModeKind.DISSONANCE:
            if timestamp_ms is not None:
                self._sync_dissonance(timestamp_ms)
            return self._score_dissonance(player, quality)
        return 0

    def check_end(self, timestamp_ms: float) -> Optional[ModeResult]:
        """
        Return the round result the first time the duration has elapsed.

        Later calls return None.
        """
        if self._ended:
            return None
        if self.time_remaining_ms(timestamp_ms) > 0:
            return None
        self._ended = True
        return ModeResult(
            mode=self.kind,
            winner=self.ledger.winner(),
            scores=self.ledger.scores,
        )

    def cleanup(self) -> None:
        """Clear per-player mode flags and any clock state the mode touched."""
        for player in self.players.values():
            player.is_carrier = False
        if self.kind is ModeKind.DISSONANCE:
            self.clock.dissonant = False

    # ============ Queries ============

    @property
    def is_ended(self) -> bool:
        return self._ended

    def elapsed_ms(self, timestamp_ms: float) -> float:
        return float(timestamp_ms) - self.start_ms

    def time_remaining_ms(self, timestamp_ms: float) -> float:
        """Milliseconds left in the round, floored at zero."""
        return max(0.0, self.duration_ms - self.elapsed_ms(timestamp_ms))

    @property
    def carrier(self) -> Optional[Side]:
        if self.kind is ModeKind.ECHO_CHASE:
            return self.rules.carrier
        return None

    @property
    def is_inverted(self) -> bool:
        return self.kind is ModeKind.DISSONANCE and self.rules.inverted

    @property
    def zone(self) -> Optional[PulseZone]:
        if self.kind is ModeKind.PULSE_DUEL:
            return self.rules
        return None

    def drain_notices(self) -> list[ModeNotice]:
        """Hand over and forget everything noticed since the last drain."""
        notices = self._notices
        self._notices = []
        return notices

    # ============ Pulse Duel ============

    def _update_zone(self, timestamp_ms: float, delta_ms: float) -> None:
        zone: PulseZone = self.rules
        zone.angle += PULSE_DUEL_SETTINGS.rotation_per_ms * delta_ms

        if timestamp_ms > zone.next_flip_ms:
            zone.growing = not zone.growing
            zone.next_flip_ms = timestamp_ms + PULSE_DUEL_SETTINGS.flip_interval_ms
            self._notices.append(ModeNotice("zone_flip"))

        step = PULSE_DUEL_SETTINGS.growth_per_ms * delta_ms
        zone.radius += step if zone.growing else -step
        zone.radius = min(PULSE_DUEL_SETTINGS.max_radius,
                          max(PULSE_DUEL_SETTINGS.min_radius, zone.radius))

    # ============ Echo Chase ============

    def _determine_carrier(self) -> None:
        chase: ChaseState = self.rules
        p1 = self.players[Side.P1]
        p2 = self.players[Side.P2]
        previous = chase.carrier

        if p1.fitness > p2.fitness:
            chase.carrier = Side.P1
        elif p2.fitness > p1.fitness:
            chase.carrier = Side.P2
        elif chase.carrier is None:
            # Tie keeps the current carrier; the very first tie goes to p1
            chase.carrier = Side.P1

        for side, player in self.players.items():
            player.is_carrier = (side is chase.carrier)

        if chase.carrier is not previous:
            self._notices.append(ModeNotice("carrier_changed", side=chase.carrier))

    def _update_chase(self, timestamp_ms: float) -> None:
        chase: ChaseState = self.rules
        self._determine_carrier()

        if timestamp_ms >= chase.next_auto_score_ms:
            points = ECHO_CHASE_SETTINGS.auto_score_points
            self.ledger.add_points(chase.carrier, points)
            chase.next_auto_score_ms = timestamp_ms + ECHO_CHASE_SETTINGS.auto_score_interval_ms
            self._notices.append(ModeNotice("auto_score", side=chase.carrier, points=points))

    def _try_steal(self, player: PlayerState, quality: BeatQuality) -> int:
        chase: ChaseState = self.rules
        if quality is not BeatQuality.PERFECT or chase.carrier is None:
            return 0
        if player.side is chase.carrier:
            return 0

        carrier = self.players[chase.carrier]
        if player.distance_to(carrier) >= ECHO_CHASE_SETTINGS.steal_radius:
            return 0

        carrier.is_carrier = False
        player.is_carrier = True
        chase.carrier = player.side

        # Awarded directly; a steal never goes through the standard ledger rule
        points = ECHO_CHASE_SETTINGS.steal_points
        self.ledger.add_points(player.side, points)
        self._notices.append(ModeNotice("steal", side=player.side, points=points))
        logger.info("%s stole the pulse (+%d)", player.side.value, points)
        return points

    # ============ Dissonance ============

    def _sync_dissonance(self, timestamp_ms: float) -> None:
        state: DissonanceState = self.rules
        if state.inverted or timestamp_ms < state.transition_ms:
            return
        state.inverted = True
        self.clock.toggle_dissonance()
        self._notices.append(ModeNotice("dissonance_shift"))
        logger.info("Dissonance phase shift at %.0fms elapsed",
                    self.elapsed_ms(timestamp_ms))

    def _score_dissonance(self, player: PlayerState, quality: BeatQuality) -> int:
        state: DissonanceState = self.rules
        fitness_ok = player.meets_scoring_threshold
        if not state.inverted:
            # No spatial gate before the shift
            return self.ledger.process_resonance(player.side, quality, True, fitness_ok)

        if quality is BeatQuality.MISS and fitness_ok:
            points = DISSONANCE_SETTINGS.inverted_miss_points
            self.ledger.add_points(player.side, points)
            return points
        return 0
