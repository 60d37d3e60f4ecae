"""
Unit tests for the GameMode variants.

Tests cover the Pulse Duel zone, Echo Chase carrier and steals, the
Dissonance phase shift, and round termination.
"""

import pytest

from engine.beat_clock import BeatClock
from engine.modes import GameMode
from engine.scoring import ScoringLedger
from models.action import BeatQuality
from models.match import ModeKind, ScorePair, Winner
from models.player import PlayerState, Side


def make_mode(kind, p1_pos=(250, 300), p2_pos=(550, 300), p1_fitness=50, p2_fitness=50):
    """Build a mode with a clock started at 0 and set it up at 0."""
    clock = BeatClock()
    clock.start(0)
    players = {
        Side.P1: PlayerState.spawn(Side.P1, p1_pos, fitness=p1_fitness),
        Side.P2: PlayerState.spawn(Side.P2, p2_pos, fitness=p2_fitness),
    }
    mode = GameMode(kind, clock, ScoringLedger(), players)
    mode.setup(0)
    return mode


class TestPulseDuel:
    """Tests for the Pulse Duel zone."""

    def test_perfect_in_zone_scores(self):
        """A player at the centre with enough fitness scores 3."""
        mode = make_mode(ModeKind.PULSE_DUEL, p1_pos=(400, 300))

        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.PERFECT) == 3
        assert mode.ledger.scores == ScorePair(3, 0)

    def test_outside_zone_scores_nothing(self):
        """Spawn points sit outside the initial zone."""
        mode = make_mode(ModeKind.PULSE_DUEL)

        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.PERFECT) == 0

    def test_zone_edge_counts_as_inside(self):
        """Distance equal to the radius is inside."""
        mode = make_mode(ModeKind.PULSE_DUEL, p1_pos=(300, 300))

        assert mode.zone.radius == 100
        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.GOOD) == 1

    def test_low_fitness_in_zone_scores_nothing(self):
        mode = make_mode(ModeKind.PULSE_DUEL, p1_pos=(400, 300), p1_fitness=49)

        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.PERFECT) == 0

    def test_cooldown_scores_nothing(self):
        mode = make_mode(ModeKind.PULSE_DUEL, p1_pos=(400, 300))

        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.COOLDOWN) == 0

    def test_zone_grows_and_rotates(self):
        """The zone grows at 0.02 per ms and turns at 0.001 rad per ms."""
        mode = make_mode(ModeKind.PULSE_DUEL)

        mode.update(16, 16)

        assert mode.zone.radius == pytest.approx(100.32)
        assert mode.zone.angle == pytest.approx(0.016)

    def test_zone_flips_after_interval(self):
        """Past 15s the zone starts shrinking."""
        mode = make_mode(ModeKind.PULSE_DUEL)

        mode.update(15_000, 16)
        assert mode.zone.growing

        mode.update(15_001, 16)
        assert not mode.zone.growing
        assert mode.zone.next_flip_ms == 30_001

    def test_radius_is_clamped(self):
        """The radius never leaves [60, 140]."""
        mode = make_mode(ModeKind.PULSE_DUEL)
        ts = 0
        for _ in range(200):
            ts += 500
            mode.update(ts, 500)
            assert 60 <= mode.zone.radius <= 140

        assert mode.zone.radius in (60, 140)

    def test_has_no_carrier(self):
        mode = make_mode(ModeKind.PULSE_DUEL)
        assert mode.carrier is None
        assert not mode.is_inverted


class TestEchoChase:
    """Tests for the Echo Chase carrier rules."""

    def test_higher_fitness_is_carrier(self):
        """Setup hands the pulse to the fitter player."""
        mode = make_mode(ModeKind.ECHO_CHASE, p1_fitness=80, p2_fitness=20)

        assert mode.carrier is Side.P1
        assert mode.players[Side.P1].is_carrier
        assert not mode.players[Side.P2].is_carrier

    def test_first_tie_goes_to_p1(self):
        mode = make_mode(ModeKind.ECHO_CHASE)
        assert mode.carrier is Side.P1

    def test_tie_keeps_current_carrier(self):
        """Equal fitness does not move the pulse."""
        mode = make_mode(ModeKind.ECHO_CHASE, p1_fitness=40, p2_fitness=60)
        assert mode.carrier is Side.P2

        mode.players[Side.P1].set_fitness(60)
        mode.update(16, 16)

        assert mode.carrier is Side.P2

    def test_perfect_steal_in_range(self):
        """A perfect press within 80 of the carrier steals for exactly 2."""
        mode = make_mode(ModeKind.ECHO_CHASE, p1_pos=(300, 300), p2_pos=(350, 300),
                         p1_fitness=80, p2_fitness=20)

        points = mode.process_resonance(mode.players[Side.P2], BeatQuality.PERFECT)

        assert points == 2
        assert mode.carrier is Side.P2
        assert mode.players[Side.P2].is_carrier
        assert not mode.players[Side.P1].is_carrier
        assert mode.ledger.scores == ScorePair(0, 2)
        assert [n.name for n in mode.drain_notices()][-1] == "steal"

    def test_steal_needs_perfect(self):
        mode = make_mode(ModeKind.ECHO_CHASE, p1_pos=(300, 300), p2_pos=(350, 300),
                         p1_fitness=80, p2_fitness=20)

        assert mode.process_resonance(mode.players[Side.P2], BeatQuality.GOOD) == 0
        assert mode.carrier is Side.P1

    def test_steal_needs_range(self):
        """At 80 or more the steal fails."""
        mode = make_mode(ModeKind.ECHO_CHASE, p1_pos=(300, 300), p2_pos=(380, 300),
                         p1_fitness=80, p2_fitness=20)

        assert mode.process_resonance(mode.players[Side.P2], BeatQuality.PERFECT) == 0
        assert mode.carrier is Side.P1

    def test_carrier_cannot_steal_from_self(self):
        mode = make_mode(ModeKind.ECHO_CHASE, p1_pos=(300, 300), p2_pos=(350, 300),
                         p1_fitness=80, p2_fitness=20)

        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.PERFECT) == 0
        assert mode.ledger.scores == ScorePair(0, 0)

    def test_auto_score_every_two_seconds(self):
        """The carrier gains 1 point once per 2000ms."""
        mode = make_mode(ModeKind.ECHO_CHASE, p1_fitness=80, p2_fitness=20)

        mode.update(1999, 16)
        assert mode.ledger.scores == ScorePair(0, 0)

        mode.update(2000, 1)
        assert mode.ledger.scores == ScorePair(1, 0)

        mode.update(3000, 1000)
        assert mode.ledger.scores == ScorePair(1, 0)

        mode.update(4000, 1000)
        assert mode.ledger.scores == ScorePair(2, 0)

    def test_carrier_follows_fitness_on_update(self):
        mode = make_mode(ModeKind.ECHO_CHASE, p1_fitness=80, p2_fitness=20)

        mode.players[Side.P2].set_fitness(90)
        mode.update(16, 16)

        assert mode.carrier is Side.P2
        assert mode.players[Side.P2].is_carrier

    def test_cleanup_clears_carrier_flags(self):
        mode = make_mode(ModeKind.ECHO_CHASE, p1_fitness=80, p2_fitness=20)
        mode.cleanup()
        assert not any(p.is_carrier for p in mode.players.values())


class TestDissonance:
    """Tests for the Dissonance phase shift."""

    def test_standard_rules_before_shift(self):
        """Before 45s a perfect press scores 3 anywhere on the field."""
        mode = make_mode(ModeKind.DISSONANCE)
        player = mode.players[Side.P1]

        mode.update(44_999, 16)
        assert not mode.is_inverted
        assert mode.process_resonance(player, BeatQuality.MISS, 44_999) == 0
        assert mode.process_resonance(player, BeatQuality.PERFECT, 44_999) == 3

    def test_inverted_rules_after_shift(self):
        """After 45s only misses score, for 2 points."""
        mode = make_mode(ModeKind.DISSONANCE)
        player = mode.players[Side.P1]

        mode.update(45_001, 16)

        assert mode.is_inverted
        assert mode.clock.dissonant
        assert mode.process_resonance(player, BeatQuality.MISS, 45_001) == 2
        assert mode.process_resonance(player, BeatQuality.PERFECT, 45_001) == 0
        assert mode.process_resonance(player, BeatQuality.GOOD, 45_001) == 0

    def test_inverted_miss_needs_fitness(self):
        mode = make_mode(ModeKind.DISSONANCE, p1_fitness=40)

        mode.update(45_001, 16)

        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.MISS, 45_001) == 0

    def test_press_past_boundary_is_judged_inverted(self):
        """A press timestamped past 45s flips phase before it is judged."""
        mode = make_mode(ModeKind.DISSONANCE)

        points = mode.process_resonance(mode.players[Side.P2], BeatQuality.MISS, 45_001)

        assert points == 2
        assert mode.is_inverted

    def test_shift_happens_once(self):
        """The clock's dissonance flag is toggled exactly once."""
        mode = make_mode(ModeKind.DISSONANCE)

        mode.update(45_001, 16)
        mode.update(46_000, 16)
        mode.update(80_000, 16)

        assert mode.clock.dissonant
        names = [n.name for n in mode.drain_notices()]
        assert names.count("dissonance_shift") == 1

    def test_cleanup_restores_clock(self):
        mode = make_mode(ModeKind.DISSONANCE)
        mode.update(45_001, 16)

        mode.cleanup()

        assert not mode.clock.dissonant


class TestRoundTermination:
    """Tests for check_end."""

    def test_result_once(self):
        """The result is produced once, then None."""
        mode = make_mode(ModeKind.PULSE_DUEL, p1_pos=(400, 300))
        mode.process_resonance(mode.players[Side.P1], BeatQuality.PERFECT)

        assert mode.check_end(89_999) is None
        result = mode.check_end(90_000)

        assert result is not None
        assert result.mode is ModeKind.PULSE_DUEL
        assert result.winner == Winner.P1
        assert result.scores == ScorePair(3, 0)
        assert mode.check_end(90_000) is None
        assert mode.check_end(100_000) is None
        assert mode.is_ended

    def test_no_scoring_after_end(self):
        mode = make_mode(ModeKind.PULSE_DUEL, p1_pos=(400, 300))
        mode.check_end(90_000)

        assert mode.process_resonance(mode.players[Side.P1], BeatQuality.PERFECT) == 0

    def test_time_remaining(self):
        mode = make_mode(ModeKind.ECHO_CHASE)
        assert mode.time_remaining_ms(30_000) == 60_000
        assert mode.time_remaining_ms(120_000) == 0

    def test_setup_zeroes_ledger(self):
        mode = make_mode(ModeKind.PULSE_DUEL)
        mode.ledger.add_points(Side.P1, 5)

        mode.setup(1000)

        assert mode.ledger.scores == ScorePair(0, 0)

    def test_unknown_kind_falls_back(self):
        clock = BeatClock()
        players = {
            Side.P1: PlayerState.spawn(Side.P1, (0, 0)),
            Side.P2: PlayerState.spawn(Side.P2, (10, 0)),
        }
        mode = GameMode("Bogus", clock, ScoringLedger(), players)
        assert mode.kind is ModeKind.PULSE_DUEL
