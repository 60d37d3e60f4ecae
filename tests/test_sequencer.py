"""
Unit tests for the RoundSequencer.
"""

from engine.sequencer import RoundSequencer
from models.match import ModeKind, ModeResult, ScorePair, Winner


def result(mode, p1, p2):
    pair = ScorePair(p1, p2)
    winner = Winner.P1 if p1 > p2 else Winner.P2 if p2 > p1 else Winner.TIE
    return ModeResult(mode=mode, winner=winner, scores=pair)


class TestRoundSequencer:
    """Tests for mode order and the running total."""

    def setup_method(self):
        """Set up a fresh sequencer for each test."""
        self.sequencer = RoundSequencer()

    def test_default_order(self):
        """Modes come out in the configured order, then None."""
        assert self.sequencer.next_mode() is ModeKind.PULSE_DUEL
        assert self.sequencer.next_mode() is ModeKind.ECHO_CHASE
        assert self.sequencer.next_mode() is ModeKind.DISSONANCE
        assert self.sequencer.next_mode() is None
        assert self.sequencer.is_exhausted

    def test_peek_does_not_advance(self):
        assert self.sequencer.peek_mode() is ModeKind.PULSE_DUEL
        assert self.sequencer.peek_mode() is ModeKind.PULSE_DUEL
        assert self.sequencer.cursor == 0

    def test_totals_accumulate(self):
        """Each recorded round adds into the global total."""
        self.sequencer.record_round_result(result(ModeKind.PULSE_DUEL, 6, 3))
        self.sequencer.record_round_result(result(ModeKind.ECHO_CHASE, 10, 22))

        assert self.sequencer.totals == ScorePair(16, 25)
        assert self.sequencer.rounds_played == 2
        assert self.sequencer.final_winner() == Winner.P2

    def test_final_result_is_tie_on_equal_totals(self):
        self.sequencer.record_round_result(result(ModeKind.PULSE_DUEL, 4, 0))
        self.sequencer.record_round_result(result(ModeKind.DISSONANCE, 0, 4))

        final = self.sequencer.final_result()

        assert final.winner == Winner.TIE
        assert final.totals == ScorePair(4, 4)
        assert len(final.rounds) == 2

    def test_reset(self):
        """Reset rewinds the order and zeroes the totals."""
        self.sequencer.next_mode()
        self.sequencer.record_round_result(result(ModeKind.PULSE_DUEL, 1, 0))

        self.sequencer.reset()

        assert self.sequencer.cursor == 0
        assert self.sequencer.totals == ScorePair()
        assert self.sequencer.results == []
        assert self.sequencer.next_mode() is ModeKind.PULSE_DUEL

    def test_custom_order(self):
        sequencer = RoundSequencer(modes=(ModeKind.DISSONANCE,))
        assert sequencer.next_mode() is ModeKind.DISSONANCE
        assert sequencer.next_mode() is None
