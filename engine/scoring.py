"""
Scoring Ledger - Round-local score keeping for Echoes.

Turns judged actions plus mode context into points for the two players.
Scores only ever go up within a round.
"""

from models.action import BeatQuality
from models.match import ScorePair, Winner
from models.player import Side
from engine.rules import RulesEngine


class ScoringLedger:
    """
    Two-party score pair for one round.

    Usage:
        ledger = ScoringLedger()
        ledger.process_resonance(Side.P1, BeatQuality.PERFECT, in_zone=True,
                                 fitness_ok=True)  # -> 3
        ledger.winner()  # -> Winner.P1
    """

    def __init__(self):
        self._reset_state()

    def _reset_state(self) -> None:
        self._p1_points: int = 0
        self._p2_points: int = 0

    def reset(self) -> None:
        """Zero both scores for a new round."""
        self._reset_state()

    def process_resonance(self, side: Side, quality: BeatQuality,
                          in_zone: bool, fitness_ok: bool) -> int:
        """
        Score a resonance with the standard rule.

        Args:
            side: Acting player
            quality: Judged beat quality
            in_zone: Whether the mode's spatial gate is satisfied
            fitness_ok: Whether the player's fitness is at least 50

        Returns:
            Points awarded (also added to the player's score)
        """
        points = RulesEngine.resonance_points(quality, in_zone, fitness_ok)
        self.add_points(side, points)
        return points

    def process_knockback(self, attacker: Side, on_beat: bool) -> int:
        """Award the attacker 1 point if the hit landed on the beat."""
        points = RulesEngine.knockback_points(on_beat)
        self.add_points(attacker, points)
        return points

    def add_points(self, side: Side, points: int) -> None:
        """Direct addition used by modes for auxiliary scoring."""
        if points <= 0:
            return
        if side is Side.P1:
            self._p1_points += int(points)
        else:
            self._p2_points += int(points)

    def points(self, side: Side) -> int:
        return self._p1_points if side is Side.P1 else self._p2_points

    @property
    def scores(self) -> ScorePair:
        """Snapshot of the current scores."""
        return ScorePair(p1=self._p1_points, p2=self._p2_points)

    def winner(self) -> Winner:
        """Strict comparison; equal totals are a tie."""
        return RulesEngine.determine_winner(self._p1_points, self._p2_points)
