"""
Rules Engine - Point tables and winner determination.

Shared by the round ledger and the session sequencer so both apply
exactly the same comparison.
"""

from models.action import BeatQuality, RESONANCE_POINTS
from models.match import Winner


class RulesEngine:
    """Stateless scoring rules for Echoes."""

    # Points for a knockback landed on the beat
    KNOCKBACK_POINTS = 1

    @staticmethod
    def resonance_points(quality: BeatQuality, in_zone: bool, fitness_ok: bool) -> int:
        """
        Standard resonance award.

        Returns:
            0 unless the player is in the zone and fitness is at least 50,
            otherwise 3 for perfect, 1 for good, 0 for anything else
        """
        if not in_zone or not fitness_ok:
            return 0
        return RESONANCE_POINTS.get(quality, 0)

    @staticmethod
    def knockback_points(on_beat: bool) -> int:
        """Points for the attacker of a knockback."""
        return RulesEngine.KNOCKBACK_POINTS if on_beat else 0

    @staticmethod
    def determine_winner(p1_points: int, p2_points: int) -> Winner:
        """
        Strict comparison of two totals.

        Returns:
            Winner.P1, Winner.P2, or Winner.TIE when equal
        """
        if p1_points > p2_points:
            return Winner.P1
        elif p2_points > p1_points:
            return Winner.P2
        return Winner.TIE
