"""
Unit tests for the pydantic boundary schemas.
"""

import pytest
from pydantic import ValidationError

from models.action import ActionKind, BeatQuality, OutcomeEvent
from models.match import FinalResult, ModeKind, ModeResult, ScorePair, Winner
from models.player import Side
from models.schemas import (
    ActionEventIn, DirectionIn, MotionIn, CollisionIn, RoundSummary, SessionSummary,
)


class TestInputSchemas:
    """Tests for input validation."""

    def test_action_event_parses_strings(self):
        event = ActionEventIn(player_id="p2", kind="dash")
        assert event.player_id is Side.P2
        assert event.kind is ActionKind.DASH

    def test_action_event_rejects_knockback(self):
        """Knockbacks come from collisions, not from the input layer."""
        with pytest.raises(ValidationError):
            ActionEventIn(player_id="p1", kind="knockback")

    def test_action_event_rejects_unknown_player(self):
        with pytest.raises(ValidationError):
            ActionEventIn(player_id="p3", kind="resonance")

    def test_direction_bounds(self):
        assert DirectionIn(player_id="p1", dx=-1.0, dy=1.0).dx == -1.0
        with pytest.raises(ValidationError):
            DirectionIn(player_id="p1", dx=0.0, dy=-1.5)

    def test_direction_rejects_infinity(self):
        with pytest.raises(ValidationError):
            DirectionIn(player_id="p1", dx=float("inf"), dy=0.0)

    def test_motion_requires_two_finite_components(self):
        motion = MotionIn(player_id="p1", position=[10, 20], velocity=(0.5, -1.5))
        assert motion.position == (10.0, 20.0)

        with pytest.raises(ValidationError):
            MotionIn(player_id="p1", position=(10.0, 20.0), velocity=(float("nan"), 0.0))
        with pytest.raises(ValidationError):
            MotionIn(player_id="p1", position=(10.0, 20.0, 1.0), velocity=(0.0, 0.0))
        with pytest.raises(ValidationError):
            MotionIn(player_id="p1", position=(10.0, 20.0), velocity=(5.0,))

    def test_collision(self):
        assert CollisionIn(attacker_id="p1").attacker_id is Side.P1


class TestResultSchemas:
    """Tests for result payloads."""

    def setup_method(self):
        self.rounds = (
            ModeResult(ModeKind.PULSE_DUEL, Winner.P1, ScorePair(6, 1)),
            ModeResult(ModeKind.ECHO_CHASE, Winner.P2, ScorePair(3, 9)),
        )
        self.final = FinalResult(Winner.P2, ScorePair(9, 10), self.rounds)

    def test_round_summary(self):
        summary = RoundSummary.from_result(self.rounds[0])

        assert summary.mode == "PulseDuel"
        assert summary.title == "PULSE DUEL"
        assert summary.winner == "p1"
        assert summary.scores.p1 == 6

    def test_session_summary_dump(self):
        data = SessionSummary.from_result(self.final).model_dump()

        assert data["winner"] == "p2"
        assert data["totals"] == {"p1": 9, "p2": 10}
        assert [r["mode"] for r in data["rounds"]] == ["PulseDuel", "EchoChase"]

    def test_outcome_to_dict(self):
        outcome = OutcomeEvent(Side.P1, ActionKind.RESONANCE, BeatQuality.GOOD, 1, 2100.0)

        assert outcome.to_dict() == {
            "player_id": "p1",
            "kind": "resonance",
            "quality": "good",
            "points_awarded": 1,
            "timestamp_ms": 2100.0,
        }
