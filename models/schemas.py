"""
Pydantic schemas for input validation and result payloads.

Everything coming from the input layer passes through one of the *In
schemas before it reaches the engine, so unknown player ids or junk
vectors never touch game state.
"""

import math

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.player import Side
from models.action import ActionKind
from models.match import ModeResult, FinalResult


# ============ Input Schemas ============

class ActionEventIn(BaseModel):
    """A pre-debounced discrete action from the input layer."""
    model_config = ConfigDict(frozen=True)

    player_id: Side
    kind: ActionKind

    @field_validator("kind")
    @classmethod
    def player_triggered_kind(cls, v: ActionKind) -> ActionKind:
        if v not in (ActionKind.RESONANCE, ActionKind.DASH):
            raise ValueError("Action kind must be resonance or dash")
        return v


class DirectionIn(BaseModel):
    """A continuous movement direction for one player."""
    model_config = ConfigDict(frozen=True)

    player_id: Side
    dx: float = Field(0.0, ge=-1.0, le=1.0)
    dy: float = Field(0.0, ge=-1.0, le=1.0)

    @field_validator("dx", "dy")
    @classmethod
    def finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("Direction components must be finite")
        return v


class MotionIn(BaseModel):
    """Position and velocity reported by an external physics layer."""
    model_config = ConfigDict(frozen=True)

    player_id: Side
    position: tuple[float, float]
    velocity: tuple[float, float]

    @field_validator("position", "velocity", mode="before")
    @classmethod
    def from_array(cls, v):
        if isinstance(v, np.ndarray):
            return v.tolist()
        return v

    @field_validator("position", "velocity")
    @classmethod
    def finite(cls, v: tuple[float, float]) -> tuple[float, float]:
        if not all(math.isfinite(c) for c in v):
            raise ValueError("Motion vectors must be finite")
        return v


class CollisionIn(BaseModel):
    """A player-on-player hit reported by the physics layer."""
    model_config = ConfigDict(frozen=True)

    attacker_id: Side


# ============ Result Schemas ============

class ScorePairOut(BaseModel):
    p1: int = Field(0, ge=0)
    p2: int = Field(0, ge=0)


class RoundSummary(BaseModel):
    """Serializable summary of one finished round."""
    mode: str
    title: str
    winner: str
    scores: ScorePairOut

    @classmethod
    def from_result(cls, result: ModeResult) -> "RoundSummary":
        return cls(
            mode=result.mode.value,
            title=result.mode.display_name,
            winner=result.winner.value,
            scores=ScorePairOut(**result.scores.to_dict()),
        )


class SessionSummary(BaseModel):
    """Serializable summary of a finished session."""
    winner: str
    totals: ScorePairOut
    rounds: list[RoundSummary] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: FinalResult) -> "SessionSummary":
        return cls(
            winner=result.winner.value,
            totals=ScorePairOut(**result.totals.to_dict()),
            rounds=[RoundSummary.from_result(r) for r in result.rounds],
        )
