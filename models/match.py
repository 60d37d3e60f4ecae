"""
Mode identifiers, score pairs and round/session results.
"""

import enum
import re
from dataclasses import dataclass
from typing import Optional

from models.player import Side


class ModeKind(enum.Enum):
    """The three rule variants played in a session."""
    PULSE_DUEL = "PulseDuel"
    ECHO_CHASE = "EchoChase"
    DISSONANCE = "Dissonance"

    @classmethod
    def from_id(cls, mode_id) -> "ModeKind":
        """
        Resolve a mode identifier.

        Unknown identifiers fall back to PULSE_DUEL rather than failing.
        """
        if isinstance(mode_id, cls):
            return mode_id
        for kind in cls:
            if kind.value == mode_id:
                return kind
        return cls.PULSE_DUEL

    @classmethod
    def is_known(cls, mode_id) -> bool:
        """Check whether an identifier names a real mode."""
        return isinstance(mode_id, cls) or mode_id in {kind.value for kind in cls}

    @property
    def display_name(self) -> str:
        """Spaced, upper-case title, e.g. PulseDuel -> PULSE DUEL."""
        return re.sub(r"([a-z])([A-Z])", r"\1 \2", self.value).upper()

    @property
    def intro(self) -> "ModeIntro":
        return MODE_INTROS[self]


@dataclass(frozen=True)
class ModeIntro:
    """Text shown before a mode starts."""
    title: str
    line1: str
    line2: str


MODE_INTROS = {
    ModeKind.PULSE_DUEL: ModeIntro(
        title="PULSE DUEL",
        line1="Resonate with the field at the exact moment to score.",
        line2="Disrupt your rival's rhythm. Don't lose yours.",
    ),
    ModeKind.ECHO_CHASE: ModeIntro(
        title="ECHO CHASE",
        line1="Whoever has the highest pulse gains points each second.",
        line2="Steal the pulse from your rival by hitting them on beat.",
    ),
    ModeKind.DISSONANCE: ModeIntro(
        title="DISSONANCE",
        line1="The field has two states. The rules change.",
        line2="Learn to read the field before your rival.",
    ),
}


class Winner(enum.Enum):
    """Outcome of a strict score comparison."""
    P1 = "p1"
    P2 = "p2"
    TIE = "tie"

    @property
    def side(self) -> Optional[Side]:
        """The winning Side, or None for a tie."""
        if self is Winner.TIE:
            return None
        return Side(self.value)


@dataclass(frozen=True)
class ScorePair:
    """Points for both players. Values are never negative."""
    p1: int = 0
    p2: int = 0

    def __post_init__(self) -> None:
        if self.p1 < 0 or self.p2 < 0:
            raise ValueError("ScorePair values cannot be negative")

    def __add__(self, other: "ScorePair") -> "ScorePair":
        return ScorePair(p1=self.p1 + other.p1, p2=self.p2 + other.p2)

    def get(self, side: Side) -> int:
        """Points for one side."""
        return self.p1 if side is Side.P1 else self.p2

    def to_dict(self) -> dict:
        return {"p1": self.p1, "p2": self.p2}


@dataclass(frozen=True)
class ModeResult:
    """Terminal result of one round, produced exactly once."""
    mode: ModeKind
    winner: Winner
    scores: ScorePair


@dataclass(frozen=True)
class FinalResult:
    """Aggregate outcome after every mode in the session was played."""
    winner: Winner
    totals: ScorePair
    rounds: tuple[ModeResult, ...] = ()
