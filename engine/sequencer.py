"""
Round Sequencer - Fixed mode order and the running session total.

Owned by the session object and reset explicitly at session start.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from config import ROUND_SETTINGS
from engine.rules import RulesEngine
from models.match import ModeKind, ModeResult, ScorePair, Winner, FinalResult

logger = logging.getLogger(__name__)


@dataclass
class RoundSequencer:
    """
    Drives the ordered list of modes for one session.

    Attributes:
        modes: Modes in play order
        cursor: Index of the next mode to hand out
        totals: Running global score pair
        results: Archived round results, in play order
    """
    modes: tuple[ModeKind, ...] = field(
        default_factory=lambda: tuple(ModeKind.from_id(m) for m in ROUND_SETTINGS.mode_order)
    )
    cursor: int = 0
    totals: ScorePair = field(default_factory=ScorePair)
    results: list[ModeResult] = field(default_factory=list)

    def next_mode(self) -> Optional[ModeKind]:
        """
        Hand out the mode at the cursor and advance.

        Returns:
            The next ModeKind, or None once every mode has been handed out
        """
        if self.cursor >= len(self.modes):
            return None
        mode = self.modes[self.cursor]
        self.cursor += 1
        return mode

    def peek_mode(self) -> Optional[ModeKind]:
        """The mode next_mode() would return, without advancing."""
        if self.cursor >= len(self.modes):
            return None
        return self.modes[self.cursor]

    def record_round_result(self, result: ModeResult) -> ScorePair:
        """Add a finished round's scores into the global total."""
        self.results.append(result)
        self.totals = self.totals + result.scores
        logger.info("Round %s archived: p1=%d p2=%d (totals p1=%d p2=%d)",
                    result.mode.value, result.scores.p1, result.scores.p2,
                    self.totals.p1, self.totals.p2)
        return self.totals

    @property
    def is_exhausted(self) -> bool:
        """True once every mode has been handed out."""
        return self.cursor >= len(self.modes)

    @property
    def rounds_played(self) -> int:
        return len(self.results)

    def final_winner(self) -> Winner:
        """Strict comparison on the global totals."""
        return RulesEngine.determine_winner(self.totals.p1, self.totals.p2)

    def final_result(self) -> FinalResult:
        return FinalResult(
            winner=self.final_winner(),
            totals=self.totals,
            rounds=tuple(self.results),
        )

    def reset(self) -> None:
        """Rewind to the first mode and zero the global total."""
        self.cursor = 0
        self.totals = ScorePair()
        self.results = []
