"""
Action Resolver - Judges resonance and dash attempts against the beat.

Cooldowns are timestamp windows on the player. A rejected attempt never
mutates the player; fitness changes always go through the clamped mutator.
"""

import logging
from typing import Optional

import numpy as np

from config import ACTION_SETTINGS
from engine.beat_clock import BeatClock
from models.action import BeatQuality, DASH_FITNESS_DELTAS
from models.player import PlayerState

logger = logging.getLogger(__name__)


class ActionResolver:
    """
    Evaluates discrete timed actions for a player.

    Usage:
        resolver = ActionResolver()
        quality = resolver.resolve_resonance(player, clock, now_ms)
        dash = resolver.resolve_dash(player, clock, now_ms)  # None if it did not fire
    """

    RESONANCE_COOLDOWN_MS = ACTION_SETTINGS.resonance_cooldown_ms
    DASH_COOLDOWN_MS = ACTION_SETTINGS.dash_cooldown_ms
    DASH_MIN_VELOCITY = ACTION_SETTINGS.dash_min_velocity
    DASH_FORCE = ACTION_SETTINGS.dash_force
    RESONANCE_MISS_PENALTY = ACTION_SETTINGS.resonance_miss_penalty
    KNOCKBACK_FORCE = ACTION_SETTINGS.knockback_force

    @staticmethod
    def _in_cooldown(last_ms: Optional[float], timestamp_ms: float, window_ms: float) -> bool:
        return last_ms is not None and timestamp_ms - last_ms < window_ms

    def resolve_resonance(self, player: PlayerState, clock: BeatClock,
                          timestamp_ms: float) -> BeatQuality:
        """
        Judge a resonance press.

        Returns:
            COOLDOWN if pressed within 200ms of the last accepted press
            (nothing changes), otherwise PERFECT, GOOD or MISS. A miss
            costs 5 fitness.
        """
        if self._in_cooldown(player.last_resonance_ms, timestamp_ms,
                             self.RESONANCE_COOLDOWN_MS):
            return BeatQuality.COOLDOWN

        player.last_resonance_ms = timestamp_ms
        quality = clock.classify(timestamp_ms)
        if quality is BeatQuality.MISS:
            player.adjust_fitness(-self.RESONANCE_MISS_PENALTY)

        logger.debug("%s resonance at %.0fms: %s (fitness %.1f)",
                     player.side.value, timestamp_ms, quality.value, player.fitness)
        return quality

    def resolve_dash(self, player: PlayerState, clock: BeatClock,
                     timestamp_ms: float) -> Optional[BeatQuality]:
        """
        Judge a dash.

        The cooldown stamp is taken before the velocity check, so a dash
        from a near standstill still uses up the 500ms window.

        Returns:
            None if the dash did not fire (cooldown or too slow), otherwise
            the beat quality. A fired dash sets speed to 500 along the
            current heading and moves fitness by +20 / +5 / -10.
        """
        if self._in_cooldown(player.last_dash_ms, timestamp_ms, self.DASH_COOLDOWN_MS):
            return None

        player.last_dash_ms = timestamp_ms

        vx, vy = player.velocity
        if abs(vx) < self.DASH_MIN_VELOCITY and abs(vy) < self.DASH_MIN_VELOCITY:
            return None

        heading = np.arctan2(vy, vx)
        player.velocity = np.array([np.cos(heading), np.sin(heading)]) * self.DASH_FORCE

        quality = clock.classify(timestamp_ms)
        player.adjust_fitness(DASH_FITNESS_DELTAS[quality])

        logger.debug("%s dash at %.0fms: %s (fitness %.1f)",
                     player.side.value, timestamp_ms, quality.value, player.fitness)
        return quality

    def apply_knockback(self, victim: PlayerState, attacker: PlayerState) -> None:
        """Push the victim straight away from the attacker."""
        offset = victim.position - attacker.position
        heading = np.arctan2(offset[1], offset[0])
        victim.velocity = np.array([np.cos(heading), np.sin(heading)]) * self.KNOCKBACK_FORCE
