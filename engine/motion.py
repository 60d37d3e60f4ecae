"""
Arcade Motion - Minimal stand-in for the physics layer.

Turns a direction vector into velocity with acceleration, drag and a
speed cap, then keeps the player inside the field. A real physics layer
can skip this and report positions/velocities to the session instead.
"""

import numpy as np

from config import MOTION_SETTINGS, FIELD_SETTINGS
from models.player import PlayerState


class ArcadeMotion:
    """Top-down arcade integrator, one player at a time."""

    def __init__(self,
                 acceleration: float = MOTION_SETTINGS.acceleration,
                 drag: float = MOTION_SETTINGS.drag,
                 max_speed: float = MOTION_SETTINGS.max_speed):
        self.acceleration = acceleration
        self.drag = drag
        self.max_speed = max_speed
        radius = FIELD_SETTINGS.player_radius
        self._lower = np.array([radius, radius])
        self._upper = np.array([FIELD_SETTINGS.width - radius, FIELD_SETTINGS.height - radius])

    def integrate(self, player: PlayerState, direction: np.ndarray, delta_ms: float) -> None:
        """Advance one player by delta_ms under the given direction input."""
        dt = max(0.0, delta_ms) / 1000.0
        direction = np.asarray(direction, dtype=float)
        velocity = player.velocity.copy()

        if np.any(direction):
            velocity += direction * self.acceleration * dt
            # Dash and knockback bursts may exceed the cap; only steering is limited
            velocity = self._cap(velocity, max(self.max_speed, player.speed))
        else:
            velocity = self._apply_drag(velocity, dt)

        # Bursts bleed back down to the cap under drag
        if np.hypot(*velocity) > self.max_speed:
            velocity = self._apply_drag(velocity, dt)

        position = player.position + velocity * dt
        clamped = np.clip(position, self._lower, self._upper)
        # Stop movement into a wall
        velocity[clamped != position] = 0.0

        player.position = clamped
        player.velocity = velocity

    def _apply_drag(self, velocity: np.ndarray, dt: float) -> np.ndarray:
        # Per-axis drag toward zero, never overshooting
        reduction = self.drag * dt
        return np.sign(velocity) * np.maximum(np.abs(velocity) - reduction, 0.0)

    @staticmethod
    def _cap(velocity: np.ndarray, limit: float) -> np.ndarray:
        speed = float(np.hypot(velocity[0], velocity[1]))
        if speed > limit > 0:
            return velocity * (limit / speed)
        return velocity
