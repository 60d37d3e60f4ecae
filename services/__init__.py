"""
Echoes Services

Application services for event routing and scripted input.
"""

from services.event_bus import EventBus
from services.autopilot import Autopilot, PilotProfile

__all__ = ["EventBus", "Autopilot", "PilotProfile"]
