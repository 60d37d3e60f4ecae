"""
Echoes Configuration

Centralized settings, paths, and constants for the game core.
"""

import logging
import logging.handlers
from pathlib import Path
from dataclasses import dataclass
import appdirs


# Application info
APP_NAME = "Echoes"
APP_AUTHOR = "Echoes"
APP_VERSION = "1.0.0"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def log_file(self) -> Path:
        return self.log_dir / "echoes.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        self.log_dir.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class BeatSettings:
    """Shared pulse timing."""
    # One full beat cycle in milliseconds
    period_ms: float = 2000.0

    # Proximity cutoffs (identical for both players)
    on_beat_threshold: float = 0.85
    perfect_threshold: float = 0.95

    # Minimum gap between two audio beat cues
    beat_cue_gap_ms: float = 500.0


@dataclass(frozen=True)
class ActionSettings:
    """Resonance and dash tuning."""
    resonance_cooldown_ms: float = 200.0
    dash_cooldown_ms: float = 500.0

    # Both velocity axes must be below this for a dash to fizzle
    dash_min_velocity: float = 10.0
    dash_force: float = 500.0

    resonance_miss_penalty: float = 5.0
    dash_perfect_bonus: float = 20.0
    dash_good_bonus: float = 5.0
    dash_miss_penalty: float = 10.0

    knockback_force: float = 450.0


@dataclass(frozen=True)
class FitnessSettings:
    """Echo meter (fitness) settings."""
    minimum: float = 0.0
    maximum: float = 100.0
    initial: float = 50.0

    # Speed history ring buffer
    history_capacity: int = 10
    min_samples: int = 3

    # regularity = clamp((pivot - mean_abs_deviation) / pivot, -1, 1)
    regularity_pivot: float = 50.0
    regularity_gain: float = 0.02

    # Fitness needed for resonance to score
    scoring_threshold: float = 50.0


@dataclass(frozen=True)
class RoundSettings:
    """Round and session settings."""
    # Every mode plays for 90 seconds
    duration_ms: float = 90_000.0

    # Fixed play order for a session
    mode_order: tuple[str, ...] = ("PulseDuel", "EchoChase", "Dissonance")


@dataclass(frozen=True)
class PulseDuelSettings:
    """Scoring zone behaviour for Pulse Duel."""
    min_radius: float = 60.0
    max_radius: float = 140.0
    initial_radius: float = 100.0
    flip_interval_ms: float = 15_000.0
    growth_per_ms: float = 0.02
    rotation_per_ms: float = 0.001


@dataclass(frozen=True)
class EchoChaseSettings:
    """Carrier rules for Echo Chase."""
    auto_score_interval_ms: float = 2000.0
    auto_score_points: int = 1
    steal_radius: float = 80.0
    steal_points: int = 2


@dataclass(frozen=True)
class DissonanceSettings:
    """Phase shift for Dissonance."""
    transition_ms: float = 45_000.0
    inverted_miss_points: int = 2


@dataclass(frozen=True)
class FieldSettings:
    """Playing field geometry."""
    width: float = 800.0
    height: float = 600.0
    center: tuple[float, float] = (400.0, 300.0)
    p1_spawn: tuple[float, float] = (250.0, 300.0)
    p2_spawn: tuple[float, float] = (550.0, 300.0)
    player_radius: float = 20.0


@dataclass(frozen=True)
class MotionSettings:
    """Arcade movement used when no external physics layer is attached."""
    acceleration: float = 1200.0
    drag: float = 400.0
    max_speed: float = 280.0


@dataclass(frozen=True)
class DriverSettings:
    """Frame driver settings."""
    # Roughly 60 steps per second
    tick_interval_ms: int = 16


# Singleton instances
PATHS = Paths()
BEAT_SETTINGS = BeatSettings()
ACTION_SETTINGS = ActionSettings()
FITNESS_SETTINGS = FitnessSettings()
ROUND_SETTINGS = RoundSettings()
PULSE_DUEL_SETTINGS = PulseDuelSettings()
ECHO_CHASE_SETTINGS = EchoChaseSettings()
DISSONANCE_SETTINGS = DissonanceSettings()
FIELD_SETTINGS = FieldSettings()
MOTION_SETTINGS = MotionSettings()
DRIVER_SETTINGS = DriverSettings()


def configure_logging(level: int = logging.INFO, to_file: bool = True) -> None:
    """Install console and (optionally) rotating file handlers on the root logger."""
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
    )
    root = logging.getLogger()
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if to_file:
        file_handler = logging.handlers.RotatingFileHandler(
            PATHS.log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def init_config(log_level: int = logging.INFO) -> None:
    """Initialize configuration, create required directories and set up logging."""
    PATHS.ensure_directories()
    configure_logging(log_level)
