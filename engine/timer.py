"""
Frame Driver - External clock for the step-driven game core.

Emits a (timestamp, delta) tick roughly every 16ms using a precise Qt
timer, measuring real elapsed time so late frames report a larger delta.
"""

from PySide6.QtCore import QObject, Qt, Signal, QTimer, QElapsedTimer

from config import DRIVER_SETTINGS


class FrameDriver(QObject):
    """
    Monotonic frame clock that feeds MatchSession.step().

    Timestamps are milliseconds since start(), excluding paused time.

    Usage:
        driver = FrameDriver()
        driver.tick.connect(session.step)
        driver.start()
    """

    # Signals
    tick = Signal(float, float)     # timestamp_ms, delta_ms
    started = Signal()
    stopped = Signal()

    TICK_INTERVAL_MS = DRIVER_SETTINGS.tick_interval_ms

    def __init__(self, interval_ms: int = None):
        """
        Initialize the frame driver.

        Args:
            interval_ms: Tick interval in milliseconds (default: 16)
        """
        super().__init__()

        self._interval_ms = interval_ms or self.TICK_INTERVAL_MS
        self._is_running = False
        self._is_paused = False

        # Internal Qt timer
        self._timer = QTimer(self)
        self._timer.setInterval(self._interval_ms)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._on_tick)

        # Elapsed time tracking for precision
        self._elapsed = QElapsedTimer()
        self._total_paused_ms = 0.0
        self._pause_start_ms = 0.0
        self._last_tick_ms = 0.0

    @property
    def is_running(self) -> bool:
        """Check if the driver is currently ticking."""
        return self._is_running and not self._is_paused

    @property
    def is_paused(self) -> bool:
        return self._is_paused

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def now_ms(self) -> float:
        """Current timestamp in milliseconds, excluding paused time."""
        if not self._elapsed.isValid():
            return 0.0
        paused = self._total_paused_ms
        if self._is_paused:
            paused += self._elapsed.elapsed() - self._pause_start_ms
        return float(self._elapsed.elapsed() - paused)

    def start(self) -> None:
        """Start ticking from timestamp zero."""
        self._total_paused_ms = 0.0
        self._pause_start_ms = 0.0
        self._last_tick_ms = 0.0
        self._is_running = True
        self._is_paused = False

        self._elapsed.start()
        self._timer.start()
        self.started.emit()

    def stop(self) -> None:
        """Stop ticking."""
        self._timer.stop()
        was_running = self._is_running
        self._is_running = False
        self._is_paused = False
        if was_running:
            self.stopped.emit()

    def pause(self) -> None:
        """Freeze the timestamp until resume()."""
        if self._is_running and not self._is_paused:
            self._timer.stop()
            self._pause_start_ms = self._elapsed.elapsed()
            self._is_paused = True

    def resume(self) -> None:
        """Continue ticking from the paused timestamp."""
        if self._is_running and self._is_paused:
            self._total_paused_ms += self._elapsed.elapsed() - self._pause_start_ms
            self._is_paused = False
            self._timer.start()

    def advance(self, timestamp_ms: float) -> None:
        """Emit a tick for an explicit timestamp (headless or scripted stepping)."""
        delta = max(0.0, float(timestamp_ms) - self._last_tick_ms)
        self._last_tick_ms = float(timestamp_ms)
        self.tick.emit(float(timestamp_ms), delta)

    def _on_tick(self) -> None:
        """Handle timer tick - emitted every interval."""
        self.advance(self.now_ms)
