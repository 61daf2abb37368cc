"""
Per-player game clock
"""
import time
from typing import Callable, Dict, Optional

from go_board import BLACK, WHITE, opponent

TIME_SETTINGS = {
    '5m': 5 * 60.0,
    '15m': 15 * 60.0,
    '30m': 30 * 60.0,
}


class GameClock:
    """Sudden-death clock: each side has a fixed budget for the whole game"""

    def __init__(self, seconds: float, now: Callable[[], float] = time.monotonic):
        if seconds <= 0:
            raise ValueError(f"Clock budget must be positive, got {seconds}")
        self._now = now
        self.remaining_time: Dict[int, float] = {BLACK: float(seconds), WHITE: float(seconds)}
        self.running: Optional[int] = None
        self._started_at: Optional[float] = None

    @classmethod
    def from_setting(cls, setting: Optional[str], now: Callable[[], float] = time.monotonic) -> Optional['GameClock']:
        """Build a clock for a time setting tag; None means untimed"""
        if setting is None or setting in ('', 'none', 'unlimited'):
            return None
        if setting not in TIME_SETTINGS:
            raise ValueError(f"Unknown time setting: {setting!r}")
        return cls(TIME_SETTINGS[setting], now=now)

    def start(self, color: int = BLACK) -> None:
        self.running = color
        self._started_at = self._now()

    def stop(self) -> None:
        self._charge()
        self.running = None
        self._started_at = None

    def switch(self) -> None:
        """Charge the running side and start the opponent's time"""
        if self.running is None:
            return
        self._charge()
        self.start(opponent(self.running))

    def remaining(self, color: int) -> float:
        left = self.remaining_time[color]
        if color == self.running and self._started_at is not None:
            left -= self._now() - self._started_at
        return max(0.0, left)

    def expired(self, color: int) -> bool:
        return self.remaining(color) <= 0.0

    def _charge(self) -> None:
        if self.running is None or self._started_at is None:
            return
        now = self._now()
        self.remaining_time[self.running] = max(
            0.0, self.remaining_time[self.running] - (now - self._started_at))
        self._started_at = now
