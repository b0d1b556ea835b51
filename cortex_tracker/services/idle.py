from datetime import datetime
from typing import Optional
import logging

from cortex_tracker.models.session import IdleCheckEvent

logger = logging.getLogger(__name__)

class IdleTracker:
    """Measures time since the foreground application last changed"""

    def __init__(self, threshold_seconds: float, now: datetime):
        self.threshold_seconds = threshold_seconds
        self.last_active_app: Optional[str] = None
        self.last_activity_time = now

    def observe(self, app_name: Optional[str], now: datetime) -> None:
        """Record the app seen by this tick; a different app counts as activity"""
        if app_name != self.last_active_app:
            self.last_activity_time = now
            self.last_active_app = app_name

    def idle_seconds(self, now: datetime) -> float:
        return (now - self.last_activity_time).total_seconds()

    def check(self, now: datetime) -> IdleCheckEvent:
        """Build the idle_check entry for this tick"""
        idle_seconds = self.idle_seconds(now)
        is_idle = idle_seconds > self.threshold_seconds
        logger.debug(f"Idle check: {idle_seconds:.1f}s {'IDLE' if is_idle else 'ACTIVE'}")
        return IdleCheckEvent(timestamp=now, idle_seconds=idle_seconds, is_idle=is_idle)
