from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
import logging

from cortex_tracker.models.session import FocusChangeEvent, LiveWorkspace
from cortex_tracker.services.workspace import is_tracked

logger = logging.getLogger(__name__)

# No window seen yet; never equal to a title, including None
_UNSET = object()

@dataclass
class FocusCursor:
    """Most recent applied sample"""
    app_name: Optional[str] = None
    window_title: Optional[str] = None
    timestamp: Optional[datetime] = None

class FocusTracker:
    """Focus bookkeeping between polls

    Holds two independent pieces of state: the cursor of the last applied
    sample, used for durations and for hiding untracked apps on a transition,
    and the last distinct window title, which gates focusChange entries.
    """

    def __init__(self):
        self.cursor = FocusCursor()
        self.last_active_window: Any = _UNSET

    def duration_ms(self, now: datetime) -> Optional[int]:
        """Milliseconds since the previous sample, None before the first one"""
        if self.cursor.timestamp is None:
            return None
        return int((now - self.cursor.timestamp).total_seconds() * 1000)

    def app_to_hide(self, app_name: str, workspace: LiveWorkspace) -> Optional[str]:
        """Return the previously focused app if focus just left an untracked app"""
        previous = self.cursor.app_name
        if previous and previous != app_name and not is_tracked(workspace, previous):
            return previous
        return None

    def advance(self, app_name: str, window_title: Optional[str], now: datetime) -> None:
        self.cursor = FocusCursor(app_name=app_name, window_title=window_title, timestamp=now)

    def detect_focus_change(
        self,
        window_title: Optional[str],
        app_name: str,
        now: datetime
    ) -> Optional[FocusChangeEvent]:
        """Return a focusChange entry when the title differs from the last distinct one"""
        if window_title == self.last_active_window:
            return None

        self.last_active_window = window_title
        logger.info(f"Focus changed to: {window_title}")
        return FocusChangeEvent(timestamp=now, window_title=window_title, app_name=app_name)
