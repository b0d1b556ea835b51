from datetime import datetime
from typing import List, Set
import logging

from cortex_tracker.models.session import AppClosedEvent, WorkspaceApp

logger = logging.getLogger(__name__)

class ClosureDetector:
    """Infers closed apps from workspace members that vanished between ticks"""

    def __init__(self):
        self.previous_paths: Set[str] = set()

    def detect(self, current_apps: List[WorkspaceApp], now: datetime) -> List[AppClosedEvent]:
        """Compare against the previous tick and return one entry per vanished path

        Args:
            current_apps: Workspace members at this tick
            now: Timestamp for the inferred entries

        Returns:
            List[AppClosedEvent]: Inferred closures, sorted by path
        """
        current_paths = {app.path for app in current_apps}
        closed = sorted(self.previous_paths - current_paths)

        events = []
        for path in closed:
            logger.info(f"App closed: {path}")
            events.append(AppClosedEvent(timestamp=now, path=path))

        self.previous_paths = current_paths
        return events
