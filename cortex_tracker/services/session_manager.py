import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from cortex_tracker.config.settings import settings
from cortex_tracker.models.session import (
    UPDATE_TYPES,
    PollSnapshotEvent,
    SessionData,
    TabFocusEvent,
    TabInfo,
    WorkspaceApp,
    update_event_adapter,
)
from cortex_tracker.models.window import WindowInfo
from cortex_tracker.services.closures import ClosureDetector
from cortex_tracker.services.desktop import (
    AppVisibilityController,
    ForegroundSampler,
    TabInspector,
)
from cortex_tracker.services.errors import NoActiveSessionError
from cortex_tracker.services.focus import FocusTracker
from cortex_tracker.services.idle import IdleTracker
from cortex_tracker.services.launcher import AppLauncher
from cortex_tracker.services.persistence import SessionFileStore
from cortex_tracker.services.poller import Poller
from cortex_tracker.services.workspace import Update, is_tracked, log_entry_for, reduce_workspace

logger = logging.getLogger(__name__)

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class SessionManager:
    """Owns the live session, its poller and the focus, idle and closure trackers

    Everything runs on one event loop. Each tick remembers the epoch it
    started in and drops its results if ``start_session`` or ``stop_polling``
    bumped the epoch while it was waiting on the sampler or the tab inspector.
    """

    def __init__(
        self,
        sampler: ForegroundSampler,
        tab_inspector: TabInspector,
        visibility: AppVisibilityController,
        launcher: Optional[AppLauncher] = None,
        store: Optional[SessionFileStore] = None,
        clock: Callable[[], datetime] = utcnow,
        poll_interval_seconds: Optional[float] = None,
        idle_threshold_seconds: Optional[float] = None,
        browser_app_name: Optional[str] = None
    ):
        self.sampler = sampler
        self.tab_inspector = tab_inspector
        self.visibility = visibility
        self.launcher = launcher or AppLauncher()
        self.store = store or SessionFileStore()
        self.clock = clock
        self.idle_threshold = (
            idle_threshold_seconds if idle_threshold_seconds is not None
            else settings.IDLE_THRESHOLD_SECONDS
        )
        self.browser_app_name = browser_app_name or settings.BROWSER_APP_NAME
        self.poller = Poller(self.tick, poll_interval_seconds or settings.POLL_INTERVAL_SECONDS)

        self.session: Optional[SessionData] = None
        self.epoch = 0
        self.focus = FocusTracker()
        self.idle = IdleTracker(self.idle_threshold, self.clock())
        self.closures = ClosureDetector()

    # Session lifecycle

    def start_session(self) -> SessionData:
        """Replace any live session with a fresh one and start polling"""
        if self.session is not None:
            logger.info(f"Discarding session {self.session.session_name}")

        now = self.clock()
        self.epoch += 1
        self.focus = FocusTracker()
        self.idle = IdleTracker(self.idle_threshold, now)
        self.closures = ClosureDetector()
        self.session = SessionData.new(now)

        logger.info(f"New session started: {self.session.session_name}")
        self.start_polling()
        return self.session

    def start_polling(self) -> bool:
        return self.poller.start()

    async def stop_polling(self) -> None:
        """Stop the poller; results of a tick still in flight are discarded"""
        self.epoch += 1
        await self.poller.stop()

    def get_session_data(self) -> Optional[SessionData]:
        return self.session

    def save_session(self) -> Path:
        """Write the live session to a new timestamped file

        Raises:
            NoActiveSessionError: If no session has been started
            SessionSaveError: If the file cannot be written
        """
        if self.session is None:
            raise NoActiveSessionError("No active session to save")
        return self.store.save(self.session, self.clock())

    def load_session(self, path: Optional[Path] = None) -> Optional[SessionData]:
        """Read a session file; the result is not attached as the live session"""
        return self.store.load(path)

    async def launch_app(self, app_path: str) -> bool:
        return await self.launcher.launch(app_path)

    def is_app_in_workspace(self, app_name: str) -> bool:
        """Exact-name membership check against the live workspace"""
        if self.session is None:
            return False
        return any(app.name == app_name for app in self.session.live_workspace.apps)

    # Update API

    def update_session_data(self, item: Union[Update, Dict[str, Any]]) -> None:
        """Apply a workspace lifecycle update and log it

        Accepts an update model or a plain dict with a ``type`` key. Updates
        without a live session, with an unknown type or with a malformed
        payload are logged and dropped.
        """
        if self.session is None:
            logger.error("Session data is not initialized, dropping update")
            return

        if isinstance(item, dict):
            update_type = item.get("type")
            if update_type not in UPDATE_TYPES:
                logger.warning(f"Unknown session update type: {update_type}")
                return
            try:
                item = update_event_adapter.validate_python(item)
            except ValidationError as e:
                logger.warning(f"Invalid {update_type} update: {e}")
                return

        now = self.clock()
        workspace = self.session.live_workspace
        self.session.live_workspace = reduce_workspace(workspace, item, now)
        self.session.event_log.append(log_entry_for(item, now))
        logger.info(f"Updated session with: {item.type}")

    # Polling

    async def tick(self) -> None:
        """One poll: focus, idle tracking, closure detection, idle check"""
        epoch = self.epoch
        sample = await self.poll_active_window(epoch)
        if epoch != self.epoch or self.session is None:
            return

        if sample is not None:
            self.idle.observe(sample.owner.name, self.clock())
        self.detect_app_closures(self.session.live_workspace.apps)
        self.check_idle_status()

    async def poll_active_window(self, epoch: Optional[int] = None) -> Optional[WindowInfo]:
        """Sample the foreground window and apply it to the focus state

        Returns:
            Optional[WindowInfo]: The sample, or None if nothing was sampled or applied
        """
        epoch = self.epoch if epoch is None else epoch
        if self.session is None:
            logger.warning("No active session, skipping poll")
            return None

        try:
            sample = await self.sampler.sample()
        except Exception as e:
            logger.error(f"Failed to poll active window: {e}")
            return None
        if sample is None:
            return None

        app_name = sample.owner.name
        is_browser = app_name == self.browser_app_name
        tab: Optional[TabInfo] = None
        if is_browser:
            try:
                tab = await self.tab_inspector.inspect()
            except Exception as e:
                logger.error(f"Failed to inspect browser tab: {e}")

        if epoch != self.epoch:
            logger.debug("Discarding stale poll result")
            return None

        self._apply_sample(sample, tab, is_browser)
        return sample

    def _apply_sample(self, sample: WindowInfo, tab: Optional[TabInfo], is_browser: bool) -> None:
        session = self.session
        app_name = sample.owner.name
        title = sample.title
        now = self.clock()
        duration_ms = self.focus.duration_ms(now)

        # Focus just left an untracked app: hide it
        to_hide = self.focus.app_to_hide(app_name, session.live_workspace)
        if to_hide:
            logger.info(f"Hiding previously focused untracked app: {to_hide}")
            try:
                self.visibility.hide([to_hide])
            except Exception as e:
                logger.error(f"Failed to hide {to_hide}: {e}")

        if is_browser:
            event = TabFocusEvent(
                timestamp=now,
                app_name=app_name,
                window_title=title,
                duration_ms=duration_ms,
                title=tab.title if tab else None,
                url=tab.url if tab else None
            )
        else:
            event = PollSnapshotEvent(
                timestamp=now,
                app_name=app_name,
                window_title=title,
                duration_ms=duration_ms
            )
        session.event_log.append(event)

        workspace = session.live_workspace
        if is_tracked(workspace, app_name):
            active_tab = None
            if tab and tab.title and tab.url:
                active_tab = TabInfo(title=tab.title, url=tab.url)
            session.live_workspace = workspace.model_copy(update={
                "active_app_id": app_name,
                "active_window_id": title,
                "active_tab": active_tab
            })

        self.focus.advance(app_name, title, now)
        focus_change = self.focus.detect_focus_change(title, app_name, now)
        if focus_change:
            session.event_log.append(focus_change)

    def detect_app_closures(self, current_apps: List[WorkspaceApp]) -> None:
        """Log an inferred app_closed for every member gone since the last tick"""
        if self.session is None:
            return
        self.session.event_log.extend(self.closures.detect(current_apps, self.clock()))

    def check_idle_status(self) -> None:
        """Append the idle_check entry for this tick"""
        if self.session is None:
            return
        self.session.event_log.append(self.idle.check(self.clock()))
