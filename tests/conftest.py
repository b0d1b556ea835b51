import pytest
import pytest_asyncio
from pathlib import Path
import tempfile
import shutil
from datetime import datetime, timedelta, timezone
from cortex_tracker.models.session import TabInfo
from cortex_tracker.models.window import WindowInfo, WindowOwner
from cortex_tracker.services.persistence import SessionFileStore
from cortex_tracker.services.session_manager import SessionManager

class FakeClock:
    """Manually advanced clock"""

    def __init__(self, start=None):
        self.now = start or datetime(2026, 1, 7, 15, 16, 19, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)

class FakeSampler:
    """Foreground sampler returning whatever window was focused last"""

    def __init__(self):
        self.window = None
        self.error = None
        self.calls = 0

    def focus(self, app_name, title):
        self.window = WindowInfo(title=title, owner=WindowOwner(name=app_name))

    async def sample(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.window

class FakeTabInspector:
    """Tab inspector with an optional hook run while the lookup is pending"""

    def __init__(self):
        self.tab = None
        self.error = None
        self.on_inspect = None
        self.calls = 0

    def set_tab(self, title, url):
        self.tab = TabInfo(title=title, url=url)

    async def inspect(self):
        self.calls += 1
        if self.on_inspect:
            self.on_inspect()
        if self.error:
            raise self.error
        return self.tab

class RecordingVisibility:
    def __init__(self):
        self.calls = []

    def hide(self, app_names):
        self.calls.append(list(app_names))

@pytest.fixture
def temp_dir():
    """Provide a temporary directory for test files"""
    temp_path = Path(tempfile.mkdtemp())
    yield temp_path
    shutil.rmtree(temp_path)

@pytest.fixture
def clock():
    return FakeClock()

@pytest.fixture
def sampler():
    return FakeSampler()

@pytest.fixture
def tab_inspector():
    return FakeTabInspector()

@pytest.fixture
def visibility():
    return RecordingVisibility()

@pytest.fixture
def store(temp_dir):
    """Provide a file store writing into the temporary directory"""
    return SessionFileStore(
        session_dir=temp_dir / "sessions",
        session_file=temp_dir / "sessions" / "session.json"
    )

@pytest.fixture
def manager(sampler, tab_inspector, visibility, store, clock):
    """Provide a session manager whose poller never fires on its own during a test"""
    return SessionManager(
        sampler=sampler,
        tab_inspector=tab_inspector,
        visibility=visibility,
        store=store,
        clock=clock,
        poll_interval_seconds=3600,
        idle_threshold_seconds=60,
        browser_app_name="Google Chrome"
    )

@pytest_asyncio.fixture
async def started(manager):
    """Provide a manager with a live session, stopped after the test"""
    manager.start_session()
    yield manager
    await manager.stop_polling()
