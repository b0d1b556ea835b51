"""Desktop integration: foreground window, browser tab and app visibility

The session manager only depends on the protocols below. The AppleScript
implementations talk to macOS through ``osascript``.
"""
import asyncio
import logging
import subprocess
from typing import Optional, Protocol, Sequence

from cortex_tracker.config.settings import settings
from cortex_tracker.models.session import TabInfo
from cortex_tracker.models.window import WindowInfo, WindowOwner
from cortex_tracker.services.errors import SamplerError

logger = logging.getLogger(__name__)

SEPARATOR = "|||"

FRONT_WINDOW_SCRIPT = f'''
tell application "System Events"
    set frontApp to first application process whose frontmost is true
    set frontAppName to name of frontApp
    try
        tell process frontAppName
            set windowTitle to name of front window
        end tell
    on error
        set windowTitle to ""
    end try
end tell
return frontAppName & "{SEPARATOR}" & windowTitle
'''

class ForegroundSampler(Protocol):
    async def sample(self) -> Optional[WindowInfo]:
        """Return the focused window, or None when there is none"""
        ...

class TabInspector(Protocol):
    async def inspect(self) -> Optional[TabInfo]:
        """Return the browser's active tab, or None when it cannot be read"""
        ...

class AppVisibilityController(Protocol):
    def hide(self, app_names: Sequence[str]) -> None:
        """Hide every window of the named apps without waiting for the result"""
        ...

def _quote(value: str) -> str:
    """Escape a value for use inside an AppleScript string literal"""
    return value.replace("\\", "\\\\").replace('"', '\\"')

async def run_osascript(script: str, timeout: Optional[float] = None) -> str:
    """Run an AppleScript snippet and return its stripped stdout

    Raises:
        SamplerError: If osascript cannot be started, fails or times out
    """
    timeout = timeout or settings.OSASCRIPT_TIMEOUT_SECONDS
    try:
        proc = await asyncio.create_subprocess_exec(
            "osascript", "-e", script,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )
    except OSError as e:
        raise SamplerError(f"Failed to start osascript: {e}") from e

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise SamplerError(f"osascript timed out after {timeout}s")

    if proc.returncode != 0:
        raise SamplerError(f"osascript failed: {stderr.decode(errors='replace').strip()}")
    return stdout.decode(errors="replace").strip()

class AppleScriptForegroundSampler:
    """Asks System Events which process is frontmost and for its front window"""

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    async def sample(self) -> Optional[WindowInfo]:
        output = await run_osascript(FRONT_WINDOW_SCRIPT, self.timeout)
        app_name, _, window_title = output.partition(SEPARATOR)
        app_name = app_name.strip()
        if not app_name:
            return None
        return WindowInfo(title=window_title.strip() or None, owner=WindowOwner(name=app_name))

class ChromeTabInspector:
    """Reads the active tab of the first non-minimized browser window"""

    def __init__(self, app_name: Optional[str] = None, timeout: Optional[float] = None):
        self.app_name = app_name or settings.BROWSER_APP_NAME
        self.timeout = timeout

    def _script(self) -> str:
        return (
            f'tell application "{_quote(self.app_name)}"\n'
            '  repeat with w in windows\n'
            '    if not minimized of w then\n'
            f'      return (title of active tab of w) & "{SEPARATOR}" & (URL of active tab of w)\n'
            '    end if\n'
            '  end repeat\n'
            'end tell'
        )

    async def inspect(self) -> Optional[TabInfo]:
        output = await run_osascript(self._script(), self.timeout)
        if SEPARATOR not in output:
            return None
        title, _, url = output.partition(SEPARATOR)
        return TabInfo(title=title.strip() or None, url=url.strip() or None)

class AppleScriptVisibilityController:
    """Hides apps by turning off their process visibility"""

    def hide(self, app_names: Sequence[str]) -> None:
        for name in app_names:
            script = (
                'tell application "System Events" to '
                f'set visible of process "{_quote(name)}" to false'
            )
            try:
                subprocess.Popen(
                    ["osascript", "-e", script],
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL
                )
                logger.debug(f"Requested hide of {name}")
            except OSError as e:
                logger.error(f"Failed to hide {name}: {e}")
