import asyncio
import logging
import sys
from typing import List

logger = logging.getLogger(__name__)

def open_command(app_path: str) -> List[str]:
    """Build the platform's "open" command for a path

    The path is passed as a single argument, so spaces need no escaping.
    """
    if sys.platform == 'darwin':
        return ["open", app_path]
    if sys.platform.startswith('win'):
        return ["cmd", "/c", "start", "", app_path]
    return ["xdg-open", app_path]

class AppLauncher:
    """Starts applications through the OS, fire-and-forget"""

    async def launch(self, app_path: str) -> bool:
        """Launch the application at a filesystem path

        Args:
            app_path: Path of the application bundle or binary

        Returns:
            bool: True if the open command succeeded. Failures are logged, never raised.
        """
        try:
            proc = await asyncio.create_subprocess_exec(
                *open_command(app_path),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE
            )
            _, stderr = await proc.communicate()
        except OSError as e:
            logger.error(f"Failed to launch app: {e}")
            return False

        if proc.returncode != 0:
            reason = stderr.decode(errors="replace").strip() or f"exit code {proc.returncode}"
            logger.error(f"Failed to launch app {app_path}: {reason}")
            return False

        logger.info(f"Launched app: {app_path}")
        return True
