import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from cortex_tracker.config.settings import settings
from cortex_tracker.models.session import SessionData
from cortex_tracker.services.errors import SessionLoadError, SessionSaveError

logger = logging.getLogger(__name__)

class SessionFileStore:
    """Writes session snapshots to disk and reads them back

    Saves go to timestamped files under ``session_dir``; ``load`` reads the
    fixed ``session_file`` unless told otherwise, so a plain load never sees
    what ``save`` wrote.
    """

    def __init__(self, session_dir: Optional[Path] = None, session_file: Optional[Path] = None):
        self.session_dir = Path(session_dir or settings.SESSION_DIR)
        self.session_file = Path(session_file or settings.SESSION_FILE)

    @staticmethod
    def filename_for(now: datetime) -> str:
        """File name for a save at ``now``, without colons or fractional seconds"""
        return f"session_{now.strftime('%Y-%m-%d_%H-%M-%S')}.json"

    def save(self, session: SessionData, now: datetime) -> Path:
        """Write a snapshot of the session to a new file

        Args:
            session: Session to serialize; it is not modified
            now: Save time used in the file name

        Returns:
            Path: The file written

        Raises:
            SessionSaveError: If the directory or file cannot be written
        """
        payload = session.to_json()
        base = self.filename_for(now)
        try:
            self.session_dir.mkdir(parents=True, exist_ok=True)
            path = self.session_dir / base
            suffix = 0
            while True:
                try:
                    # Exclusive create so an existing save is never overwritten
                    with open(path, "x", encoding="utf-8") as f:
                        f.write(payload)
                    break
                except FileExistsError:
                    suffix += 1
                    path = self.session_dir / f"{Path(base).stem}_{suffix}.json"
        except OSError as e:
            raise SessionSaveError(f"Failed to save session to {self.session_dir}: {e}") from e

        logger.info(f"Session saved to {path}")
        return path

    def load(self, path: Optional[Path] = None) -> Optional[SessionData]:
        """Read a session file into a detached SessionData

        Args:
            path: File to read. Defaults to the fixed session file.

        Returns:
            Optional[SessionData]: The session, or None if the file does not exist

        Raises:
            SessionLoadError: If the file exists but cannot be read or parsed
        """
        path = Path(path or self.session_file)
        if not path.exists():
            logger.warning(f"No session file found at {path}")
            return None

        try:
            session = SessionData.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError) as e:
            raise SessionLoadError(f"Failed to load session from {path}: {e}") from e

        logger.info(f"Loaded session from {path}")
        return session

    def list_saved(self) -> List[Path]:
        """Saved session files, oldest first"""
        if not self.session_dir.exists():
            return []
        return sorted(self.session_dir.glob("session_*.json"))
