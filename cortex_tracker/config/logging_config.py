import logging
from pathlib import Path
from typing import Optional

from cortex_tracker.config.settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

def setup_logging(debug: bool = False, log_dir: Optional[Path] = None):
    """Configure logging for the application"""
    # Create logs directory if it doesn't exist
    log_dir = log_dir or settings.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if (debug or settings.DEBUG) else logging.INFO,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_dir / "cortex_tracker.log"),
            logging.StreamHandler()  # Also log to console
        ],
        force=True
    )

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized in {log_dir}")
