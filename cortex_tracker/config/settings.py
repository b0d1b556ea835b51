from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """Application settings with validation"""

    # Polling Configuration
    POLL_INTERVAL_SECONDS: float = Field(default=3.0, gt=0)
    IDLE_THRESHOLD_SECONDS: float = Field(default=60.0, ge=0)

    # Desktop Integration
    BROWSER_APP_NAME: str = "Google Chrome"
    OSASCRIPT_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)

    # Path Configuration
    BASE_DIR: Path = Path(__file__).parent.parent.parent
    SESSION_DIR: Path = BASE_DIR / "sessions"
    SESSION_FILE: Path = SESSION_DIR / "session.json"  # read by load_session, never written by save
    LOG_DIR: Path = BASE_DIR / "logs"

    # Service Configuration
    SAVE_ON_EXIT: bool = True

    # Development Configuration
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def validate_paths(self) -> None:
        """Ensure all required paths exist"""
        for path in [self.SESSION_DIR, self.LOG_DIR]:
            path.mkdir(parents=True, exist_ok=True)

settings = Settings()
