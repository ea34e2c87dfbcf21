from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment with defaults.

    Environment variable mapping follows pydantic's rules (e.g., APP_NAME, DEBUG,
    DATA_DIR, DB_FILENAME, FALLBACK_DAYS_IN_MONTH).
    """

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Basic app metadata
    app_name: str = "Office Expense Tracker"
    debug: bool = True
    version: str = "0.1.0"

    # Data & persistence
    data_dir: Path = Path("data")
    db_filename: str = "office_expenses.sqlite3"
    db_path: Optional[Path] = None  # derived if not provided

    # Divisor used for proration when no budget month is selected
    fallback_days_in_month: int = Field(30, ge=1, le=31)

    # JSON lines on stdout; set LOG_JSON=false for plain text while developing
    log_json: bool = True

    # Stamped on expenses created without an explicit author
    default_entered_by: str = "Office Admin"

    def init_post_load(self) -> None:
        """Finalize derived fields and ensure directories exist."""
        if self.db_path is None:
            self.db_path = self.data_dir / self.db_filename
        self.db_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    settings.init_post_load()
    return settings
