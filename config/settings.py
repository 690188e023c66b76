"""Application settings loaded from environment variables."""

from datetime import date
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Database
    database_url: str = "postgresql+psycopg://hr:hr@localhost:5432/hr_retention"
    database_echo: bool = False  # log every SQL statement

    # Analysis
    as_of_date: Optional[date] = None  # None = today
    rolling_attrition_window: int = 12  # months, by bucket position
    rolling_average_window: int = 3
    performance_lookback_months: int = 6

    # Logging
    log_level: str = "INFO"

    def resolve_as_of(self, override: Optional[date] = None) -> date:
        """The reference date for a run: explicit override, configured date, or today."""
        return override or self.as_of_date or date.today()


settings = Settings()
