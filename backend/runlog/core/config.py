from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    database_url: str = "sqlite:///./runlog.db"
    # Timezone used to turn activity start timestamps into calendar dates
    # and to decide what "today" is for goal deadlines.
    # Examples: "America/New_York", "Europe/London", or "local" to use system tz.
    timezone: str = "local"
    log_level: str = "INFO"

    # Per-file upload limit for imports
    max_upload_bytes: int = 25 * 1024 * 1024

    cors_origins: list[str] = ["*"]

    # Allow empty env strings to fall back to defaults
    @field_validator("timezone", mode="before")
    @classmethod
    def _empty_to_local(cls, v):
        if v in ("", None, "null", "None"):
            return "local"
        return v

    class Config:
        env_file = ".env"


settings = Settings()
