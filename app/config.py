from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator
from functools import lru_cache
from datetime import timedelta, timezone


PRODUCTION_ENVIRONMENTS = {"production", "staging"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/job_cards"

    @field_validator('DATABASE_URL', mode='before')
    @classmethod
    def convert_database_url(cls, v: str) -> str:
        """Convert postgresql:// to postgresql+asyncpg:// for async support."""
        if v and v.startswith('postgresql://'):
            return v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    SLOW_QUERY_THRESHOLD_MS: int = 500

    # CORS
    FRONTEND_URL: str = "http://localhost:5173"

    # Job cards
    JOB_NUMBER_PREFIX: str = "JC"
    # Workshop local offset applied to naive start times submitted by the forms
    BUSINESS_UTC_OFFSET: str = "+09:30"
    ARCHIVED_PREVIEW_LIMIT: int = 5

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    DOCS_ENABLED: bool = True
    LOG_LEVEL: str | None = None

    @field_validator('BUSINESS_UTC_OFFSET')
    @classmethod
    def validate_utc_offset(cls, v: str) -> str:
        """Offsets look like +09:30 or -05:00."""
        if len(v) != 6 or v[0] not in "+-" or v[3] != ":" or not (v[1:3] + v[4:]).isdigit():
            raise ValueError(f"BUSINESS_UTC_OFFSET must look like +HH:MM, got {v!r}")
        return v

    @model_validator(mode='after')
    def harden_production(self) -> "Settings":
        """Production never runs with debug output."""
        if self.is_production:
            self.DEBUG = False
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() in PRODUCTION_ENVIRONMENTS

    @property
    def business_timezone(self) -> timezone:
        sign = -1 if self.BUSINESS_UTC_OFFSET[0] == "-" else 1
        hours, minutes = self.BUSINESS_UTC_OFFSET[1:].split(":")
        return timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))

    @property
    def sqlalchemy_echo(self) -> bool:
        # SQL echo can leak row data, keep it to local debugging
        return self.DEBUG and not self.is_production

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
