from typing import List, Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Shared
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    APP_AUTH_BEARER_TOKENS: Optional[str] = None  # Comma-separated; unset disables auth

    # Expiry brackets (gap between created_at and due_time, whole hours)
    EXPIRY_IMMEDIATE_MAX_HOURS: int = 24
    EXPIRY_SHORT_MAX_HOURS: int = 72
    EXPIRY_DUE_MAX_HOURS: int = 90

    # Expiry offsets
    EXPIRY_IMMEDIATE_OFFSET_MINUTES: int = 90
    EXPIRY_SHORT_OFFSET_HOURS: int = 16
    EXPIRY_LONG_LEAD_HOURS: int = 48

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @model_validator(mode="after")
    def _check_expiry_brackets(self) -> "Settings":
        if not (0 <= self.EXPIRY_IMMEDIATE_MAX_HOURS < self.EXPIRY_SHORT_MAX_HOURS < self.EXPIRY_DUE_MAX_HOURS):
            raise ValueError(
                "EXPIRY_*_MAX_HOURS must be strictly increasing: "
                f"{self.EXPIRY_IMMEDIATE_MAX_HOURS} < {self.EXPIRY_SHORT_MAX_HOURS} < {self.EXPIRY_DUE_MAX_HOURS}"
            )
        for name in ("EXPIRY_IMMEDIATE_OFFSET_MINUTES", "EXPIRY_SHORT_OFFSET_HOURS", "EXPIRY_LONG_LEAD_HOURS"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        return self

    @property
    def auth_tokens(self) -> List[str]:
        if not self.APP_AUTH_BEARER_TOKENS:
            return []
        return [t.strip() for t in self.APP_AUTH_BEARER_TOKENS.split(",") if t.strip()]

settings = Settings()
