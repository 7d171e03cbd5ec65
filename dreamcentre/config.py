"""Application configuration"""
from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache
from typing import Optional


DEFAULT_WEB3FORMS_ENDPOINT = "https://api.web3forms.com/submit"
# Public site key, the same one the website's contact form ships with
DEFAULT_WEB3FORMS_ACCESS_KEY = "b61aef1b-4125-420c-8ec9-1509fe524e61"
DEFAULT_WEBSITE_NAME = "Abbaquar-San Dream Centre Website"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or blank"""


class Settings(BaseSettings):
    """Application settings"""

    # Supabase (optional for the web app: archiving is skipped without it)
    supabase_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("supabase_url", "vite_supabase_url"),
    )
    supabase_service_role_key: Optional[str] = None

    # Web3Forms relay
    web3forms_endpoint: str = DEFAULT_WEB3FORMS_ENDPOINT
    web3forms_access_key: str = DEFAULT_WEB3FORMS_ACCESS_KEY
    website_name: str = DEFAULT_WEBSITE_NAME

    # Application
    environment: str = "development"
    cors_origins: list[str] = ["*"]

    # In-process scheduling of the Supabase housekeeping procedures
    scheduled_tasks_enabled: bool = False
    scheduled_tasks_interval_minutes: int = 15

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def supabase_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)


class TaskSettings(BaseSettings):
    """Settings required by the scheduled task runner"""

    supabase_url: str = Field(
        validation_alias=AliasChoices("supabase_url", "vite_supabase_url"),
    )
    supabase_service_role_key: str

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @field_validator("supabase_url", "supabase_service_role_key")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value.strip()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


def load_task_settings(**overrides) -> TaskSettings:
    """
    Validate the scheduled task configuration once, at process start

    Raises:
        ConfigurationError: if the Supabase URL or service role key is absent
    """
    try:
        return TaskSettings(**overrides)
    except ValidationError as e:
        fields = sorted({str(err["loc"][0]) for err in e.errors() if err.get("loc")})
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(fields)}"
        ) from e
