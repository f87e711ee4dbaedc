"""Configuration management module

Values come from, in order of precedence: constructor arguments, ``DEVMEET_*``
environment variables, a ``.env`` file, and ``config.toml`` in the instance
directory (``$DEVMEET_INSTANCE_PATH``, default ``~/.devmeet``).
"""
import os
from pathlib import Path
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    SettingsConfigDict,
    PydanticBaseSettingsSource,
    TomlConfigSettingsSource,
)
from .enums import Environment


def get_instance_path() -> Path:
    """Instance directory holding ``config.toml`` and the default database"""
    configured = os.environ.get("DEVMEET_INSTANCE_PATH")
    return Path(configured).expanduser() if configured else Path.home() / ".devmeet"


def get_default_database_url() -> str:
    return f"sqlite:///{get_instance_path() / 'devmeet.db'}"


def get_config_file() -> Path | None:
    config_file = get_instance_path() / "config.toml"
    return config_file if config_file.exists() else None


class Settings(BaseSettings):
    """DevMeet settings"""

    app_name: str = "DevMeet"
    app_version: str = "0.1.0"
    debug: bool = False
    # Development degrades failed email delivery to inline secrets
    environment: Environment = Environment.DEVELOPMENT

    database_url: str = Field(default_factory=get_default_database_url)

    # Session tokens
    secret_key: str = "change-me-in-production-please-use-a-secure-random-key"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7
    # Empty disables admin promotion over HTTP
    admin_secret: str = ""

    # Outbound email
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_from: str = "noreply@devmeet.dev"
    smtp_from_name: str = "DevMeet"
    # Base of links embedded in emails
    frontend_url: str = "http://localhost:5173"

    # Signup passcodes and reset tokens
    otp_expire_minutes: int = 10
    otp_length: int = 6
    reset_token_expire_minutes: int = 60
    pending_reap_interval_seconds: int = 60

    match_result_limit: int = 50

    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:5174"]

    server_host: str = "0.0.0.0"
    server_port: int = 8000
    logging_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="DEVMEET_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        """Whether passcode delivery failures are fatal"""
        return self.environment == Environment.PRODUCTION

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the instance TOML file below env and .env"""
        sources = [init_settings, env_settings, dotenv_settings]
        config_file = get_config_file()
        if config_file:
            sources.append(TomlConfigSettingsSource(settings_cls, toml_file=config_file))
        sources.append(file_secret_settings)
        return tuple(sources)


# Global settings instance
settings = Settings()
