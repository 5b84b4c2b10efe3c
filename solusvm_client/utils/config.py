"""Configuration management using Pydantic Settings."""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from solusvm_client.exceptions import ConfigurationError


def _env_file_candidates() -> list[Path]:
    """Return .env locations in order of priority (later overrides earlier)."""
    return [
        Path.home() / ".solusvm-client" / ".env",
        Path.cwd() / ".env",
    ]


def _get_env_files() -> tuple[str, ...]:
    """Get list of existing .env files to load."""
    env_files = [str(path) for path in _env_file_candidates() if path.exists()]
    return tuple(env_files) if env_files else (".env",)


def _load_env_files_to_environ() -> None:
    """Load .env files into os.environ without overriding real variables.

    pydantic-settings resolves env_file when the class is defined, so files
    in the directory the application is started from are picked up here.
    """
    from dotenv import dotenv_values

    for env_file in _env_file_candidates():
        if not env_file.exists():
            continue
        for key, value in dotenv_values(env_file).items():
            if key not in os.environ and value is not None:
                os.environ[key] = value


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=_get_env_files(),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # SolusVM API connection
    solusvm_api_url: str = ""
    solusvm_api_id: str = ""
    solusvm_api_key: SecretStr = SecretStr("")

    # Transport, fixed for the lifetime of a client
    solusvm_timeout: float = 20.0
    solusvm_ssl_verify: bool = False  # SolusVM masters commonly run self-signed certs

    # Logging
    log_level: str = "INFO"


class ConnectionIdentity(BaseModel):
    """Immutable (base URL, account id, secret key) triple."""

    model_config = ConfigDict(frozen=True)

    url: str
    api_id: str
    api_key: SecretStr

    @classmethod
    def create(cls, url: str | None, api_id: str | None, api_key: str | SecretStr | None) -> "ConnectionIdentity":
        """Build an identity, requiring all three values to be present."""
        if isinstance(api_key, SecretStr):
            api_key = api_key.get_secret_value()

        missing = [
            name
            for name, value in (("url", url), ("api_id", api_id), ("api_key", api_key))
            if value is None or str(value) == ""
        ]
        if missing:
            raise ConfigurationError(
                f"Missing SolusVM connection setting(s): {', '.join(missing)}. "
                "Pass them to the client or set SOLUSVM_API_URL, SOLUSVM_API_ID "
                "and SOLUSVM_API_KEY."
            )

        return cls(url=str(url).rstrip("/"), api_id=str(api_id), api_key=SecretStr(str(api_key)))

    @property
    def command_url(self) -> str:
        """Endpoint every action is posted to."""
        return f"{self.url}/command.php"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _load_env_files_to_environ()
        _settings = Settings()
    return _settings
