"""Runtime settings loaded from environment variables."""

from functools import lru_cache
from typing import Annotated, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

NonEmptyStr = Annotated[str, Field(min_length=1)]
PositiveFloat = Annotated[float, Field(gt=0.0)]
PositiveInt = Annotated[int, Field(gt=0)]
BcryptRounds = Annotated[int, Field(ge=4, le=31)]


class ConfigurationError(RuntimeError):
    """Raised when required runtime configuration is missing or invalid."""


class Settings(BaseSettings):
    """Environment-driven application settings."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: NonEmptyStr | None = Field(default=None, validation_alias="DATABASE_URL")
    database_ssl_mode: Literal["disable", "require"] = Field(
        default="disable",
        validation_alias="DATABASE_SSL_MODE",
    )
    password_min_length: PositiveInt = Field(default=6, validation_alias="PASSWORD_MIN_LENGTH")
    bcrypt_rounds: BcryptRounds = Field(default=12, validation_alias="BCRYPT_ROUNDS")
    auth_timeout_seconds: PositiveFloat = Field(
        default=10.0,
        validation_alias="AUTH_TIMEOUT_SECONDS",
    )
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Load and cache application settings, failing fast on invalid values."""

    try:
        return Settings()
    except ValidationError as error:
        invalid = sorted(
            {str(location) for detail in error.errors() for location in detail["loc"]}
        )
        raise ConfigurationError(
            f"invalid environment configuration: {', '.join(invalid)}"
        ) from error
