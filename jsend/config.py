"""Package settings read from the environment."""
import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from jsend.errors import ConfigurationError

DEFAULT_MAX_DEPTH = 512


class Settings(BaseModel):
    log_level: str = Field("INFO", description="Logging level for setup_logging")
    log_file: Optional[str] = Field(None, description="Path of the JSON log file, no file logging when unset")
    max_depth: int = Field(DEFAULT_MAX_DEPTH, ge=1, description="Default nesting limit for decode")
    encoding_options: int = Field(0, ge=0, description="Default EncodingOption bits for new responses")

    @classmethod
    def from_env(cls) -> "Settings":
        """Read JSEND_* variables from os.environ; never touches the filesystem."""
        values = {
            "log_level": os.getenv("JSEND_LOG_LEVEL"),
            "log_file": os.getenv("JSEND_LOG_FILE") or None,
            "max_depth": os.getenv("JSEND_MAX_DEPTH"),
            "encoding_options": os.getenv("JSEND_ENCODING_OPTIONS"),
        }
        try:
            return cls(**{key: value for key, value in values.items() if value is not None})
        except ValidationError as exc:
            fields = ", ".join(str(error["loc"][0]) for error in exc.errors())
            raise ConfigurationError(f"Invalid JSend settings in environment: {fields}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def load_settings(dotenv_path: Optional[str] = None) -> Settings:
    """
    Load a .env file into the environment and re-read the settings.

    Call once at application startup; responses only ever read os.environ.
    """
    load_dotenv(dotenv_path)
    get_settings.cache_clear()
    return get_settings()
