import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

class Settings(BaseSettings):
    # Seconds between checks for the wait file
    poll_interval: float = 1.0
    log_level: str = "INFO"
    
    # Only the container environment, never a .env in the step's working dir
    model_config = SettingsConfigDict(env_prefix="ENTRYPOINT_")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level

@lru_cache()
def get_settings() -> Settings:
    return Settings()
