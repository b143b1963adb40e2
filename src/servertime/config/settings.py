import os
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings with environment variable support"""

    # Server connection
    SERVERTIME_HOST: str = os.getenv("SERVERTIME_HOST", "127.0.0.1")
    SERVERTIME_PORT: int = int(os.getenv("SERVERTIME_PORT", "25565"))

    # Display the server time as soon as the first probe resolves
    SERVERTIME_SHOW_ON_CONNECT: bool = True

    # Logging
    SERVERTIME_LOG_LEVEL: str = os.getenv("SERVERTIME_LOG_LEVEL", "INFO")
    SERVERTIME_LOG_PATH: Optional[str] = os.getenv("SERVERTIME_LOG_PATH")

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
