"""
Configuration for the recordings API
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class APISettings(BaseSettings):
    """API configuration settings"""

    model_config = SettingsConfigDict(
        env_prefix="RECORDINGS_API_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    service_name: str = "recordings_api"
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"

    # CORS
    cors_origins: list[str] = ["*"]

    # File upload limits
    max_file_size: int = 100 * 1024 * 1024  # 100MB
    allowed_extensions: list[str] = [
        ".webm",
        ".mp3",
        ".mp4",
        ".wav",
        ".m4a",
        ".ogg",
        ".flac",
    ]


def get_settings() -> APISettings:
    """Get settings instance"""
    return APISettings()
