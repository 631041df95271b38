"""Application configuration."""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Plate Set"
    debug: bool = False
    log_level: str = "INFO"

    # Parsing and output
    list_delimiter: str = ","
    table_delimiter: str = "\t"

    # File Upload
    max_file_size_mb: int = 10

    # CORS
    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    class Config:
        env_file = ".env"
        env_prefix = "PLATESET_"


settings = Settings()
