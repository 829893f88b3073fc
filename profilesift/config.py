"""Configuration management using Pydantic Settings."""

from enum import Enum

from pydantic_settings import BaseSettings


class LogFormat(str, Enum):
    """Log output format."""
    JSON = "json"
    CONSOLE = "console"


class AnalyzerConfig(BaseSettings):
    """Configuration for the profilesift pipeline."""

    # Service credentials
    firecrawl_api_key: str | None = None
    llm_api_key: str | None = None

    # Scraping service
    scrape_api_url: str = "https://api.firecrawl.dev/v1/scrape"
    scrape_wait_for_ms: int = 3000

    # Completion service
    completion_api_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    llm_model: str = "google/gemini-2.5-flash"
    llm_temperature: float = 0.1
    max_content_chars: int = 8000

    # Transport
    http_timeout_seconds: float = 60.0

    # Batch
    request_delay_ms: int = 1000

    # Logging
    log_level: str = "INFO"
    log_format: LogFormat = LogFormat.CONSOLE

    model_config = {
        "env_prefix": "PROFILESIFT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
