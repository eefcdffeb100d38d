from typing import List, Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Environment
    ENVIRONMENT: Optional[str] = None

    # Log Level
    LOG_LEVEL: str = "INFO"

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Log-Query-Service"
    VERSION: str = "1.0.0"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Quickwit search backend
    QUICKWIT_URL: str = "http://localhost:7280"
    QUICKWIT_INDEX_ID: str = "logs"
    QUICKWIT_TIMEOUT_SECONDS: float = 30.0  # Per-request deadline, no retries

    # Service enumeration (aggregation first, then bounded scan)
    SERVICES_LOOKBACK_HOURS: int = 24
    SERVICES_AGGREGATION_SIZE: int = 200  # Max term buckets requested
    SERVICES_SCAN_PAGE_SIZE: int = 500
    SERVICES_SCAN_MAX_PAGES: int = 10

    # AI error analysis (OpenAI-compatible chat completions endpoint)
    AI_ANALYZER_BASE_URL: str = "https://api.openai.com"
    AI_ANALYZER_API_KEY: Optional[str] = None
    AI_ANALYZER_MODEL: str = "gpt-4o-mini"
    AI_ANALYZER_TIMEOUT_SECONDS: float = 180.0  # Large prompts, slow completions
    AI_ANALYZER_CONNECT_TIMEOUT_SECONDS: float = 30.0

    # Logging Configuration
    LOGGING_FRAME_DEPTH: int = (
        6  # Frame depth for finding logging call origin in stack trace
    )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    # --------- Properties ---------
    @property
    def is_local(self) -> bool:
        """
        Check if running in local development environment.

        Supported values:
        - "local" or "local_dev" → True (local development)
        - "dev", "staging", "prod", or anything else → False (deployed)
        """
        if not self.ENVIRONMENT:
            return False
        env = self.ENVIRONMENT.lower()
        return env in ["local", "local_dev"]


settings = Settings()
