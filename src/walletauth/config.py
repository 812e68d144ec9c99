from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    environment: str = "development"  # "production" hides internal error details and enables secure cookies
    cors_origins: list[str] = ["http://localhost:3000"]
    session_ttl_seconds: int = 24 * 60 * 60
    session_cleanup_interval_seconds: float = 60 * 60
    rate_limit_window_ms: int = 5000
    rate_limit_max_requests: int = 1
    rate_limit_cleanup_interval_seconds: float = 5 * 60

    model_config = {
        "env_file": [".env"],
        "env_prefix": "WALLETAUTH_",
        "extra": "ignore",
    }

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cookie_secure(self) -> bool:
        """Session cookies are only marked secure when served over HTTPS in production."""
        return self.is_production
