"""
Configuration settings for Gemini Gateway.

All settings are loaded from environment variables with sensible defaults.
Use .env file for local development (see .env.example).
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

DAY_SECONDS = 24 * 60 * 60


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # === Application ===
    APP_NAME: str = "Gemini Gateway"
    APP_VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    
    # === Gemini Upstream ===
    GEMINI_KEYS: list[str] = []  # JSON array in env, e.g. '["key-a", "key-b"]'
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "gemini-1.5-flash-latest"
    UPSTREAM_TIMEOUT: float = 15.0  # seconds, whole call bound
    
    # === Credential Pool ===
    KEY_COOLDOWN_SECONDS: int = 30 * DAY_SECONDS
    RATE_LIMIT_STATUS_CODES: list[int] = [429]
    INVALID_KEY_STATUS_CODES: list[int] = [400, 403]
    PENALIZE_TIMEOUTS: bool = False  # Report upstream timeouts against the key used
    TIMEOUT_FAILURE_STATUS: int = 504  # Status recorded when PENALIZE_TIMEOUTS is on
    POOL_STATE_KEY: str = "state"
    
    # === Backing Store ===
    STORE_BACKEND: str = "redis"  # "redis" or "memory"
    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_SOCKET_TIMEOUT: float = 5.0
    
    # === Response Cache ===
    CACHE_KEY_PREFIX: str = "hex:"
    CACHE_TTL_SECONDS: int = 30 * DAY_SECONDS  # Logical expiry, checked by the app
    CACHE_RETENTION_SECONDS: int = 31 * DAY_SECONDS  # Store TTL, cleanup only
    
    # === HTTP ===
    CORS_ALLOW_ORIGINS: list[str] = ["*"]
    EXPOSE_POOL_STATUS: bool = False
    
    # === Monitoring ===
    PROMETHEUS_ENABLED: bool = True


# Global settings instance
settings = Settings()
