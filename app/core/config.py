from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres or SQLite connection string)
      - SESSION_SECRET (signing secret for session and cart cookies)

    Optional:
      - SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY (image uploads)
      - BOOTSTRAP_ADMIN_* (first superadmin, created on startup)
      - EXCHANGE_RATE_URL (empty string disables currency conversion)
    """

    PROJECT_NAME: str = "Bodega Storefront API"
    API_PREFIX: str = "/api"

    DATABASE_URL: str

    # Signed cookies (admin session + client cart)
    SESSION_SECRET: str
    SESSION_ALG: str = "HS256"
    SESSION_COOKIE_NAME: str = "bodega_session"
    CART_COOKIE_NAME: str = "bodega_cart"
    SESSION_TTL_MINUTES: int = 12 * 60
    CART_TTL_DAYS: int = 7
    SESSION_COOKIE_SECURE: bool = False

    BCRYPT_ROUNDS: int = 12

    # First superadmin, only used when admin_users is empty
    BOOTSTRAP_ADMIN_USERNAME: str | None = None
    BOOTSTRAP_ADMIN_EMAIL: str | None = None
    BOOTSTRAP_ADMIN_PASSWORD: str | None = None

    # Supabase Storage (image uploads)
    SUPABASE_URL: str | None = None
    SUPABASE_SERVICE_ROLE_KEY: str | None = None
    STORAGE_BUCKET: str = "assets"

    # USD -> VES rate shown next to cart totals
    EXCHANGE_RATE_URL: str = "https://api.dolarvzla.com/public/exchange-rate"
    EXCHANGE_RATE_TTL_SECONDS: int = 300
    EXCHANGE_RATE_TIMEOUT: float = 5.0
    EXCHANGE_RATE_RETRY_SECONDS: int = 60

    CORS_ORIGINS: list[str] = [
        "http://localhost:5000",
        "http://127.0.0.1:5000",
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
