"""
Ordering Service — Configuration
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Service ──────────────────────────────────────────────
    SERVICE_NAME: str = "ordering-service"
    SERVICE_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # ── PostgreSQL ────────────────────────────────────────────
    DATABASE_URL: str = ""  # full override, e.g. sqlite+aiosqlite:// for local runs
    POSTGRES_HOST: str = "ordering-db"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "ordering_db"
    POSTGRES_USER: str = "ordering_user"
    POSTGRES_PASSWORD: str = "ordering_pass"

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # ── Redis ─────────────────────────────────────────────────
    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ""

    @property
    def redis_url(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    # ── Celery ────────────────────────────────────────────────
    CELERY_BROKER_DB: int = 1
    CELERY_RESULT_DB: int = 2

    @property
    def celery_broker_url(self) -> str:
        return self.redis_url.rsplit("/", 1)[0] + f"/{self.CELERY_BROKER_DB}"

    @property
    def celery_result_backend(self) -> str:
        return self.redis_url.rsplit("/", 1)[0] + f"/{self.CELERY_RESULT_DB}"

    # ── JWT / Admin ───────────────────────────────────────────
    JWT_SECRET_KEY: str = "CHANGE_ME_IN_PRODUCTION"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 720
    ADMIN_EMAIL: str = "admin@harveyscafe.com"
    ADMIN_PASSWORD_HASH: str = ""  # bcrypt hash; admin login disabled while empty

    # ── Login rate limiting ───────────────────────────────────
    RATE_LIMIT_MAX_ATTEMPTS: int = 3
    RATE_LIMIT_WINDOW_SECONDS: int = 60

    # ── Idempotency ───────────────────────────────────────────
    IDEMPOTENCY_KEY_TTL_SECONDS: int = 86400

    # ── Payment gateway (Razorpay) ────────────────────────────
    RAZORPAY_KEY_ID: str = ""
    RAZORPAY_KEY_SECRET: str = ""
    RAZORPAY_API_URL: str = "https://api.razorpay.com/v1"
    PAYMENT_CURRENCY: str = "INR"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # ── Ordering limits ───────────────────────────────────────
    DAILY_STOCK_CAP: int = 12
    MAX_PER_ITEM: int = 3
    MAX_CART_ITEMS: int = 20
    CART_TTL_SECONDS: int = 7 * 86400

    # ── Daily inventory reset ─────────────────────────────────
    RESET_CHECK_INTERVAL_SECONDS: int = 60
    RESET_TIMEZONE: str = "Asia/Kolkata"
    RESET_MARKER_KEY: str = "inventory:last_reset"
    RESET_ON_STARTUP: bool = True

    # ── Restaurant details (stamped on every invoice) ─────────
    RESTAURANT_NAME: str = "Harvey's Cafe"
    RESTAURANT_ADDRESS: str = "123 Main Street, City, State 12345"
    RESTAURANT_PHONE: str = "+91 9876543210"
    RESTAURANT_EMAIL: str = "info@harveyscafe.com"
    RESTAURANT_GST: str = "29ABCDE1234F1Z5"

    @property
    def restaurant_details(self) -> dict[str, str]:
        return {
            "name": self.RESTAURANT_NAME,
            "address": self.RESTAURANT_ADDRESS,
            "phone": self.RESTAURANT_PHONE,
            "email": self.RESTAURANT_EMAIL,
            "gst": self.RESTAURANT_GST,
        }

    # ── Real-time (SSE) ───────────────────────────────────────
    SSE_RETRY_MILLISECONDS: int = 3000
    SSE_KEEPALIVE_INTERVAL_SECONDS: float = 15.0

    # ── Observability ─────────────────────────────────────────
    METRICS_ENABLED: bool = True
    HEALTH_CHECK_TIMEOUT: float = 5.0


@lru_cache()
def get_settings() -> Settings:
    return Settings()
