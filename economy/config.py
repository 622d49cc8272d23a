import os
import yaml

ROOT_PATH = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_FILE_PATH = os.environ.get("ECONOMY_CONFIG", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./economy.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENABLE_SENTRY = data.get("ENABLE_SENTRY", 0)
    DSN_SENTRY = data.get("DSN_SENTRY", "")
    SENTRY_ENVIRONMENT = data.get("SENTRY_ENVIRONMENT", "dev")

    # Identity provider (HS256 JWTs issued upstream)
    AUTH_DISABLED = bool(data.get("AUTH_DISABLED", False))
    AUTH_JWT_SECRET = data.get("AUTH_JWT_SECRET", "")
    AUTH_JWT_AUDIENCE = data.get("AUTH_JWT_AUDIENCE", "authenticated")

    # Payment processor
    PAYMENT_API_URL = data.get("PAYMENT_API_URL", "https://api.stripe.com/v1")
    PAYMENT_API_KEY = data.get("PAYMENT_API_KEY", "")
    PAYMENT_CURRENCY = data.get("PAYMENT_CURRENCY", "usd")
    PAYMENT_TIMEOUT_SECONDS = float(data.get("PAYMENT_TIMEOUT_SECONDS", 10.0))
    PAYMENT_WEBHOOK_SECRET = data.get("PAYMENT_WEBHOOK_SECRET", "")

    # Stale purchase sweep
    PURCHASE_PENDING_TTL_SECONDS = data.get("PURCHASE_PENDING_TTL_SECONDS", 3600)
    PURCHASE_SWEEP_ENABLED = bool(data.get("PURCHASE_SWEEP_ENABLED", True))
    PURCHASE_SWEEP_INTERVAL_SECONDS = data.get("PURCHASE_SWEEP_INTERVAL_SECONDS", 900)

    # Promotion expiry sweep
    PROMOTION_EXPIRY_ENABLED = bool(data.get("PROMOTION_EXPIRY_ENABLED", True))
    PROMOTION_EXPIRY_INTERVAL_SECONDS = data.get("PROMOTION_EXPIRY_INTERVAL_SECONDS", 300)

    # Balance reconciliation
    RECONCILIATION_ENABLED = bool(data.get("RECONCILIATION_ENABLED", True))
    RECONCILIATION_INTERVAL_SECONDS = data.get("RECONCILIATION_INTERVAL_SECONDS", 86400)  # Daily

    # Ledger delta notifications
    NOTIFICATION_WEBHOOK_URL = data.get("NOTIFICATION_WEBHOOK_URL", None)
