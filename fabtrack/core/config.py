# fabtrack/core/config.py

import os
from dotenv import load_dotenv
from fabtrack.utils.logger import get_logger

logger = get_logger(__name__)

load_dotenv()

# =====================================================
# APPLICATION
# =====================================================
APP_ENV = os.getenv("APP_ENV")
if APP_ENV not in {"development", "staging", "production"}:
    raise ValueError("APP_ENV must be development | staging | production")

IS_PRODUCTION = APP_ENV == "production"

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG" if APP_ENV == "development" else "INFO").upper()

CORS_ORIGINS = [
    o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()
]

# =====================================================
# DATABASE (order collection, sessions, audit trail)
# =====================================================
DB_TYPE = os.getenv("DB_TYPE")
if DB_TYPE not in {"postgres", "sqlite"}:
    raise ValueError("DB_TYPE must be postgres | sqlite")

if DB_TYPE == "postgres":
    DATABASE_URL = os.getenv("DATABASE_URL")
    if not DATABASE_URL:
        raise ValueError("DATABASE_URL is required for Postgres")

elif DB_TYPE == "sqlite":
    if IS_PRODUCTION:
        raise ValueError("SQLite is NOT allowed in production")
    SQLITE_PATH = os.getenv("SQLITE_PATH", "./fabtrack.db")
    DATABASE_URL = f"sqlite+aiosqlite:///{SQLITE_PATH}"

DB_POOL_SIZE = int(os.getenv("DB_POOL_SIZE", 5))
DB_MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", 10))
DB_POOL_TIMEOUT = int(os.getenv("DB_POOL_TIMEOUT", 30))

# =====================================================
# JWT / SESSIONS
# =====================================================
JWT_ACCESS_SECRET_KEY = os.getenv("JWT_ACCESS_SECRET_KEY")
if not JWT_ACCESS_SECRET_KEY:
    raise ValueError("JWT_ACCESS_SECRET_KEY must be set")

JWT_ALGORITHM = "HS256"

ACCESS_TOKEN_EXPIRE_MINUTES = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 12 * 60)
)

# =====================================================
# CREDENTIALS
# =====================================================
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@pvt.com").strip().lower()
ADMIN_DEFAULT_PASSWORD = os.getenv("ADMIN_DEFAULT_PASSWORD", "12345678")

# every directory client logs in with the same password
CLIENT_DEFAULT_PASSWORD = os.getenv("CLIENT_DEFAULT_PASSWORD", "12345678")

MIN_PASSWORD_LENGTH = 8

# =====================================================
# GOOGLE SHEETS
# =====================================================
GCP_CREDENTIALS = os.getenv("GCP_CREDENTIALS")
GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY")

DIRECTORY_SPREADSHEET_ID = os.getenv("DIRECTORY_SPREADSHEET_ID")
DIRECTORY_RANGE = os.getenv("DIRECTORY_RANGE", "Sheet1")
DIRECTORY_CACHE_SECONDS = int(os.getenv("DIRECTORY_CACHE_SECONDS", 60))

MIRROR_SPREADSHEET_ID = os.getenv("MIRROR_SPREADSHEET_ID")
MIRROR_RANGE = os.getenv("MIRROR_RANGE", "Orders!A:F")

if not DIRECTORY_SPREADSHEET_ID:
    logger.warning("DIRECTORY_SPREADSHEET_ID not set, client logins will fail")

# =====================================================
# SCHEDULER
# =====================================================
ENABLE_SCHEDULER = os.getenv("ENABLE_SCHEDULER", "true").lower() == "true"
ORDER_SYNC_INTERVAL_SECONDS = int(os.getenv("ORDER_SYNC_INTERVAL_SECONDS", 15))
