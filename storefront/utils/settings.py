# storefront/utils/settings.py
import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")  # memory | json | sql
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
DATA_DIR = os.getenv("DATA_DIR", "./data")
STORAGE_TIMEOUT_SECONDS = float(os.getenv("STORAGE_TIMEOUT_SECONDS", 5))

LOCK_BACKEND = os.getenv("LOCK_BACKEND", "local")  # local | redis
REDIS_URL = os.getenv("REDIS_URL", "redis://redis:6379/0")
CART_LOCK_TTL_SECONDS = int(os.getenv("CART_LOCK_TTL_SECONDS", 30))
CART_LOCK_TIMEOUT_SECONDS = float(os.getenv("CART_LOCK_TIMEOUT_SECONDS", 5))

CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/1")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", "redis://redis:6379/2")
CELERY_TASK_ALWAYS_EAGER = _flag("CELERY_TASK_ALWAYS_EAGER", "false")

FEED_TIMEOUT_SECONDS = float(os.getenv("FEED_TIMEOUT_SECONDS", 10))
FEED_RETRY_ATTEMPTS = int(os.getenv("FEED_RETRY_ATTEMPTS", 5))
FEED_RETRY_MIN_WAIT_SECONDS = float(os.getenv("FEED_RETRY_MIN_WAIT_SECONDS", 1))
FEED_RETRY_MAX_WAIT_SECONDS = float(os.getenv("FEED_RETRY_MAX_WAIT_SECONDS", 30))
ENFORCE_NAME_LENGTH = _flag("ENFORCE_NAME_LENGTH", "true")
SEED_SAMPLE_PRODUCTS = _flag("SEED_SAMPLE_PRODUCTS", "false")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
