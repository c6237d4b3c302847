import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.environ.get("TENANCY_CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./central.db")
    TENANT_DB_URI_TEMPLATE = data.get(
        "TENANT_DB_URI_TEMPLATE", "sqlite+aiosqlite:///./storage/{database}.sqlite"
    )
    TENANT_DB_PREFIX = data.get("TENANT_DB_PREFIX", "tenant")
    REDIS_URL = data.get("REDIS_URL", "redis://localhost:6379/0")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    API_RELOAD = data.get("API_RELOAD", False)
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    CACHE_BACKEND = data.get("CACHE_BACKEND", "redis")
    CACHE_PREFIX = data.get("CACHE_PREFIX", "tenancy")
    PERMISSION_CACHE_TTL = int(data.get("PERMISSION_CACHE_TTL", 86400))
    QUEUE_MODE = data.get("QUEUE_MODE", "async")
    QUEUE_BACKEND = data.get("QUEUE_BACKEND", "redis")
    QUEUE_EMBEDDED_WORKER = data.get("QUEUE_EMBEDDED_WORKER", False)
    JOB_UNIQUE_FOR = int(data.get("JOB_UNIQUE_FOR", 3600))
    JOB_TRIES = int(data.get("JOB_TRIES", 3))
    JOB_BACKOFF = float(data.get("JOB_BACKOFF", 5))
    JOB_VISIBILITY_TIMEOUT = int(data.get("JOB_VISIBILITY_TIMEOUT", 900))
    JOB_RECORD_TTL = int(data.get("JOB_RECORD_TTL", 604800))
    JOB_POLL_INTERVAL = float(data.get("JOB_POLL_INTERVAL", 1.0))
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production")
    JWT_EXPIRE_MINUTES = int(data.get("JWT_EXPIRE_MINUTES", 60))
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    TENANT_GUARD = data.get("TENANT_GUARD", "tenant")
    SHIELD_RESOURCES = data.get("SHIELD_RESOURCES", {"user": None, "role": None})
    SHIELD_PAGES = data.get("SHIELD_PAGES", ["GeneralSettings"])
    SHIELD_WIDGETS = data.get("SHIELD_WIDGETS", [])
    SHIELD_CUSTOM_PERMISSIONS = data.get("SHIELD_CUSTOM_PERMISSIONS", [])
