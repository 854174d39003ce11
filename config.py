import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file)
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./auth.db")
    API_PREFIX = data.get("API_PREFIX", "")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    CREATE_TABLES_ON_STARTUP = bool(data.get("CREATE_TABLES_ON_STARTUP", True))

    # Token signing (two independent keys) and lifetimes
    JWT_ACCESS_SECRET = data.get(
        "JWT_ACCESS_SECRET", "dev-access-secret-change-in-production"
    )
    JWT_REFRESH_SECRET = data.get(
        "JWT_REFRESH_SECRET", "dev-refresh-secret-change-in-production"
    )
    ACCESS_TOKEN_TTL_MINUTES = data.get("ACCESS_TOKEN_TTL_MINUTES", 15)
    REFRESH_TOKEN_TTL_DAYS = data.get("REFRESH_TOKEN_TTL_DAYS", 7)
    RESET_TOKEN_TTL_MINUTES = data.get("RESET_TOKEN_TTL_MINUTES", 60)

    # Argon2id cost parameters
    ARGON2_MEMORY_COST = data.get("ARGON2_MEMORY_COST", 19456)
    ARGON2_TIME_COST = data.get("ARGON2_TIME_COST", 2)
    ARGON2_PARALLELISM = data.get("ARGON2_PARALLELISM", 1)
    ARGON2_HASH_LEN = data.get("ARGON2_HASH_LEN", 32)

    COOKIE_SECURE = bool(data.get("COOKIE_SECURE", False))
