# fresh_laundry/core/config.py
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self, **overrides):
        self.APP_NAME: str = os.getenv("APP_NAME", "Fresh Laundry API")
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./fresh_laundry.db")
        self.DB_POOL_SIZE: int = int(os.getenv("DB_POOL_SIZE", "10"))
        self.DB_POOL_TIMEOUT: int = int(os.getenv("DB_POOL_TIMEOUT", "30"))
        self.SECRET_KEY: str = os.getenv("SECRET_KEY", "changeme")
        self.ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
        self.USER_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("USER_TOKEN_EXPIRE_MINUTES", "60"))
        self.ADMIN_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ADMIN_TOKEN_EXPIRE_MINUTES", "120"))
        self.BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
        self.ENFORCE_ADMIN_AUTH: bool = _env_bool("ENFORCE_ADMIN_AUTH")
        self.CORS_ORIGINS: list = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "3000"))

        for key, value in overrides.items():
            if not hasattr(self, key):
                raise AttributeError(f"Unknown setting: {key}")
            setattr(self, key, value)
