import os
from dataclasses import dataclass

from dotenv import load_dotenv

# Load .env.dev manually (in case of local dev, optional)
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env.dev"))


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """
    Runtime configuration, read once from the environment
    (Docker runtime injects it; .env.dev covers local dev).
    """
    MONGO_URI: str = os.getenv("MONGO_URI", "mongodb://mongo:27017")
    MONGO_DB: str = os.getenv("MONGO_DB", "coachhub_dev")

    SECRET_KEY: str = os.getenv("SECRET_KEY", "dev-secret-change-me")
    JWT_ALG: str = os.getenv("JWT_ALG", "HS256")
    ACCESS_TOKEN_EXPIRE_MIN: int = _int_env("ACCESS_TOKEN_EXPIRE_MIN", 30)
    REFRESH_TOKEN_EXPIRE_DAYS: int = _int_env("REFRESH_TOKEN_EXPIRE_DAYS", 7)
    REFRESH_TOKEN_COOKIE: str = os.getenv("REFRESH_TOKEN_COOKIE", "coachhub_refresh_token")

    SEARCH_DEFAULT_PAGE_SIZE: int = _int_env("SEARCH_DEFAULT_PAGE_SIZE", 20)
    SEARCH_MAX_PAGE_SIZE: int = _int_env("SEARCH_MAX_PAGE_SIZE", 200)

    def clamp_page_size(self, page_size: int) -> int:
        if page_size < 1:
            return 1
        if page_size > self.SEARCH_MAX_PAGE_SIZE:
            return self.SEARCH_MAX_PAGE_SIZE
        return page_size


settings = Settings()
