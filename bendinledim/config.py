# bendinledim/config.py
import os


def _database_url() -> str:
    db_url = os.getenv("DATABASE_URL", "sqlite:///local.db")
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql+psycopg2://", 1)
    return db_url


def env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except Exception:
        return int(default)


def env_flag(name, default="false") -> bool:
    return (os.getenv(name, default) or "").strip().lower() == "true"


class Config:
    """Settings read from the environment at app creation time."""

    def __init__(self):
        self.SQLALCHEMY_DATABASE_URI = _database_url()
        self.SQLALCHEMY_TRACK_MODIFICATIONS = False
        # keep pooled connections fresh behind the hosting proxy
        self.SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True, "pool_recycle": 300}
        self.SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

        self.ENV_NAME = os.getenv("ENV", "development").strip().lower()
        self.SITE_URL = (
            os.getenv("NEXT_PUBLIC_SITE_URL")
            or os.getenv("SITE_URL")
            or "https://bendinledim.com.tr"
        )

        self.ADMIN_USERNAME = os.getenv("ADMIN_USERNAME") or ""
        self.ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD") or ""
        self.ENABLE_ADMIN_DASHBOARD = env_flag("ENABLE_ADMIN_DASHBOARD")

        self.OPENAI_API_KEY = os.getenv("OPENAI_API_KEY") or os.getenv("OPENAI_KEY") or ""
        self.OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
        self.GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or ""
        self.GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
        self.RSS_TIMEOUT = env_int("RSS_TIMEOUT", 10)

    @property
    def is_production(self) -> bool:
        return self.ENV_NAME in ("prod", "production")

    def as_dict(self):
        out = {k: v for k, v in vars(self).items() if k.isupper()}
        out["IS_PRODUCTION"] = self.is_production
        return out
