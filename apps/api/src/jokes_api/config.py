from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv
from sqlalchemy.engine import URL, make_url

from jokes_shared.env import to_bool, to_float, to_int


@dataclass(frozen=True)
class Settings:
    database_url: str
    db_echo: bool
    db_connect_timeout_seconds: float
    db_pool_size: int
    port: int
    environment: str
    static_dir: str
    log_level: str

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def store_url(self) -> URL:
        return make_url(self.database_url)


def _database_url_from_parts() -> str:
    url = URL.create(
        "mysql+pymysql",
        username=os.getenv("DB_USER", "root"),
        password=os.getenv("DB_PASSWORD", "root"),
        host=os.getenv("DB_HOST", "localhost"),
        port=to_int(os.getenv("DB_PORT"), default=3306, minimum=1),
        database=os.getenv("DB_NAME", "joke"),
    )
    return url.render_as_string(hide_password=False)


@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        database_url=os.getenv("DATABASE_URL") or _database_url_from_parts(),
        db_echo=to_bool(os.getenv("DB_ECHO"), default=False),
        db_connect_timeout_seconds=to_float(
            os.getenv("DB_CONNECT_TIMEOUT"), default=10.0, minimum=1.0
        ),
        db_pool_size=to_int(os.getenv("DB_POOL_SIZE"), default=10, minimum=1),
        port=to_int(os.getenv("PORT"), default=3000, minimum=1),
        environment=os.getenv("APP_ENV", "development").strip().lower(),
        static_dir=os.getenv("STATIC_DIR", "frontend/dist"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
