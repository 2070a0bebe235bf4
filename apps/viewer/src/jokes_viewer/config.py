from dataclasses import dataclass
from functools import lru_cache
import os
from pathlib import Path

from dotenv import load_dotenv

from jokes_shared.env import to_float

DEVELOPMENT_BASE_URL = "http://localhost:4000"
PRODUCTION_BASE_URL = "https://funny-Aman.onrender.com"


@dataclass(frozen=True)
class ViewerSettings:
    base_url: str
    cache_path: str
    request_timeout_seconds: float
    log_level: str


@lru_cache
def get_viewer_settings() -> ViewerSettings:
    load_dotenv()
    environment = os.getenv("APP_ENV", "development").strip().lower()
    default_base_url = PRODUCTION_BASE_URL if environment == "production" else DEVELOPMENT_BASE_URL
    return ViewerSettings(
        base_url=os.getenv("JOKES_API_BASE_URL", default_base_url),
        cache_path=os.getenv(
            "JOKES_CACHE_PATH",
            str(Path.home() / ".cache" / "jokes-viewer" / "storage.json"),
        ),
        request_timeout_seconds=to_float(
            os.getenv("JOKES_REQUEST_TIMEOUT"), default=15.0, minimum=1.0
        ),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )
