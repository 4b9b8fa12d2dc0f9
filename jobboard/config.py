from pathlib import Path
from typing import Literal, get_args

from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent

JobType = Literal["Full-Time", "Part-Time", "Contract"]
JOB_TYPES: list[str] = list(get_args(JobType))


class Settings(BaseSettings):
    DB_URL: str = "sqlite:///./jobs.db"

    PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # client side
    API_BASE_URL: str = "http://127.0.0.1:8000"
    DEBOUNCE_SECONDS: float = 0.5
    QUERY_TIMEOUT: float = 10.0
    QUERY_RETRY_ATTEMPTS: int = 1

    # set by the auth gateway in front of the service
    AUTH_HEADER: str = "X-Principal-Id"

    LOCATIONS_FILE: str = str(BASE_DIR / "data" / "locations.json")

    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
