# catalog/config.py
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    ENV: str = "development"
    DATA_DIR: Path = Path("data")  # where the CSV / XLSX tables live
    PRODUCTS_FILE: str = "products.csv"  # use products.xlsx to store as Excel
    LOG_LEVEL: str = "INFO"

    # Example .env:
    # DATA_DIR=./data
    # PRODUCTS_FILE=products.xlsx
    # LOG_LEVEL=DEBUG

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for entry points (scripts). Library modules only
    create loggers and never install handlers themselves.
    """
    level_name = (level or settings.LOG_LEVEL or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
