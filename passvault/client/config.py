# Local vault configuration, read from the environment and an optional .env file
import logging
import sys
from functools import lru_cache
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_app_data_path() -> Path:
    app_name = "PassVault"
    home = Path.home()

    if sys.platform == "win32":
        # Windows: C:\Users\Name\AppData\Roaming\PassVault
        path = home / "AppData" / "Roaming" / app_name
    else:
        # Linux/Mac: /home/name/.local/share/PassVault
        path = home / ".local" / "share" / app_name
    return path


def default_database_url() -> str:
    return f"sqlite:///{(get_app_data_path() / 'vault.db').as_posix()}"


class Settings(BaseSettings):
    # --- Database ---
    # Any SQLAlchemy URL works; the default is a SQLite file in the user's app data dir.
    DATABASE_URL: str = default_database_url()

    # Print generated SQL; development only.
    DB_ECHO: bool = False

    # --- Password generator ---
    GENERATOR_DEFAULT_LENGTH: int = 16

    # --- Export document ---
    EXPORT_INDENT: int = 2

    # --- Logging ---
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="PASSVAULT_", env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or get_settings().LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
