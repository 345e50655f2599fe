"""Application configuration."""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PACKAGE_DIR = Path(__file__).parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage: Literal["file", "postgres"] = "file"
    data_dir: Path = Path("data")

    # Plain DATABASE_URL is honoured too, so the usual deployment env works.
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DOWIKI_DATABASE_URL", "DATABASE_URL"),
    )
    db_pool_min_size: int = 1
    db_pool_max_size: int = 10
    db_create_schema: bool = False

    templates_dir: Path = PACKAGE_DIR / "templates"
    static_dir: Path = PACKAGE_DIR / "static" / "css"
    front_page: str = "FrontPage"

    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"
    app_title: str = "DoWiki"

    model_config = SettingsConfigDict(
        env_prefix="DOWIKI_",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )


settings = Settings()
