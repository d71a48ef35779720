from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    App settings.

    Notes:
    - Defaults are local and deterministic (sqlite file next to the repo).
    - Every field can be overridden with an `APP_`-prefixed env var.
    - `acl_catalog_path` unset means the built-in permission catalog.
    """

    model_config = SettingsConfigDict(env_prefix="APP_", extra="ignore")

    db_url: str | None = None
    acl_catalog_path: str | None = None
    log_level: str = "INFO"
    seed_demo_data: bool = True

    authorization_header: str = "Authorization"
    bearer_prefix: str = "Bearer"

    def resolved_db_url(self) -> str:
        if self.db_url:
            return self.db_url

        repo_root = Path(__file__).resolve().parents[1]
        db_path = repo_root / "app.db"
        return f"sqlite:///{db_path}"

    def resolved_acl_catalog_path(self) -> Path | None:
        if self.acl_catalog_path:
            return Path(self.acl_catalog_path)
        return None


@lru_cache
def get_settings() -> Settings:
    return Settings()
