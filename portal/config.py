"""Application configuration from environment."""
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

# Load .env from project root (parent of portal/) so env vars are available everywhere
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=_env_path)


class Settings(BaseSettings):
    app_name: str = "Cabin Portal"
    app_env: str = "development"
    debug: bool = True

    database_url: str = "sqlite:///./cabin_portal.db"

    # Static fixture JSON (properties.json, tickets.json, ...) is fetched from here
    fixtures_base_url: str = "http://localhost:8000/data/"
    # When set, this directory is served at /data so the default base URL resolves
    fixtures_dir: str = ""
    fixtures_fetch_retries: int = 1
    fixtures_fetch_timeout: float = 10.0

    # Signup links handed out for newly created users
    public_base_url: str = "http://localhost:5173/"

    @field_validator("fixtures_base_url", "public_base_url", mode="before")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        v = (v or "").strip()
        return v if v.endswith("/") else v + "/"

    seed_demo_session: bool = True
    demo_role: str = "Renter"
    demo_user_id: str = "U-1001"
    demo_property_id: str = "P-001"
    demo_cabin_id: str = "C-014"

    class Config:
        env_file = str(_env_path)
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    return Settings()
