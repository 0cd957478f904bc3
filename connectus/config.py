from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load project-root .env early so both pydantic-settings and any direct os.getenv access
# see consistent values, even if the process CWD is not the repo root.
_ROOT_DIR = Path(__file__).resolve().parents[1]
_ENV_PATH = _ROOT_DIR / ".env"
_IN_TEST = (os.getenv("ENVIRONMENT") or "").lower() == "test" or bool(os.getenv("PYTEST_CURRENT_TEST"))
if _ENV_PATH.exists() and not _IN_TEST:
    load_dotenv(dotenv_path=_ENV_PATH, override=True)


LAMPORTS_PER_SOL = 1_000_000_000


def _parse_str_list(raw: Any) -> list[str]:
    if raw is None:
        return []

    items: list[Any]
    if isinstance(raw, (list, tuple, set)):
        items = list(raw)
    elif isinstance(raw, str):
        s = raw.strip()
        if not s:
            return []

        # Support JSON array string or comma-separated string.
        if s.startswith("["):
            try:
                parsed = json.loads(s)
                items = parsed if isinstance(parsed, list) else [parsed]
            except ValueError:
                items = [p.strip() for p in s.split(",")]
        else:
            items = [p.strip() for p in s.split(",")]
    else:
        items = [raw]

    return [str(item).strip() for item in items if item is not None and str(item).strip()]


class Settings(BaseSettings):
    app_name: str = Field(default="ConnectUS Backend")
    api_prefix: str = Field(default="/api")
    version: str = Field(default="0.1.0")
    environment: str = Field(default="development")
    debug: bool = Field(default=True)

    # Database configuration
    # ORM_DB_URL wins over DB_URL; discrete DB_* settings are used outside development.
    db_url: str | None = Field(default=None, validation_alias="DB_URL")
    orm_db_url: str | None = Field(default=None, validation_alias="ORM_DB_URL")
    orm_use_mysql: bool = Field(default=False, validation_alias="ORM_USE_MYSQL")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=3306, validation_alias="DB_PORT")
    db_name: str = Field(default="connectus", validation_alias="DB_NAME")
    db_user: str = Field(default="root", validation_alias="DB_USER")
    db_password: str = Field(default="password", validation_alias="DB_PASSWORD")
    db_charset: str = Field(default="utf8mb4", validation_alias="DB_CHARSET")

    jwt_secret: str = Field(default="change-me")
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"],
        validation_alias="CORS_ORIGINS",
    )

    # Payment gate (Solana)
    admin_wallet_address: str | None = Field(default=None, validation_alias="ADMIN_WALLET_ADDRESS")
    solana_rpc_url: str = Field(default="https://api.devnet.solana.com", validation_alias="SOLANA_RPC_URL")
    solana_commitment: str = Field(default="confirmed", validation_alias="SOLANA_COMMITMENT")
    rpc_timeout_seconds: float = Field(default=10.0, validation_alias="RPC_TIMEOUT_SECONDS")
    job_posting_fee_sol: float = Field(default=0.01, validation_alias="JOB_POSTING_FEE_SOL")

    # Chat assistant (any OpenAI-compatible endpoint; Groq by default)
    llm_api_key: str | None = Field(default=None, validation_alias="GROQ_API_KEY")
    llm_base_url: str = Field(default="https://api.groq.com/openai/v1", validation_alias="LLM_BASE_URL")
    llm_model: str = Field(default="llama-3.3-70b-versatile", validation_alias="LLM_MODEL")
    llm_timeout_seconds: float = Field(default=30.0, validation_alias="LLM_TIMEOUT_SECONDS")

    # Resume uploads
    upload_dir: Path = Field(default=_ROOT_DIR / "uploads", validation_alias="UPLOAD_DIR")
    resume_extensions: list[str] = Field(
        default_factory=lambda: [".pdf", ".doc", ".docx"],
        validation_alias="RESUME_EXTENSIONS",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _validate_cors_origins(cls, v: Any) -> list[str]:
        return _parse_str_list(v)

    @field_validator("resume_extensions", mode="before")
    @classmethod
    def _validate_resume_extensions(cls, v: Any) -> list[str]:
        exts = [e.lower() for e in _parse_str_list(v)]
        return [e if e.startswith(".") else f".{e}" for e in exts]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def job_posting_fee_lamports(self) -> int:
        return int(round(self.job_posting_fee_sol * LAMPORTS_PER_SOL))


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_sqlalchemy_db_url(settings: Settings) -> str:
    # Prefer a dedicated ORM URL if provided.
    if settings.orm_db_url:
        return settings.orm_db_url

    if settings.db_url:
        return settings.db_url

    # In development, default ORM to sqlite unless explicitly configured.
    if settings.environment.lower() == "development" and not settings.orm_use_mysql:
        return "sqlite:///./dev.db"

    # NOTE: password may include special chars; prefer DB_URL for complex passwords.
    return (
        f"mysql+pymysql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
        f"?charset={settings.db_charset}"
    )
