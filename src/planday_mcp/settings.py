"""Central configuration loading utilities."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class BaseEnvSettings(BaseSettings):
    """Base settings that enforce case sensitivity for env vars."""

    model_config = {"env_file": None, "case_sensitive": True, "extra": "ignore"}


class PlandaySettings(BaseEnvSettings):
    """Settings for the Planday refresh-token flow and reference lookups."""

    client_id: str = Field(..., alias="PLANDAY_CLIENT_ID")
    auth_url: str = Field("https://id.planday.com", alias="PLANDAY_AUTH_URL")
    api_base_url: str = Field("https://openapi.planday.com", alias="PLANDAY_API_BASE_URL")
    request_timeout_seconds: float = Field(30.0, alias="PLANDAY_REQUEST_TIMEOUT_SECONDS", gt=0)
    lookup_timeout_seconds: float = Field(10.0, alias="PLANDAY_LOOKUP_TIMEOUT_SECONDS", gt=0)
    lookup_page_size: int = Field(50, alias="PLANDAY_LOOKUP_PAGE_SIZE", ge=1)
    lookup_max_pages: int = Field(20, alias="PLANDAY_LOOKUP_MAX_PAGES", ge=1)
    log_level: str = Field("INFO", alias="PLANDAY_LOG_LEVEL")

    @property
    def token_url(self) -> str:
        return f"{self.auth_url.rstrip('/')}/connect/token"


def _resolve_env_file(explicit: Optional[str] = None) -> Optional[str]:
    """Determine the environment file to load configuration from."""

    candidates: list[Path] = []

    if explicit:
        candidates.append(Path(explicit).expanduser())

    value = os.getenv("PLANDAY_ENV_FILE")
    if value:
        candidates.append(Path(value).expanduser())

    project_root = Path(__file__).resolve().parents[2]
    env_dir = project_root / "env"
    candidates.extend(
        [
            env_dir / "planday.env",
            env_dir / "planday.local.env",
            project_root / ".env",
        ]
    )

    for candidate in candidates:
        if candidate.exists():
            return str(candidate)

    return None


@lru_cache(maxsize=1)
def load_planday_settings(env_file: Optional[str] = None) -> PlandaySettings:
    return PlandaySettings(_env_file=_resolve_env_file(env_file))


def reset_settings_cache() -> None:
    load_planday_settings.cache_clear()  # type: ignore[attr-defined]
