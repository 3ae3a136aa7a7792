"""Runtime settings read from env. main.py loads backend/.env before building these."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

DEFAULT_ALLOWED_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _float_env(env: Mapping[str, str], key: str, default: float) -> float:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_env(env: Mapping[str, str], key: str, default: int) -> int:
    raw = (env.get(key) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_om_model: str = "gpt-4o-mini"
    mapbox_api_key: str = ""
    http_timeout: float = 10.0
    max_upload_bytes: int = 10 * 1024 * 1024
    allowed_origins: list[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))

    @property
    def ai_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if env is None else env
        origins_raw = (env.get("ALLOWED_ORIGINS") or "").strip()
        if origins_raw:
            origins = [o.strip() for o in origins_raw.split(",") if o.strip()]
        else:
            origins = list(DEFAULT_ALLOWED_ORIGINS)
        return cls(
            openai_api_key=(env.get("OPENAI_API_KEY") or "").strip(),
            openai_base_url=(env.get("OPENAI_BASE_URL") or "").strip() or None,
            openai_om_model=(env.get("OPENAI_OM_MODEL") or "").strip() or "gpt-4o-mini",
            mapbox_api_key=(env.get("MAPBOX_API_KEY") or "").strip(),
            http_timeout=_float_env(env, "ENRICHMENT_HTTP_TIMEOUT", 10.0),
            max_upload_bytes=_int_env(env, "MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
            allowed_origins=origins,
        )
