"""Configuration contracts."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class JsonMapsConfig(BaseModel):
    proxy_url: str = "http://127.0.0.1:8000/api/proxy"
    routing_url: str = "https://router.project-osrm.org"
    request_timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=2, ge=0, le=10)
    default_basemap: str = "light"
    fit_bounds_padding: int = Field(default=40, ge=0)

    model_config = {"frozen": True}

    @field_validator("proxy_url", "routing_url")
    @classmethod
    def validate_http_url(cls, value: str) -> str:
        candidate = value.strip().rstrip("/")
        if not candidate.startswith(("http://", "https://")):
            raise ValueError("must be an http(s) URL")
        return candidate
