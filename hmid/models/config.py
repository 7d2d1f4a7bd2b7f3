"""Configuration models for the identifier codec."""

from __future__ import annotations

import json
import os
from pathlib import Path

from pydantic import BaseModel, field_validator

DEFAULT_GATEWAY_URL = "https://hyper.media"


class CodecConfig(BaseModel):
    # Public gateway used when a web url is built without an explicit host
    gateway_url: str = DEFAULT_GATEWAY_URL

    @field_validator("gateway_url", mode="before")
    @classmethod
    def resolve_gateway_url(cls, v: str) -> str:
        if isinstance(v, str) and v.startswith("env:"):
            env_var = v[4:]
            resolved = os.environ.get(env_var)
            if resolved is None:
                raise ValueError(f"Environment variable '{env_var}' not set")
            v = resolved
        if isinstance(v, str):
            scheme, sep, host = v.partition("://")
            if not sep or scheme not in ("http", "https") or not host.strip("/"):
                raise ValueError(f"Gateway url must be http(s)://<host>, got '{v}'")
            v = v.rstrip("/")
        return v

    @classmethod
    def load(cls, path: str | Path) -> "CodecConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
