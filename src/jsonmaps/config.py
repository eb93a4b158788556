"""Config loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from jsonmaps.contracts.config import JsonMapsConfig
from jsonmaps.contracts.exceptions import ConfigError
from jsonmaps.contracts.spec import BASEMAP_STYLES


def load_config(path: str | Path | None = None) -> JsonMapsConfig:
    """Load a :class:`JsonMapsConfig` from a JSON file, or defaults when *path* is ``None``."""
    if path is None:
        return JsonMapsConfig()

    config_path = Path(path).expanduser().resolve()
    try:
        raw_payload: Any = json.loads(config_path.read_text(encoding="utf-8"))
        parsed = JsonMapsConfig.model_validate(raw_payload)
    except OSError as exc:
        raise ConfigError(f"failed reading config file: {config_path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in config file: {config_path}") from exc
    except ValidationError as exc:
        raise ConfigError(f"invalid config: {exc}") from exc

    if parsed.default_basemap not in BASEMAP_STYLES:
        raise ConfigError(f"default_basemap must be one of: {', '.join(BASEMAP_STYLES)}")
    return parsed
