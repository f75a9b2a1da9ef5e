"""
Platform configuration.

Values come from an optional JSON file; command line flags override them.
"""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .core.exceptions import ConfigurationError


class PlatformConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(8000, ge=1, le=65535)
    log_level: str = Field("INFO", pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$')
    log_format: str = Field("text", pattern=r'^(json|text)$')
    load_sample_data: bool = False


def load_config(path: Optional[str] = None, overrides: Optional[Dict[str, Any]] = None) -> PlatformConfig:
    """Load configuration from a JSON file and apply overrides.

    Overrides whose value is ``None`` are ignored.
    """
    data: Dict[str, Any] = {}
    if path:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a JSON object")

    for key, value in (overrides or {}).items():
        if value is not None:
            data[key] = value

    try:
        return PlatformConfig(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}", details={'errors': e.errors()})
