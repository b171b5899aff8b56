"""
Runtime settings read from the environment.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Application settings. All values have working defaults."""
    openai_api_key: Optional[str] = None
    narrative_model: str = "gpt-4o"
    narrative_temperature: float = 0.7
    narrative_timeout: float = 60.0
    currency: str = "AED"
    map_zoom: int = 15
    geocoder_enabled: bool = True
    log_level: str = "INFO"

    @property
    def narrative_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
            narrative_model=os.environ.get("NARRATIVE_MODEL", "gpt-4o"),
            narrative_temperature=float(os.environ.get("NARRATIVE_TEMPERATURE", "0.7")),
            narrative_timeout=float(os.environ.get("NARRATIVE_TIMEOUT", "60")),
            currency=os.environ.get("ESTATE_CURRENCY", "AED"),
            map_zoom=int(os.environ.get("MAP_ZOOM", "15")),
            geocoder_enabled=_env_bool("GEOCODER_ENABLED", True),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the process-wide settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings
