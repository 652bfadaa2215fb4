"""
Process-wide configuration for Hydro Search Params.
Resolved once at startup; the API key comes from application.properties,
then the environment, then the legacy constant.
"""
from __future__ import annotations
import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

from .errors import ConfigurationError

logger = logging.getLogger(__name__)
REPO_ROOT = Path(__file__).resolve().parent.parent

SETTINGS_FILE = REPO_ROOT / "application.properties"
DEFAULT_CATALOG_PATH = REPO_ROOT / "data" / "collections.json"

API_KEY_SETTING = "mistral.ai.api-key"
API_KEY_ENV = "MISTRAL_AI_API_KEY"
PLACEHOLDER_API_KEY = "XXXXX"
# Kept for deployments that still patch the key into the source tree.
LEGACY_API_KEY = PLACEHOLDER_API_KEY

DEFAULT_MODEL = "mistral-large-latest"
DEFAULT_BASE_URL = "https://api.mistral.ai/v1"
DEFAULT_STAC_URL = "https://hydroweb-pp.next.theia-land.fr/api/v1/rs-catalog/stac"

# setting name -> (environment override, default)
_OPTIONAL_SETTINGS = {
    "mistral.ai.model": ("MISTRAL_AI_MODEL", DEFAULT_MODEL),
    "mistral.ai.base-url": ("MISTRAL_AI_BASE_URL", DEFAULT_BASE_URL),
    "hydrosearch.catalog-path": ("HYDROSEARCH_CATALOG_PATH", str(DEFAULT_CATALOG_PATH)),
    "hydrosearch.stac-url": ("HYDROSEARCH_STAC_URL", DEFAULT_STAC_URL),
}


@dataclass(frozen=True)
class AppConfig:
    """Read-only settings shared by every request."""
    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    catalog_path: Path = DEFAULT_CATALOG_PATH
    stac_url: str = DEFAULT_STAC_URL

    def __repr__(self) -> str:
        return (
            f"AppConfig(api_key='***', model={self.model!r}, base_url={self.base_url!r}, "
            f"catalog_path={str(self.catalog_path)!r}, stac_url={self.stac_url!r})"
        )


def _usable(value: Optional[str]) -> bool:
    return bool(value and value.strip()) and value.strip() != PLACEHOLDER_API_KEY


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, str]:
    """Parse key=value lines from an application.properties file (missing file -> {})."""
    settings: Dict[str, str] = {}
    if not path.exists():
        return settings
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith(("#", "!")) or "=" not in line:
            continue
        key, value = line.split("=", 1)
        settings[key.strip()] = value.strip().strip("\"' ")
    return settings


def resolve_api_key(
    setting: Optional[str],
    env: Optional[str],
    legacy: Optional[str] = LEGACY_API_KEY,
) -> str:
    """
    Return the first usable key among setting, env and legacy.
    Blank values and the XXXXX placeholder are skipped.
    """
    for source, value in (("setting", setting), ("environment", env), ("legacy", legacy)):
        if _usable(value):
            logger.info("Using Mistral API key from %s", source)
            return value.strip()
    raise ConfigurationError(
        f"Mistral AI API key must be configured. Set {API_KEY_SETTING} in "
        f"application.properties or set the {API_KEY_ENV} environment variable."
    )


def load_config(
    settings_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Build the AppConfig once at startup. Raises ConfigurationError without a key."""
    environ = os.environ if environ is None else environ
    settings = load_settings(settings_path or SETTINGS_FILE)

    api_key = resolve_api_key(settings.get(API_KEY_SETTING), environ.get(API_KEY_ENV))

    resolved = {}
    for name, (env_name, default) in _OPTIONAL_SETTINGS.items():
        value = environ.get(env_name) or settings.get(name) or default
        resolved[name] = value.strip()

    return AppConfig(
        api_key=api_key,
        model=resolved["mistral.ai.model"],
        base_url=resolved["mistral.ai.base-url"].rstrip("/"),
        catalog_path=Path(resolved["hydrosearch.catalog-path"]),
        stac_url=resolved["hydrosearch.stac-url"].rstrip("/"),
    )


__all__ = ["AppConfig", "load_config", "load_settings", "resolve_api_key"]
