"""
Application Settings

Settings are read from config/settings.yaml and then overlaid by
environment variables (a .env file is honoured through python-dotenv).
Only the Discogs token and the default product status are editable from
the admin API; everything else is deployment configuration.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Union

from dotenv import load_dotenv

from .config_loader import load_config, save_config
from .errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

PRODUCT_STATUSES = ("draft", "active", "archived")
DEFAULT_AUTO_PUBLISH_GENRES = ["Rock", "Jazz"]

CAPABILITY_MANAGE_PRODUCTS = "manage_products"
CAPABILITY_MANAGE_SETTINGS = "manage_settings"
ALL_CAPABILITIES = [CAPABILITY_MANAGE_PRODUCTS, CAPABILITY_MANAGE_SETTINGS]

# Environment variable -> settings attribute
ENV_OVERRIDES = {
    "DISCOGS_TOKEN": "discogs_token",
    "VSD_DEFAULT_PRODUCT_STATUS": "default_product_status",
    "VSD_STORE_URL": "store_url",
    "SHOPIFY_SHOP": "shopify_shop",
    "SHOPIFY_ACCESS_TOKEN": "shopify_access_token",
    "VSD_SESSION_SECRET": "session_secret",
    "VSD_LEDGER_PATH": "ledger_path",
}


@dataclass
class Settings:
    """Resolved configuration for one process."""

    discogs_token: str = ""
    default_product_status: str = "draft"
    auto_publish_genres: List[str] = field(default_factory=lambda: list(DEFAULT_AUTO_PUBLISH_GENRES))
    store_url: str = ""
    shopify_shop: str = ""
    shopify_access_token: str = ""
    admin_keys: Dict[str, List[str]] = field(default_factory=dict)  # key -> capabilities
    session_secret: str = ""
    ledger_path: str = "data/import_ledger.db"
    source_path: Optional[Path] = None

    def __post_init__(self):
        self.default_product_status = validate_status(self.default_product_status)


def validate_status(status: str) -> str:
    """Normalize and check a product status value."""
    value = (status or "").strip().lower()
    if value not in PRODUCT_STATUSES:
        raise ValidationError(
            f"Invalid product status {status!r}. Expected one of: {', '.join(PRODUCT_STATUSES)}"
        )
    return value


def _parse_admin_keys(raw: str) -> Dict[str, List[str]]:
    """
    Parse VSD_ADMIN_KEYS.

    Format: comma separated keys, each optionally followed by
    ``:cap1+cap2``. A bare key is granted every capability.

    Example:
        >>> _parse_admin_keys("abc,xyz:manage_products")
        {'abc': ['manage_products', 'manage_settings'], 'xyz': ['manage_products']}
    """
    keys = {}
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, _, caps = entry.partition(":")
        if caps:
            keys[key.strip()] = [c.strip() for c in caps.split("+") if c.strip()]
        else:
            keys[key.strip()] = list(ALL_CAPABILITIES)
    return keys


def _string_list(value, name: str) -> List[str]:
    """A YAML list of strings; an empty value is an empty list."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigurationError(f"Setting '{name}' must be a list, got {type(value).__name__}.")
    return [str(item) for item in value]


def _admin_keys_from_config(raw) -> Dict[str, List[str]]:
    """
    Parse the ``admin_keys`` mapping of the settings file.

    A key with no value (``key:``) is granted every capability; an explicit
    list, including an empty one, is taken as is.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("Setting 'admin_keys' must be a mapping of key to capabilities.")

    keys = {}
    for key, capabilities in raw.items():
        if capabilities is None:
            keys[str(key)] = list(ALL_CAPABILITIES)
        else:
            keys[str(key)] = _string_list(capabilities, f"admin_keys.{key}")
    return keys


def load_settings(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from the YAML file and the environment.

    Args:
        path: Settings file (defaults to config/settings.yaml)
        environ: Environment mapping (defaults to os.environ after loading .env)

    Returns:
        Settings instance
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    data = load_config(path)
    values = {
        "discogs_token": str(data.get("discogs_token") or ""),
        "default_product_status": str(data.get("default_product_status") or "draft"),
        "auto_publish_genres": (
            _string_list(data["auto_publish_genres"], "auto_publish_genres")
            if "auto_publish_genres" in data else list(DEFAULT_AUTO_PUBLISH_GENRES)
        ),
        "store_url": str(data.get("store_url") or ""),
        "shopify_shop": str(data.get("shopify_shop") or ""),
        "shopify_access_token": str(data.get("shopify_access_token") or ""),
        "admin_keys": _admin_keys_from_config(data.get("admin_keys")),
        "session_secret": str(data.get("session_secret") or ""),
        "ledger_path": str(data.get("ledger_path") or "data/import_ledger.db"),
    }

    for env_name, attr in ENV_OVERRIDES.items():
        if environ.get(env_name):
            values[attr] = environ[env_name]

    if environ.get("VSD_ADMIN_KEYS"):
        values["admin_keys"].update(_parse_admin_keys(environ["VSD_ADMIN_KEYS"]))

    settings = Settings(**values)
    settings.source_path = Path(path) if path else None
    logger.debug("Settings loaded (token configured: %s)", bool(settings.discogs_token))
    return settings


def save_settings(
    settings: Settings,
    discogs_token: str,
    default_product_status: str,
    path: Optional[Union[str, Path]] = None,
) -> Settings:
    """
    Persist the operator-editable values and update settings in place.

    Other keys already present in the file are preserved.
    """
    status = validate_status(default_product_status)
    token = (discogs_token or "").strip()

    target = path or settings.source_path
    data = load_config(target)
    data["discogs_token"] = token
    data["default_product_status"] = status
    written = save_config(data, target)

    settings.discogs_token = token
    settings.default_product_status = status
    logger.info("Settings saved to %s", written)
    return settings
