# Common utilities
from .config_loader import load_config, save_config
from .errors import (
    ConfigurationError,
    ConflictError,
    DecodeError,
    PermissionDeniedError,
    PersistenceError,
    UpstreamError,
    ValidationError,
    VinylShopError,
)
from .log_config import setup_logging
from .settings import Settings, load_settings, save_settings
from .text_utils import autop, join_non_empty, sanitize_text_field
from .transliteration import generate_handle, transliterate
