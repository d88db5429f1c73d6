"""
Error Types

Every failure the importer can report to an operator is a VinylShopError.
Each subclass carries a short machine code and the HTTP status the admin
API answers with.
"""


class VinylShopError(Exception):
    """Base class for all reportable failures."""

    code = "error"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(VinylShopError):
    """A required setting (e.g. the Discogs token) is missing or invalid."""

    code = "no_token"
    http_status = 500


class UpstreamError(VinylShopError):
    """Discogs answered with a non-success status or could not be reached."""

    code = "api_error"
    http_status = 502

    def __init__(self, message: str, status_code: int = 0):
        super().__init__(message)
        self.status_code = status_code


class DecodeError(VinylShopError):
    """Discogs returned a body that is not valid JSON."""

    code = "json_error"
    http_status = 502


class ValidationError(VinylShopError):
    """Operator input was empty or malformed."""

    code = "invalid_input"
    http_status = 400


class ConflictError(VinylShopError):
    """A product for this release already exists."""

    code = "product_exists"
    http_status = 409


class PersistenceError(VinylShopError):
    """The store refused to save a record."""

    code = "save_failed"
    http_status = 500


class PermissionDeniedError(VinylShopError):
    """Missing capability or invalid anti-forgery token."""

    code = "permission_denied"
    http_status = 403
