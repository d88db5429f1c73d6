"""
Admin API (FastAPI).

Modules:
    app - Search, import and settings endpoints
    security - Capability and anti-forgery checks
"""

from .app import create_app
from .security import NonceManager, check_any_capability, check_capability, check_nonce

__all__ = ['NonceManager', 'check_any_capability', 'check_capability', 'check_nonce', 'create_app']
