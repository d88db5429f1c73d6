"""
Admin request guards.

Two checks protect every state-changing endpoint:

- capability: the ``X-Admin-Key`` header must map to a configured key that
  grants the required capability;
- anti-forgery nonce: ``X-Nonce`` must be the HMAC of the caller's
  ``X-Session-Id`` under the server's session secret.
"""

import hashlib
import hmac
import logging
import secrets
from typing import Dict, Iterable, List

from ..common.errors import PermissionDeniedError

logger = logging.getLogger(__name__)

NONCE_ACTION = "vsd_ajax_nonce"


class NonceManager:
    """Issues and verifies per-session anti-forgery tokens."""

    def __init__(self, secret: str = ""):
        if not secret:
            # Nonces issued with a random secret do not survive a restart
            logger.warning("No session secret configured, using a per-process secret")
            secret = secrets.token_hex(32)
        self._secret = secret.encode("utf-8")

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(16)

    def create(self, session_id: str, action: str = NONCE_ACTION) -> str:
        message = f"{action}|{session_id}".encode("utf-8")
        return hmac.new(self._secret, message, hashlib.sha256).hexdigest()

    def verify(self, session_id: str, nonce: str, action: str = NONCE_ACTION) -> bool:
        if not session_id or not nonce:
            return False
        return hmac.compare_digest(self.create(session_id, action).encode("utf-8"), nonce.encode("utf-8"))


def _granted(admin_keys: Dict[str, List[str]], candidate: str) -> List[str]:
    """Capabilities of the configured key matching candidate (empty when none matches)."""
    candidate = (candidate or "").strip()
    if not candidate:
        return []
    for key, capabilities in admin_keys.items():
        if hmac.compare_digest(candidate.encode("utf-8"), key.encode("utf-8")):
            return list(capabilities)
    return []


def check_capability(admin_keys: Dict[str, List[str]], candidate: str, capability: str) -> None:
    """
    Raise PermissionDeniedError unless candidate is a key granting capability.
    """
    check_any_capability(admin_keys, candidate, [capability])


def check_any_capability(admin_keys: Dict[str, List[str]], candidate: str, capabilities: Iterable[str]) -> None:
    """Raise PermissionDeniedError unless candidate grants at least one of capabilities."""
    wanted = list(capabilities)
    granted = _granted(admin_keys, candidate)
    if any(capability in granted for capability in wanted):
        return
    logger.warning("Capability check failed for %s (key present: %s)", "/".join(wanted), bool((candidate or "").strip()))
    raise PermissionDeniedError("Permission denied.")


def check_nonce(nonces: NonceManager, session_id: str, nonce: str) -> None:
    """Raise PermissionDeniedError unless nonce matches session_id."""
    if not nonces.verify(session_id, nonce):
        raise PermissionDeniedError("Security check failed. Please reload the page and try again.")
