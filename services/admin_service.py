# services/admin_service.py
from __future__ import annotations
import hmac
import logging

from seeds.storage_keys import ADMIN_SESSION_MARKER, ADMIN_STORAGE_KEY
from .base_service import BaseService
from .errors import AuthFailure

logger = logging.getLogger(__name__)


class AdminService(BaseService):
    """Single capability flag, granted by a shared passphrase. No lockout."""

    def __init__(self, *, passphrase: str, **kwargs) -> None:
        super().__init__(name="admin", **kwargs)
        self._passphrase = passphrase

    def hydrate(self) -> None:
        self.state.is_admin = self.store.get_raw(ADMIN_STORAGE_KEY) == ADMIN_SESSION_MARKER

    @property
    def is_admin(self) -> bool:
        return self.state.is_admin

    def login(self, passphrase: str) -> None:
        if not hmac.compare_digest((passphrase or "").encode("utf-8"), self._passphrase.encode("utf-8")):
            logger.warning("Admin login rejected")
            raise AuthFailure("Senha incorreta")
        self.store.set_raw(ADMIN_STORAGE_KEY, ADMIN_SESSION_MARKER)
        self.state.is_admin = True
        logger.info("Admin session opened")

    def authenticate(self, passphrase: str) -> bool:
        try:
            self.login(passphrase)
        except AuthFailure:
            return False
        return True

    def revoke(self) -> None:
        self.store.remove(ADMIN_STORAGE_KEY)
        self.state.is_admin = False
        logger.info("Admin session closed")
