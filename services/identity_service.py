# services/identity_service.py
from __future__ import annotations
from typing import Optional
import logging

from hw_types.housewarming_types import ContactRequest, GuestIdentity, IdentityRequest, is_valid_contact
from seeds.storage_keys import USER_STORAGE_KEY
from .base_service import BaseService

logger = logging.getLogger(__name__)


class IdentityService(BaseService):
    """
    Establishes who the guest is. The phone contact is the durable key: once a
    contact has an RSVP on file, the name recorded there wins over whatever is
    typed, so the same person never shows up twice under different names.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(name="identity", **kwargs)

    def hydrate(self) -> None:
        self.state.guest = self._load_one(USER_STORAGE_KEY, GuestIdentity)

    @property
    def current(self) -> Optional[GuestIdentity]:
        return self.state.guest

    def lookup(self, contact: Optional[str]) -> Optional[str]:
        """Name already registered for `contact`, or None. Cheap enough to call on every keystroke."""
        contact = (contact or "").strip()
        if not is_valid_contact(contact):
            return None
        for record in self.state.records:
            if record.contact == contact:
                return record.name
        return None

    def submit_identity(self, name: str, contact: str) -> GuestIdentity:
        contact = (contact or "").strip()
        known_name = self.lookup(contact)
        if known_name is not None:
            # The registered name is used as-is, even if shorter than a new sign-up allows.
            request = self._validate(ContactRequest, {"contact": contact})
            name = known_name
        else:
            request = self._validate(IdentityRequest, {"contact": contact, "name": name})
            name = request.name

        guest = GuestIdentity(
            name=name,
            contact=request.contact,
            recognized=known_name is not None,
        )
        self.store.set_json(USER_STORAGE_KEY, guest.to_storage())
        self.state.guest = guest
        logger.info("Guest identified (%s, recognized=%s)", guest.contact, guest.recognized)
        return guest

    def sign_out(self) -> None:
        """Forget the session identity; RSVP history stays where it is."""
        self.store.remove(USER_STORAGE_KEY)
        self.state.guest = None
