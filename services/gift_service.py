# services/gift_service.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple
import logging

from hw_types.housewarming_types import GiftItem, GiftRequest, GuestIdentity
from seeds.gift_seed import seed_gifts
from seeds.storage_keys import GIFT_SEQUENCE_STORAGE_KEY, GIFTS_STORAGE_KEY
from .base_service import BaseService
from .errors import AuthorizationError, ConflictError, GiftNotFoundError

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_URL = "https://picsum.photos/seed/{seed}/600/400"


def placeholder_image_url(item_id: str) -> str:
    return PLACEHOLDER_IMAGE_URL.format(seed=item_id)


@dataclass(frozen=True)
class CatalogProgress:
    reserved: int
    total: int
    percent: int


class GiftService(BaseService):
    """
    Owns the gift list. Each item is either Available or Reserved(by); the only
    transitions are reserve (Available → Reserved) and cancel (Reserved → Available).
    Every change rewrites the whole catalog in the store.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(name="gifts", **kwargs)

    def hydrate(self) -> None:
        self.state.gifts = self._load_many(GIFTS_STORAGE_KEY, GiftItem, seed_gifts)
        stored = self.store.get_json(GIFT_SEQUENCE_STORAGE_KEY, 0)
        if isinstance(stored, bool) or not isinstance(stored, int):
            logger.warning("Stored gift sequence %r is not an integer, ignoring", stored)
            stored = 0
        numeric = [int(g.id) for g in self.state.gifts if g.id.isdigit()]
        self.state.last_gift_id = max([stored] + numeric)

    # ───────── reads ─────────
    @property
    def items(self) -> List[GiftItem]:
        return list(self.state.gifts)

    def get(self, item_id: str) -> GiftItem:
        return self._find(item_id)[1]

    def reserved_by(self, name: Optional[str]) -> List[GiftItem]:
        if not name:
            return []
        return [g for g in self.state.gifts if g.is_reserved and g.reserved_by == name]

    def progress(self) -> CatalogProgress:
        total = len(self.state.gifts)
        reserved = sum(1 for g in self.state.gifts if g.is_reserved)
        percent = int(reserved * 100 / total + 0.5) if total else 0
        return CatalogProgress(reserved=reserved, total=total, percent=percent)

    # ───────── mutations ─────────
    def reserve(self, item_id: str, guest: Optional[GuestIdentity]) -> Optional[GiftItem]:
        if guest is None:
            logger.info("Reserve of %s ignored: no guest identity", item_id)
            return None

        index, item = self._find(item_id)
        # Not idempotent: a second click from the same guest is a conflict too.
        if item.is_reserved:
            raise ConflictError(f"\"{item.name}\" já foi reservado.")

        updated = item.model_copy(update={"is_reserved": True, "reserved_by": guest.name})
        self._replace(index, updated)
        logger.info("Gift %s reserved by %s", item_id, guest.contact)
        return updated

    def cancel(self, item_id: str, by_guest: Optional[GuestIdentity] = None) -> bool:
        """
        Release a reservation. Without `by_guest` (admin surface) any holder is
        cleared; with it, only the guest holding the item may release it.
        Returns False when the item was not reserved.
        """
        index, item = self._find(item_id)
        if not item.is_reserved:
            return False
        if by_guest is not None and by_guest.name != item.reserved_by:
            raise AuthorizationError("Apenas quem reservou pode cancelar este presente.")

        updated = item.model_copy(update={"is_reserved": False, "reserved_by": None})
        self._replace(index, updated)
        logger.info("Reservation of gift %s released", item_id)
        return True

    def add_item(self, request: Any) -> GiftItem:
        req = self._validate(GiftRequest, request)
        item_id = self._next_id()
        item = GiftItem(
            id=item_id,
            name=req.name,
            description=req.description,
            image_url=req.image_url or placeholder_image_url(item_id),
            link=req.link,
            price_estimate=req.price_estimate,
        )
        self._save(self.items + [item])
        logger.info("Gift %s added: %s", item_id, item.name)
        return item

    def remove_item(self, item_id: str) -> None:
        index, _ = self._find(item_id)
        gifts = self.items
        del gifts[index]
        self._save(gifts)
        logger.info("Gift %s removed", item_id)

    # ───────── internals ─────────
    def _find(self, item_id: str) -> Tuple[int, GiftItem]:
        for i, g in enumerate(self.state.gifts):
            if g.id == item_id:
                return i, g
        raise GiftNotFoundError(item_id)

    def _next_id(self) -> str:
        """Millisecond timestamp, bumped past every id this catalog has ever issued."""
        candidate = max(int(self.now().timestamp() * 1000), self.state.last_gift_id + 1)
        # Recorded before the catalog write; a failed add only skips a number.
        self.store.set_json(GIFT_SEQUENCE_STORAGE_KEY, candidate)
        self.state.last_gift_id = candidate
        return str(candidate)

    def _replace(self, index: int, item: GiftItem) -> None:
        gifts = self.items
        gifts[index] = item
        self._save(gifts)

    def _save(self, gifts: List[GiftItem]) -> None:
        # store first: if the write fails, state keeps the previous catalog
        self._write_many(GIFTS_STORAGE_KEY, gifts)
        self.state.gifts = gifts
