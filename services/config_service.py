# services/config_service.py
from __future__ import annotations
from datetime import date, datetime, time
from typing import Any, Optional
import logging

from hw_types.housewarming_types import EventConfig, EventConfigRequest
from seeds.config_seed import default_event_config
from seeds.storage_keys import CONFIG_STORAGE_KEY
from .base_service import BaseService

logger = logging.getLogger(__name__)


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    try:
        return date.fromisoformat((value or "").strip()[:10])
    except ValueError:
        return None


class ConfigService(BaseService):
    def __init__(self, **kwargs) -> None:
        super().__init__(name="config", **kwargs)

    def hydrate(self) -> None:
        self.state.config = self._load_one(CONFIG_STORAGE_KEY, EventConfig) or default_event_config()

    @property
    def current(self) -> EventConfig:
        return self.state.config

    def update(self, request: Any) -> EventConfig:
        config = self._validate(EventConfigRequest, request).to_config()
        self.store.set_json(CONFIG_STORAGE_KEY, config.to_storage())
        self.state.config = config
        logger.info("Event configuration updated (date=%s, deadline=%s)", config.event_date, config.rsvp_deadline)
        return config

    def deadline_date(self) -> Optional[date]:
        return parse_iso_date(self.state.config.rsvp_deadline)

    def is_past_deadline(self, now: Optional[datetime] = None) -> bool:
        """
        True once `now` is after midnight at the start of the deadline day, so
        the deadline day itself is already closed. Compared on the wall clock of
        `now`; the service clock reads local time.
        """
        deadline = self.deadline_date()
        if deadline is None:
            logger.warning("Unparseable RSVP deadline %r, treating as open", self.state.config.rsvp_deadline)
            return False
        wall = (now or self.now()).replace(tzinfo=None)
        return wall > datetime.combine(deadline, time.min)
