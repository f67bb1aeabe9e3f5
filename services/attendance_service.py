# services/attendance_service.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional
import logging

from hw_types.housewarming_types import AttendanceRecord, AttendanceRequest
from seeds.storage_keys import RSVP_STORAGE_KEY
from .base_service import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceSummary:
    total_attendees: int
    total_adults: int
    total_children: int
    total_declines: int
    total_responses: int


def summarize(records: List[AttendanceRecord]) -> AttendanceSummary:
    coming = [r for r in records if r.attending]
    return AttendanceSummary(
        total_attendees=sum(r.total_guests for r in coming),
        total_adults=sum(r.adults_count for r in coming),
        total_children=sum(r.children_count for r in coming),
        total_declines=sum(1 for r in records if not r.attending),
        total_responses=len(records),
    )


class AttendanceService(BaseService):
    """RSVP records, exactly one per contact. Re-submitting replaces the old answer in place."""

    def __init__(self, **kwargs) -> None:
        super().__init__(name="attendance", **kwargs)

    def hydrate(self) -> None:
        self.state.records = self._load_many(RSVP_STORAGE_KEY, AttendanceRecord, list)

    @property
    def records(self) -> List[AttendanceRecord]:
        return list(self.state.records)

    def find(self, contact: Optional[str]) -> Optional[AttendanceRecord]:
        for r in self.state.records:
            if r.contact == contact:
                return r
        return None

    def submit(
        self,
        contact: str,
        name: str,
        attending: bool,
        adults: int = 1,
        children: int = 0,
    ) -> AttendanceRecord:
        req = self._validate(
            AttendanceRequest,
            {
                "contact": contact,
                "name": name,
                "attending": attending,
                "adults": adults,
                "children": children,
            },
        )
        adults_count, children_count = (req.adults, req.children) if req.attending else (0, 0)
        record = AttendanceRecord(
            contact=req.contact,
            name=req.name,
            attending=req.attending,
            adults_count=adults_count,
            children_count=children_count,
            total_guests=adults_count + children_count,
            submitted_at=self.now().isoformat(),
        )

        records = self.records
        for i, existing in enumerate(records):
            if existing.contact == record.contact:
                records[i] = record
                break
        else:
            records.append(record)

        self._write_many(RSVP_STORAGE_KEY, records)
        self.state.records = records
        logger.info("RSVP stored for %s (attending=%s, guests=%d)", record.contact, record.attending, record.total_guests)
        return record

    def summary(self) -> AttendanceSummary:
        return summarize(self.state.records)
