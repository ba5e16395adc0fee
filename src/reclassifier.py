"""
Reclassifier - backfill stored calendar events from their text
==============================================================
Helpers the calendar sync and the manual-classification queue build on.
Nothing here touches storage: callers pass stored rows in and get proposed
changes back.

  metadata_for_sync()   parse result as stored on first sync
                        (paid with no expected → expected = paid)
  exclude_ignored()     drop administrative entries from a listing
  EventReclassifier     re-run the parser over stored events and propose
                        updates for fields that are still empty, or
                        overwrite every field (reclassify_all)
"""

from typing import Any, Dict, Iterable, List, Optional

from loguru import logger
from pydantic import BaseModel, Field

from calendar_metadata_parser import CalendarMetadataParser, get_parser
from event_classifier import is_ignored_text
from metadata_models import ParsedCalendarMetadata


PROGRESS_EVERY = 50
FULL_PROGRESS_EVERY = 100

UPDATE_FIELDS = (
    "category",
    "dosage",
    "treatment_stage",
    "attended",
    "amount_expected",
    "amount_paid",
)


class StoredCalendarEvent(BaseModel):
    """Calendar event as persisted, with whatever metadata it already has."""
    id: int
    summary: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    dosage: Optional[str] = None
    treatment_stage: Optional[str] = None
    attended: Optional[bool] = None
    amount_expected: Optional[int] = None
    amount_paid: Optional[int] = None


class EventUpdate(BaseModel):
    id: int
    data: Dict[str, Any] = Field(default_factory=dict)


class ReclassificationResult(BaseModel):
    updates: List[EventUpdate] = Field(default_factory=list)
    field_counts: Dict[str, int] = Field(
        default_factory=lambda: {name: 0 for name in UPDATE_FIELDS}
    )
    total_events: int = 0


def metadata_for_sync(metadata: ParsedCalendarMetadata) -> ParsedCalendarMetadata:
    """A paid amount implies what was expected when nothing else says so."""
    if metadata.amount_paid is not None and metadata.amount_expected is None:
        return metadata.model_copy(update={"amount_expected": metadata.amount_paid})
    return metadata


def exclude_ignored(events: Iterable[StoredCalendarEvent]) -> List[StoredCalendarEvent]:
    return [e for e in events if not is_ignored_text(e.summary)]


class EventReclassifier:
    """
    Propose metadata for stored events.

    reclassify()       fills only fields that are still empty
    reclassify_all()   re-derives every field and overwrites stored values,
                       nulls included

    Usage
    -----
    result = EventReclassifier().reclassify(events)
    for update in result.updates:
        store.update(update.id, **update.data)
    """

    def __init__(self, parser: Optional[CalendarMetadataParser] = None):
        self.parser = parser or get_parser()

    def reclassify(self, events: List[StoredCalendarEvent]) -> ReclassificationResult:
        result = ReclassificationResult(total_events=len(events))
        total = len(events)

        for i, event in enumerate(events):
            metadata = self.parser.parse(event.summary, event.description)
            data = self._missing_fields(event, metadata)

            for name in data:
                result.field_counts[name] += 1
            if data:
                result.updates.append(EventUpdate(id=event.id, data=data))

            if i % PROGRESS_EVERY == 0 or i == total - 1:
                logger.info(f"[EventReclassifier] analysed {i + 1}/{total} events")

        logger.info(
            f"[EventReclassifier] {len(result.updates)} events to update "
            f"{result.field_counts}"
        )
        return result

    def reclassify_all(self, events: List[StoredCalendarEvent]) -> ReclassificationResult:
        """
        One update per event carrying every field as parsed now.

        field_counts counts non-null results, not changed values.
        """
        result = ReclassificationResult(total_events=len(events))
        total = len(events)

        for i, event in enumerate(events):
            metadata = self.parser.parse(event.summary, event.description)
            data = self._all_fields(metadata)

            for name, value in data.items():
                if value is not None:
                    result.field_counts[name] += 1
            result.updates.append(EventUpdate(id=event.id, data=data))

            if i % FULL_PROGRESS_EVERY == 0 or i == total - 1:
                logger.info(f"[EventReclassifier] re-derived {i + 1}/{total} events")

        logger.info(
            f"[EventReclassifier] full reclassification of {total} events "
            f"{result.field_counts}"
        )
        return result

    @staticmethod
    def _all_fields(metadata: ParsedCalendarMetadata) -> Dict[str, Any]:
        return {
            "category": metadata.category,
            "dosage": metadata.dosage_text,
            "treatment_stage": metadata.treatment_stage,
            "attended": metadata.attended,
            "amount_expected": metadata.amount_expected,
            "amount_paid": metadata.amount_paid,
        }

    @staticmethod
    def _missing_fields(
        event: StoredCalendarEvent, metadata: ParsedCalendarMetadata
    ) -> Dict[str, Any]:
        data: Dict[str, Any] = {}

        if not event.category and metadata.category:
            data["category"] = metadata.category
        if event.dosage is None and metadata.dosage_text:
            data["dosage"] = metadata.dosage_text
        if event.treatment_stage is None and metadata.treatment_stage:
            data["treatment_stage"] = metadata.treatment_stage
        if event.attended is None and metadata.attended is not None:
            data["attended"] = metadata.attended
        if event.amount_expected is None and metadata.amount_expected is not None:
            data["amount_expected"] = metadata.amount_expected
        if event.amount_paid is None and metadata.amount_paid is not None:
            data["amount_paid"] = metadata.amount_paid

        return data
