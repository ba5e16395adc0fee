"""
API Routes - Calendar metadata endpoints
Thin adapter over CalendarMetadataParser; no storage is touched here.
"""

from fastapi import APIRouter, HTTPException

from api.models import (
    BatchParseItem,
    BatchParseRequest,
    BatchParseResponse,
    CalendarEventRequest,
    ClassificationsResponse,
    ErrorResponse,
    ParseResponse,
    ReclassifyRequest,
    ReclassifyResponse,
)
from calendar_metadata_parser import (
    CATEGORY_CHOICES,
    TREATMENT_STAGE_CHOICES,
    get_parser,
)
from reclassifier import EventReclassifier
from loguru import logger

# Create router
router = APIRouter()

# Shared parser (stateless per call)
parser = get_parser()

MAX_BATCH_SIZE = int(parser.config.get("api", {}).get("max_batch_size", 500))

_ERRORS = {500: {"model": ErrorResponse}}


# ==================== UTILITY FUNCTIONS ====================

def validate_batch_size(count: int):
    """Reject oversized batches"""
    if count > MAX_BATCH_SIZE:
        raise HTTPException(
            400,
            detail=f"Too many events: {count}. Maximum: {MAX_BATCH_SIZE}"
        )


# ==================== API ENDPOINTS ====================

@router.post("/calendar/parse", response_model=ParseResponse, responses=_ERRORS, tags=["Calendar"])
async def parse_event(event: CalendarEventRequest):
    """
    **Parse a single calendar entry**

    Derives category, expected/paid amounts, attendance, dosage and
    treatment stage from the event's summary and description.

    **Example:**
    ```bash
    curl -X POST http://localhost:8000/api/v1/calendar/parse \\
      -H "Content-Type: application/json" \\
      -d '{"summary": "Vacuna acaros (50)", "description": ""}'
    ```
    """
    try:
        metadata = parser.parse(event.summary, event.description)
        ignored = parser.is_ignored(event.summary)
        logger.info(
            f"Parsed: {event.summary!r} → {metadata.category!r} "
            f"expected={metadata.amount_expected} ignored={ignored}"
        )
        return ParseResponse(status="success", ignored=ignored, metadata=metadata)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error parsing {event.summary!r}: {e}")
        logger.exception("Full traceback:")
        raise HTTPException(500, str(e))


@router.post("/calendar/parse-batch", response_model=BatchParseResponse, responses=_ERRORS, tags=["Calendar"])
async def parse_batch(request: BatchParseRequest):
    """
    **Parse many calendar entries in one request**

    Each entry is parsed independently; results keep request order.
    Ignored entries are still parsed and flagged so the caller can drop them.
    """
    try:
        validate_batch_size(len(request.events))

        results = []
        for index, event in enumerate(request.events):
            results.append(BatchParseItem(
                index=index,
                ignored=parser.is_ignored(event.summary),
                metadata=parser.parse(event.summary, event.description),
            ))

        classified = sum(1 for r in results if r.metadata.category is not None)
        ignored = sum(1 for r in results if r.ignored)

        logger.info(
            f"Batch parsed: {len(results)} events, "
            f"{classified} classified, {ignored} ignored"
        )

        return BatchParseResponse(
            status="success",
            total_events=len(results),
            classified=classified,
            ignored=ignored,
            results=results,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Batch error: {e}")
        logger.exception("Full traceback:")
        raise HTTPException(500, str(e))


@router.get("/calendar/classifications", response_model=ClassificationsResponse, tags=["Calendar"])
async def list_classifications():
    """Valid category and treatment-stage labels."""
    return ClassificationsResponse(
        status="success",
        categories=list(CATEGORY_CHOICES),
        treatment_stages=list(TREATMENT_STAGE_CHOICES),
    )


@router.post("/calendar/reclassify", response_model=ReclassifyResponse, responses=_ERRORS, tags=["Calendar"])
async def reclassify_events(request: ReclassifyRequest):
    """
    **Propose metadata for stored events**

    Only fields that are currently empty are filled; existing values are
    never overwritten.  Nothing is persisted.
    """
    try:
        validate_batch_size(len(request.events))

        result = EventReclassifier(parser).reclassify(request.events)

        return ReclassifyResponse(
            status="success",
            total_events=result.total_events,
            updates=result.updates,
            field_counts=result.field_counts,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Reclassify error: {e}")
        logger.exception("Full traceback:")
        raise HTTPException(500, str(e))


@router.post("/calendar/reclassify-all", response_model=ReclassifyResponse, responses=_ERRORS, tags=["Calendar"])
async def reclassify_all_events(request: ReclassifyRequest):
    """
    **Re-derive every field for stored events**

    Returns one update per event with all fields as parsed now; stored
    values are overwritten, nulls included.  field_counts counts the
    non-null results.  Nothing is persisted.
    """
    try:
        validate_batch_size(len(request.events))

        result = EventReclassifier(parser).reclassify_all(request.events)

        return ReclassifyResponse(
            status="success",
            total_events=result.total_events,
            updates=result.updates,
            field_counts=result.field_counts,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Reclassify-all error: {e}")
        logger.exception("Full traceback:")
        raise HTTPException(500, str(e))
