"""
API Models - Request and Response schemas
Using Pydantic for automatic validation and documentation

Event text fields accept a string or null; anything else is rejected with
422 by FastAPI before the parser runs.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Dict

from metadata_models import ParsedCalendarMetadata
from reclassifier import EventUpdate, StoredCalendarEvent


# ─── Parse Models ─────────────────────────────────────────────────────────────

class CalendarEventRequest(BaseModel):
    """One calendar entry to parse."""
    summary: Optional[str]     = Field(None, description="Event title")
    description: Optional[str] = Field(None, description="Event notes")

    class Config:
        json_schema_extra = {
            "example": {
                "summary": "Vacuna acaros (50)",
                "description": "llegó",
            }
        }


class ParseResponse(BaseModel):
    """Parsed metadata for one calendar entry."""
    status: str   = Field("success", description="Response status")
    ignored: bool = Field(False,     description="Summary matches the administrative ignore list")
    metadata: ParsedCalendarMetadata = Field(..., description="Derived billing/treatment metadata")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "success",
                "ignored": False,
                "metadata": {
                    "category": "Tratamiento subcutáneo",
                    "amountExpected": 50000,
                    "amountPaid": 50000,
                    "attended": True,
                    "dosageValue": None,
                    "dosageUnit": None,
                    "treatmentStage": "Mantención",
                    "controlIncluded": False,
                    "isDomicilio": False,
                },
            }
        }


class BatchParseRequest(BaseModel):
    events: List[CalendarEventRequest] = Field(..., description="Calendar entries", min_length=1)


class BatchParseItem(BaseModel):
    """Single item in batch parse results."""
    index: int
    ignored: bool = False
    metadata: ParsedCalendarMetadata


class BatchParseResponse(BaseModel):
    status: str       = Field("success", description="Overall status")
    total_events: int = Field(...,       description="Entries received")
    classified: int   = Field(...,       description="Entries with a category")
    ignored: int      = Field(...,       description="Entries on the ignore list")
    results: List[BatchParseItem] = Field(..., description="Individual results, request order")


# ─── Classification & Reclassify Models ──────────────────────────────────────

class ClassificationsResponse(BaseModel):
    status: str = Field("success", description="Response status")
    categories: List[str]
    treatment_stages: List[str]


class ReclassifyRequest(BaseModel):
    events: List[StoredCalendarEvent] = Field(..., description="Stored events", min_length=1)


class ReclassifyResponse(BaseModel):
    status: str = Field("success", description="Response status")
    total_events: int
    updates: List[EventUpdate]
    field_counts: Dict[str, int]


# ─── Health & Error Models ────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    """Health check response."""
    status: str  = Field("healthy",                 description="Health status")
    service: str = Field("calendar-metadata-api",   description="Service name")
    version: str = Field("1.0.0",                   description="API version")


class ErrorResponse(BaseModel):
    """Error response."""
    status: str           = Field("error", description="Response status")
    error: str            = Field(...,     description="Error type")
    message: str          = Field(...,     description="Error message")
    detail: Optional[str] = Field(None,    description="Additional details")
