"""
Metadata Models - input text, amount accumulator and the parsed record
Using Pydantic for boundary validation and the frozen output record
"""

import unicodedata
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Hard cap for any billed amount (CLP)
MAX_REASONABLE_AMOUNT = 100_000_000
MAX_INT32 = 2_147_483_647

CategoryLabel = Literal[
    "Tratamiento subcutáneo",
    "Test y exámenes",
    "Consulta médica",
    "Control médico",
    "Licencia médica",
    "Roxair",
    "Servicio de inyección",
]
StageLabel = Literal["Mantención", "Inducción"]


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


class CalendarEventText(BaseModel):
    """Raw summary/description pair as delivered by the calendar sync."""
    summary: str = Field("", description="Event title")
    description: str = Field("", description="Event notes")

    @field_validator("summary", "description", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise ValueError(f"expected text, got {type(value).__name__}")
        return unicodedata.normalize("NFC", value)

    @property
    def text(self) -> str:
        """Single buffer most rules run against; never stripped, `$`-anchored rules see the joining space."""
        return f"{self.summary} {self.description}"


class AmountAccumulator:
    """
    Mutable {expected, paid} pair threaded through the amount strategies.

    Created once per parse call and never shared.
    """

    __slots__ = ("amount_expected", "amount_paid")

    def __init__(
        self,
        amount_expected: Optional[int] = None,
        amount_paid: Optional[int] = None,
    ):
        self.amount_expected = amount_expected
        self.amount_paid = amount_paid

    def __repr__(self) -> str:
        return (
            f"AmountAccumulator(expected={self.amount_expected!r}, "
            f"paid={self.amount_paid!r})"
        )


class ParsedCalendarMetadata(BaseModel):
    """Structured billing/treatment metadata derived from one calendar event."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=_to_camel,
        populate_by_name=True,
    )

    category: Optional[CategoryLabel] = None
    amount_expected: Optional[int] = Field(None, ge=0, le=MAX_REASONABLE_AMOUNT)
    amount_paid: Optional[int] = Field(None, ge=0, le=MAX_REASONABLE_AMOUNT)
    attended: Optional[bool] = None
    dosage_value: Optional[float] = Field(None, gt=0)
    dosage_unit: Optional[str] = None
    treatment_stage: Optional[StageLabel] = None
    control_included: bool = False
    is_domicilio: bool = False

    @property
    def dosage_text(self) -> Optional[str]:
        """Dosage as persisted by the calendar store, e.g. ``"0.5 ml"``."""
        if self.dosage_value is None:
            return None
        return f"{self.dosage_value:g} {self.dosage_unit or 'ml'}"
