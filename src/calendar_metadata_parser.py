"""
Calendar Metadata Parser
========================
Turns one calendar entry (summary + description) into billing and treatment
metadata: category, expected/paid amounts, attendance, dosage and treatment
stage.

Pipeline
────────
  1. Normalize     None → "", NFC, summary + description joined
  2. Amounts       AmountExtractor (7 strategies) → refine_amounts
  3. Classify      EventClassifier, detect_attendance, DosageExtractor,
                   treatment stage
  4. Reconcile     category gating, Roxair default price / pickup rules,
                   no-show forces paid = 0 (applied last)

Every call builds its own accumulator; the parser keeps no state between
events, so one instance can serve any number of threads.

Usage
-----
    from calendar_metadata_parser import parse, is_ignored

    meta = parse("Vacuna acaros (50)", "")
    meta.category          # 'Tratamiento subcutáneo'
    meta.amount_expected   # 50000
    meta.treatment_stage   # 'Mantención'
"""

import os
from pathlib import Path
from typing import Dict, Optional

import yaml
from loguru import logger

from attendance_detector import detect_attendance, roxair_attendance
from event_classifier import EventClassifier, is_ignored_text
from event_patterns import (
    CATEGORY_CHOICES,
    CATEGORY_ROXAIR,
    CATEGORY_SUBCUT,
    CONTROL_PATTERNS,
    DOMICILIO_PATTERNS,
    MONEY_CONFIRMED_PATTERNS,
    TREATMENT_STAGE_CHOICES,
    matches_any,
)
from extractor import AmountExtractor, DosageExtractor, refine_amounts
from metadata_models import CalendarEventText, ParsedCalendarMetadata
from treatment_stage import classify_treatment_stage


__all__ = [
    "CalendarMetadataParser",
    "parse",
    "is_ignored",
    "CATEGORY_CHOICES",
    "TREATMENT_STAGE_CHOICES",
]

ROXAIR_DEFAULT_AMOUNT = 150_000


class CalendarMetadataParser:
    """
    Calendar entry → ParsedCalendarMetadata

    Components are stateless and built once per parser instance.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config = self._load_config(config_path)
        self.roxair_default_amount = int(
            self.config.get("amounts", {}).get("roxair_default", ROXAIR_DEFAULT_AMOUNT)
        )

        self.amount_extractor = AmountExtractor()
        self.classifier = EventClassifier()
        self.dosage_extractor = DosageExtractor()

    def _load_config(self, config_path: Optional[str] = None) -> Dict:
        """Load configuration from YAML file"""
        if config_path is None:
            config_path = Path(__file__).parent.parent / "config" / "parser_config.yaml"

        if not os.path.exists(config_path):
            logger.warning(f"Config file not found: {config_path}, using defaults")
            return self._default_config()

        with open(config_path, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f) or {}

        return config

    def _default_config(self) -> Dict:
        """Return default configuration"""
        return {
            'amounts': {
                'roxair_default': ROXAIR_DEFAULT_AMOUNT,
            },
            'api': {
                'max_batch_size': 500,
            },
            'logging': {
                'level': 'INFO',
                'file': 'logs/calendar_parser.log',
            },
        }

    # ── Public entry points ───────────────────────────────────────────────────

    def parse(
        self,
        summary: Optional[str] = None,
        description: Optional[str] = None,
    ) -> ParsedCalendarMetadata:
        """
        Parse one calendar entry.

        Raises
        ------
        pydantic.ValidationError
            summary/description is neither text nor None.
        """
        event = CalendarEventText(summary=summary, description=description)
        text = event.text

        amounts = refine_amounts(self.amount_extractor.extract(text), text)

        category = self.classifier.classify(event.summary, text)
        attended = detect_attendance(text)
        dosage = self.dosage_extractor.extract(text)

        is_subcut = category == CATEGORY_SUBCUT
        is_roxair = category == CATEGORY_ROXAIR

        if is_roxair:
            attended = roxair_attendance(attended, text)

        dosage_value, dosage_unit = dosage if (is_subcut and dosage) else (None, None)
        treatment_stage = (
            classify_treatment_stage(text, dosage_value) if is_subcut else None
        )

        amount_expected = amounts.amount_expected
        if is_roxair and amount_expected is None:
            amount_expected = self.roxair_default_amount

        amount_paid = amounts.amount_paid
        if amount_paid is None and is_roxair and (
            attended is True or matches_any(text, MONEY_CONFIRMED_PATTERNS)
        ):
            amount_paid = amount_expected

        # No-show overrides every other paid signal
        if attended is False:
            amount_paid = 0

        result = ParsedCalendarMetadata(
            category=category,
            amount_expected=amount_expected,
            amount_paid=amount_paid,
            attended=attended,
            dosage_value=dosage_value,
            dosage_unit=dosage_unit,
            treatment_stage=treatment_stage,
            control_included=matches_any(text, CONTROL_PATTERNS),
            is_domicilio=matches_any(text, DOMICILIO_PATTERNS),
        )

        logger.debug(
            f"[CalendarMetadataParser] {event.summary!r} → category={category!r} "
            f"expected={amount_expected!r} paid={amount_paid!r} "
            f"attended={attended!r} stage={treatment_stage!r}"
        )
        return result

    @staticmethod
    def is_ignored(summary: Optional[str]) -> bool:
        """Administrative / non-billable entry (reminders, holidays, meetings)."""
        return is_ignored_text(summary)


# ─── Module-level convenience ────────────────────────────────────────────────

_default_parser: Optional[CalendarMetadataParser] = None


def get_parser() -> CalendarMetadataParser:
    """Shared parser built from the default config file."""
    global _default_parser
    if _default_parser is None:
        _default_parser = CalendarMetadataParser()
        logger.debug("[CalendarMetadataParser] default parser initialised")
    return _default_parser


def parse(summary: Optional[str] = None, description: Optional[str] = None) -> ParsedCalendarMetadata:
    return get_parser().parse(summary, description)


def is_ignored(summary: Optional[str]) -> bool:
    return is_ignored_text(summary)
