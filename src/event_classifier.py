"""
Event Classifier for Clinic Calendar Entries
============================================
Resolves the service category of a calendar entry from its free text.

Two passes, in order:

  1. Ignore list:    administrative notices, reminders, holidays and
                     "name and name" entries.  Checked against the summary
                     alone and against the full text; any hit → None.

  2. Priority chain: first matching rule wins:

        Test y exámenes           examen, test de parche, prick, panel ...
        Servicio de inyección     dupixent, betametasona, "lo trae", IM ...
                                  (before subcut, so named biologics are not
                                  read as immunotherapy)
        Tratamiento subcutáneo    clustoid family, vacuna, ácaros, n-era dosis
        Roxair                    roxair
        Licencia médica           lic, licencia
        Control médico            control, 1632control, confirma control
        Consulta médica           consulta + typos, telemedicina, reservations
        Tratamiento subcutáneo    bare decimal ("0,5") read as an unlabeled dose

Categories returned
───────────────────
  one of event_patterns.CATEGORY_CHOICES, or None
"""

from typing import Optional, Tuple

from loguru import logger

from event_patterns import (
    CATEGORY_CONSULTA,
    CATEGORY_CONTROL,
    CATEGORY_INJECTION,
    CATEGORY_LICENCIA,
    CATEGORY_ROXAIR,
    CATEGORY_SUBCUT,
    CATEGORY_TEST,
    CONSULTA_PATTERNS,
    CONTROL_PATTERNS,
    DECIMAL_DOSAGE_PATTERN,
    IGNORE_PATTERNS,
    INJECTION_PATTERNS,
    LICENCIA_PATTERNS,
    ROXAIR_PATTERNS,
    SUBCUT_PATTERNS,
    TEST_PATTERNS,
    matches_any,
)


# ─── Priority chain ───────────────────────────────────────────────────────────

# (rule name, patterns, category), evaluated top to bottom
_PRIORITY_CHAIN: Tuple[Tuple[str, tuple, str], ...] = (
    ("test",            TEST_PATTERNS,              CATEGORY_TEST),
    ("injection",       INJECTION_PATTERNS,         CATEGORY_INJECTION),
    ("subcut",          SUBCUT_PATTERNS,            CATEGORY_SUBCUT),
    ("roxair",          ROXAIR_PATTERNS,            CATEGORY_ROXAIR),
    ("licencia",        LICENCIA_PATTERNS,          CATEGORY_LICENCIA),
    ("control",         CONTROL_PATTERNS,           CATEGORY_CONTROL),
    ("consulta",        CONSULTA_PATTERNS,          CATEGORY_CONSULTA),
    ("implicit_subcut", (DECIMAL_DOSAGE_PATTERN,),  CATEGORY_SUBCUT),
)


def is_ignored_text(text: Optional[str]) -> bool:
    """True when the text matches the administrative ignore list."""
    return matches_any((text or "").lower(), IGNORE_PATTERNS)


class EventClassifier:
    """
    Classify a calendar entry into one service category.

    Usage
    -----
    classifier = EventClassifier()
    category = classifier.classify(summary, text)
    # category: str  e.g. 'Control médico' or None
    """

    def classify(self, summary: str, text: str) -> Optional[str]:
        """
        Parameters
        ----------
        summary : str
            Event title on its own (ignore-list check).
        text : str
            Summary and description joined.
        """
        if is_ignored_text(summary) or is_ignored_text(text):
            logger.debug(f"[EventClassifier] ignored: {summary!r}")
            return None

        lowered = text.lower()
        for rule, patterns, category in _PRIORITY_CHAIN:
            if matches_any(lowered, patterns):
                logger.debug(f"[EventClassifier] {category} (rule: {rule})")
                return category

        logger.debug("[EventClassifier] no category")
        return None
