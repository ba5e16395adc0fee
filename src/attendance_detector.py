"""
Attendance detection - did the patient show up?

Tri-state: False on an explicit no-show, True on an arrival phrase
("llegó", "asistió"), None when the text does not say.
"""

from typing import Optional

from event_patterns import (
    ATTENDED_PATTERNS,
    NOT_ATTENDED_PATTERNS,
    READY_KEYWORD_PATTERN,
    matches_any,
)


def detect_attendance(text: str) -> Optional[bool]:
    if matches_any(text, NOT_ATTENDED_PATTERNS):
        return False
    if matches_any(text, ATTENDED_PATTERNS):
        return True
    return None


def roxair_attendance(attended: Optional[bool], text: str) -> Optional[bool]:
    """A Roxair pickup marked "listo" counts as attended when nothing else says so."""
    if attended is None and READY_KEYWORD_PATTERN.search(text):
        return True
    return attended
