"""
Dosage Extractor
================
Finds the administered dose in the event text.

  1. explicit number + unit      "0,5 ml"  "1cc"  "0,2ml("
  2. glued clustoid dose         "clustoid0,3"
  3. standalone decimal          "0,5"  (assumed ml)

No default dose is ever assumed: nothing found means None.
"""

import math
from typing import Optional, Tuple

from loguru import logger

from event_patterns import (
    CLUSTOID_DOSAGE_PATTERN,
    DECIMAL_STANDALONE_PATTERN,
    DOSAGE_UNIT_PATTERNS,
)


DEFAULT_UNIT = "ml"


def _to_float(raw: str) -> Optional[float]:
    try:
        value = float(raw.replace(",", "."))
    except ValueError:
        return None
    return value if math.isfinite(value) and value > 0 else None


class DosageExtractor:
    """
    Usage
    -----
    dosage = DosageExtractor().extract("clustoid 0,3ml")
    # (0.3, 'ml')
    """

    def extract(self, text: str) -> Optional[Tuple[float, str]]:
        dosage = (
            self._explicit(text)
            or self._glued_product(text)
            or self._standalone_decimal(text)
        )
        if dosage:
            logger.debug(f"[DosageExtractor] {dosage[0]} {dosage[1]}")
        return dosage

    def _explicit(self, text: str) -> Optional[Tuple[float, str]]:
        for pattern, unit in DOSAGE_UNIT_PATTERNS:
            m = pattern.search(text)
            if not m:
                continue
            value = _to_float(m.group(1))
            if value is not None:
                return value, unit
        return None

    def _glued_product(self, text: str) -> Optional[Tuple[float, str]]:
        m = CLUSTOID_DOSAGE_PATTERN.search(text)
        if m:
            value = _to_float(m.group(1))
            if value is not None:
                return value, DEFAULT_UNIT
        return None

    def _standalone_decimal(self, text: str) -> Optional[Tuple[float, str]]:
        m = DECIMAL_STANDALONE_PATTERN.search(text)
        if m:
            value = _to_float(m.group(1))
            if value is not None:
                return value, DEFAULT_UNIT
        return None
