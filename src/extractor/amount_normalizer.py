"""
Amount Normalizer
=================
Single choke point that turns a numeric-ish text fragment into a whole-peso
integer.  Every amount strategy funnels through ``normalize_amount``.

Steps
─────
  1. "30 mil" / "30mil" / "30 miles"  →  "30000"
  2. drop every non-digit
  3. reject  empty | phone-shaped | longer than 8 digits (RUTs, IDs)
  4. reject  value <= 0
  5. value < 1000  →  value * 1000          ("50" is clinic shorthand for 50.000)
  6. reject  value > int32 max or > 100.000.000
"""

import re
from typing import Optional

from loguru import logger

from event_patterns import PHONE_PATTERNS, THOUSAND_SUFFIX_PATTERN
from metadata_models import MAX_INT32, MAX_REASONABLE_AMOUNT


_NON_DIGIT = re.compile(r'[^0-9]')

MAX_AMOUNT_DIGITS = 8
SHORTHAND_THRESHOLD = 1000


def _expand_thousands(raw: str) -> str:
    return THOUSAND_SUFFIX_PATTERN.sub(lambda m: str(int(m.group(1)) * 1000), raw)


def normalize_amount(raw: str) -> Optional[int]:
    """
    Parse a raw fragment into a CLP amount.

    Parameters
    ----------
    raw : str
        Fragment believed to contain a number ("50", "30 mil", "$45.000").

    Returns
    -------
    int or None
        Normalized amount, or None when the fragment is rejected.
    """
    digits = _NON_DIGIT.sub("", _expand_thousands(raw))
    if not digits:
        return None

    if any(p.match(digits) for p in PHONE_PATTERNS):
        logger.debug(f"[AmountNormalizer] rejected phone-shaped {digits!r}")
        return None

    if len(digits) > MAX_AMOUNT_DIGITS:
        logger.debug(f"[AmountNormalizer] rejected long identifier {digits!r}")
        return None

    value = int(digits)
    if value <= 0:
        return None

    normalized = value if value >= SHORTHAND_THRESHOLD else value * 1000

    if normalized > MAX_INT32 or normalized > MAX_REASONABLE_AMOUNT:
        logger.debug(f"[AmountNormalizer] rejected out-of-range {normalized}")
        return None

    return normalized
