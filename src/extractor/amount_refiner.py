"""
Amount Refiner
==============
Corrects the paid amount using attendance and payment language.  Only the
first matching rule applies:

  no-show ("no vino", "no asiste")            → paid = 0
  pending ("confirma", "confirmado")          → paid cleared while expected stays
  money confirmed ("llegó", "pagado", ...)    → paid = expected when paid unset
  home delivery ("domicilio", "se la llevó")  → paid = expected when paid unset/0
"""

from loguru import logger

from event_patterns import (
    DOMICILIO_PATTERNS,
    MONEY_CONFIRMED_PATTERNS,
    NOT_ATTENDED_PATTERNS,
    PENDING_CONFIRMATION_PATTERNS,
    matches_any,
)
from metadata_models import AmountAccumulator


def refine_amounts(amounts: AmountAccumulator, text: str) -> AmountAccumulator:
    """
    Return a new accumulator with the paid amount corrected.

    The input accumulator is left untouched.
    """
    expected, paid = amounts.amount_expected, amounts.amount_paid

    if matches_any(text, NOT_ATTENDED_PATTERNS):
        rule, paid = "not_attended", 0

    elif matches_any(text, PENDING_CONFIRMATION_PATTERNS) and paid is not None:
        rule, paid = "pending_confirmation", None

    elif (
        matches_any(text, MONEY_CONFIRMED_PATTERNS)
        and expected is not None
        and paid is None
    ):
        rule, paid = "money_confirmed", expected

    elif (
        matches_any(text, DOMICILIO_PATTERNS)
        and expected is not None
        and not paid
    ):
        rule, paid = "domicilio", expected

    else:
        return AmountAccumulator(expected, paid)

    logger.debug(f"[AmountRefiner] {rule}: paid {amounts.amount_paid!r} -> {paid!r}")
    return AmountAccumulator(expected, paid)
