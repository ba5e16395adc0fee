"""
Amount Extractor
================
Derives {expected, paid} from the event text by running seven strategies in
a fixed order over one shared ``AmountAccumulator``.

Strategy order
──────────────
  1. slash pair        "(25/50)"           paid=25.000  expected=50.000
  2. parenthetical     "(50)" "(pagado 40)"
  3. typo / unit       "clustoid50)"  "0,5ml(30 mil"
  4. product keyword   "clustoid 50"  "vacuna 45"
  5. service context   "test 60"  "consulta 40"  "parche 30"
  6. trailing number   "... juan 40"
  7. "pagado 50"       overwrites paid, backfills expected

Strategies 1-6 only fill fields that are still unset, so the first strategy
to find a value wins.  Strategy 7 always writes paid.  After the chain, an
explicit "S/C" (sin costo) with nothing found sets both fields to 0.

Strategies 3-6 only run while expected is still unset.
"""

from typing import Callable, List, Tuple

from loguru import logger

from event_patterns import (
    AMOUNT_AT_END_PATTERN,
    AMOUNT_START_PATTERN,
    CONTEXT_AMOUNT_PATTERN,
    DATE_FRAGMENT_PATTERN,
    ML_THOUSAND_PATTERN,
    PAGADO_AMOUNT_PATTERN,
    PAGADO_KEYWORD_PATTERN,
    PAREN_GROUP_PATTERN,
    PRODUCT_AMOUNT_PATTERN,
    SIN_COSTO_PATTERN,
    SLASH_FORMAT_PATTERN,
    SLASH_PAIR_PATTERN,
    TYPO_AMOUNT_PATTERN,
)
from extractor.amount_normalizer import normalize_amount
from metadata_models import AmountAccumulator


Strategy = Callable[[str, AmountAccumulator], None]


# ─── Strategies ───────────────────────────────────────────────────────────────

def apply_slash_amounts(text: str, amounts: AmountAccumulator) -> None:
    """(paid/expected) pairs; each side normalized independently."""
    for m in SLASH_PAIR_PATTERN.finditer(text):
        paid = normalize_amount(m.group(1))
        expected = normalize_amount(m.group(2))
        if paid is not None and amounts.amount_paid is None:
            amounts.amount_paid = paid
        if expected is not None and amounts.amount_expected is None:
            amounts.amount_expected = expected


def apply_paren_amounts(text: str, amounts: AmountAccumulator) -> None:
    """
    Every parenthesized group.  Slash groups were handled already; date
    fragments ("03-10") are dropped before reading the leading number.
    A group mentioning "pagado" sets paid (and expected when unset).
    """
    for m in PAREN_GROUP_PATTERN.finditer(text):
        content = m.group(1)
        if SLASH_FORMAT_PATTERN.match(content):
            continue

        content = DATE_FRAGMENT_PATTERN.sub("", content)
        leading = AMOUNT_START_PATTERN.match(content)
        amount = normalize_amount(leading.group(0) if leading else content)
        if amount is None:
            continue

        if PAGADO_KEYWORD_PATTERN.search(content):
            amounts.amount_paid = amount
            if amounts.amount_expected is None:
                amounts.amount_expected = amount
            continue

        if amounts.amount_expected is None:
            amounts.amount_expected = amount


def apply_typo_and_ml_fallback(text: str, amounts: AmountAccumulator) -> None:
    if amounts.amount_expected is not None:
        return

    # "clustoid50)": a glued letter means the opening paren was lost;
    # only the last two digits are the price
    for m in TYPO_AMOUNT_PATTERN.finditer(text):
        digits = m.group(1)
        amount = normalize_amount(digits[-2:] if len(digits) >= 2 else digits)
        if amount is not None and amounts.amount_expected is None:
            amounts.amount_expected = amount

    for m in ML_THOUSAND_PATTERN.finditer(text):
        amount = normalize_amount(m.group(1))
        if amount is not None and amounts.amount_expected is None:
            amounts.amount_expected = amount


def _first_match_fallback(pattern) -> Strategy:
    def strategy(text: str, amounts: AmountAccumulator) -> None:
        if amounts.amount_expected is not None:
            return
        for m in pattern.finditer(text):
            amount = normalize_amount(m.group(1))
            if amount is not None:
                amounts.amount_expected = amount
                return
    return strategy


apply_keyword_fallback = _first_match_fallback(PRODUCT_AMOUNT_PATTERN)
apply_context_fallback = _first_match_fallback(CONTEXT_AMOUNT_PATTERN)


def apply_end_amount_fallback(text: str, amounts: AmountAccumulator) -> None:
    if amounts.amount_expected is not None:
        return
    m = AMOUNT_AT_END_PATTERN.search(text)
    if not m:
        return
    amount = normalize_amount(m.group(1))
    if amount is not None:
        amounts.amount_expected = amount


def apply_paid_pattern(text: str, amounts: AmountAccumulator) -> None:
    """Explicit "pagado 50" wins over whatever paid value came before."""
    for m in PAGADO_AMOUNT_PATTERN.finditer(text):
        amount = normalize_amount(m.group(1))
        if amount is None:
            continue
        amounts.amount_paid = amount
        if amounts.amount_expected is None:
            amounts.amount_expected = amount


# Reordering this tuple changes results
STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("slash",       apply_slash_amounts),
    ("paren",       apply_paren_amounts),
    ("typo_ml",     apply_typo_and_ml_fallback),
    ("keyword",     apply_keyword_fallback),
    ("context",     apply_context_fallback),
    ("end_number",  apply_end_amount_fallback),
    ("pagado",      apply_paid_pattern),
)


# ─────────────────────────────────────────────────────────────────────────────

class AmountExtractor:
    """
    Run the amount strategies over one text buffer.

    Usage
    -----
    amounts = AmountExtractor().extract("Clustoid (25/50)")
    # amounts.amount_paid == 25000, amounts.amount_expected == 50000
    """

    def __init__(self, strategies: Tuple[Tuple[str, Strategy], ...] = STRATEGIES):
        self.strategies = strategies

    def extract(self, text: str) -> AmountAccumulator:
        amounts = AmountAccumulator()
        trace: List[str] = []

        for name, strategy in self.strategies:
            before = (amounts.amount_expected, amounts.amount_paid)
            strategy(text, amounts)
            if (amounts.amount_expected, amounts.amount_paid) != before:
                trace.append(name)

        if (
            SIN_COSTO_PATTERN.search(text)
            and amounts.amount_expected is None
            and amounts.amount_paid is None
        ):
            amounts.amount_expected = 0
            amounts.amount_paid = 0
            trace.append("sin_costo")

        logger.debug(f"[AmountExtractor] {amounts!r} via {trace or ['none']}")
        return amounts
