"""
Tests for amount normalization, extraction and refinement
"""

import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from extractor import AmountExtractor, normalize_amount, refine_amounts
from extractor.amount_extractor import apply_typo_and_ml_fallback
from metadata_models import AmountAccumulator


@pytest.fixture
def extractor():
    return AmountExtractor()


# ─── normalize_amount ─────────────────────────────────────────────────────────

@pytest.mark.parametrize("raw, expected", [
    ("50", 50000),
    ("999", 999000),
    ("1000", 1000),
    ("30 mil", 30000),
    ("30mil", 30000),
    ("30 miles", 30000),
    ("$45.000", 45000),
    ("12345678", 12345678),
])
def test_normalize_amount_accepts(raw, expected):
    assert normalize_amount(raw) == expected


@pytest.mark.parametrize("raw", [
    "",
    "abc",
    "0",
    "000",
    "987654321",      # mobile
    "56987654321",    # country code + mobile
    "123456789",      # 9 digits, looks like an ID
])
def test_normalize_amount_rejects(raw):
    assert normalize_amount(raw) is None


# ─── AmountExtractor ──────────────────────────────────────────────────────────

def test_slash_pair_sets_paid_and_expected(extractor):
    amounts = extractor.extract("Clustoid (25/50)")
    assert amounts.amount_paid == 25000
    assert amounts.amount_expected == 50000


def test_paren_with_pagado_sets_both(extractor):
    amounts = extractor.extract("clustoid (50 pagado)")
    assert amounts.amount_expected == 50000
    assert amounts.amount_paid == 50000


def test_paren_sets_expected_only(extractor):
    amounts = extractor.extract("control (40)")
    assert amounts.amount_expected == 40000
    assert amounts.amount_paid is None


def test_paren_drops_date_fragment(extractor):
    amounts = extractor.extract("consulta (03-10 40)")
    assert amounts.amount_expected == 40000


def test_paren_rejects_phone_number(extractor):
    amounts = extractor.extract("consulta (987654321)")
    assert amounts.amount_expected is None
    assert amounts.amount_paid is None


def test_typo_shape_keeps_last_two_digits(extractor):
    assert extractor.extract("clustoid50)").amount_expected == 50000
    assert extractor.extract("dosis x1250)").amount_expected == 50000


def test_ml_thousand_fallback():
    amounts = AmountAccumulator()
    apply_typo_and_ml_fallback("0,5ml(30 mil", amounts)
    assert amounts.amount_expected == 30000


def test_keyword_fallback_beats_trailing_number(extractor):
    amounts = extractor.extract("vacuna 45 juan 30")
    assert amounts.amount_expected == 45000


def test_contextual_fallback(extractor):
    assert extractor.extract("test 60 paciente nuevo").amount_expected == 60000
    assert extractor.extract("test de parche 35 maria").amount_expected == 35000


def test_trailing_number_fallback(extractor):
    assert extractor.extract("Maria Perez 40").amount_expected == 40000
    assert extractor.extract("Maria Perez 4000").amount_expected is None


def test_pagado_overwrites_paid(extractor):
    amounts = extractor.extract("clustoid (25/50) pagado 50")
    assert amounts.amount_paid == 50000
    assert amounts.amount_expected == 50000


def test_pagado_backfills_expected(extractor):
    amounts = extractor.extract("pagado 30")
    assert amounts.amount_paid == 30000
    assert amounts.amount_expected == 30000


def test_sin_costo_sets_zero_when_nothing_found(extractor):
    amounts = extractor.extract("control S/C")
    assert amounts.amount_expected == 0
    assert amounts.amount_paid == 0


def test_sin_costo_ignored_when_amount_found(extractor):
    amounts = extractor.extract("control sin costo (40)")
    assert amounts.amount_expected == 40000
    assert amounts.amount_paid is None


def test_each_extraction_gets_fresh_accumulator(extractor):
    first = extractor.extract("control (40)")
    second = extractor.extract("nada")
    assert first is not second
    assert second.amount_expected is None


# ─── refine_amounts ───────────────────────────────────────────────────────────

def test_refine_no_show_forces_zero():
    refined = refine_amounts(AmountAccumulator(50000, 50000), "no vino")
    assert refined.amount_paid == 0
    assert refined.amount_expected == 50000


def test_refine_pending_clears_paid():
    refined = refine_amounts(AmountAccumulator(50000, 50000), "confirma hora")
    assert refined.amount_paid is None
    assert refined.amount_expected == 50000


def test_refine_pending_without_paid_falls_through_to_confirmed():
    refined = refine_amounts(AmountAccumulator(50000, None), "confirma, llegó")
    assert refined.amount_paid == 50000


def test_refine_money_confirmed_copies_expected():
    refined = refine_amounts(AmountAccumulator(40000, None), "transferencia ok")
    assert refined.amount_paid == 40000


def test_refine_domicilio_fills_zero_paid():
    refined = refine_amounts(AmountAccumulator(40000, 0), "domicilio")
    assert refined.amount_paid == 40000


def test_refine_domicilio_keeps_existing_paid():
    refined = refine_amounts(AmountAccumulator(40000, 20000), "domicilio")
    assert refined.amount_paid == 20000


def test_refine_does_not_mutate_input():
    original = AmountAccumulator(50000, 50000)
    refine_amounts(original, "no vino")
    assert original.amount_paid == 50000


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
