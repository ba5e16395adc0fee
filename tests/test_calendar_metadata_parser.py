"""
Tests for the end-to-end calendar metadata parser
"""

import pytest
import sys
from pathlib import Path

from pydantic import ValidationError

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from calendar_metadata_parser import (
    CATEGORY_CHOICES,
    TREATMENT_STAGE_CHOICES,
    CalendarMetadataParser,
    is_ignored,
    parse,
)


@pytest.fixture
def parser():
    """Parser with built-in defaults (no config file)"""
    return CalendarMetadataParser(config_path="does/not/exist.yaml")


# ─── Reference scenarios ──────────────────────────────────────────────────────

def test_control_sin_costo(parser):
    meta = parser.parse("control", "S/C")
    assert meta.category == "Control médico"
    assert meta.amount_expected == 0
    assert meta.amount_paid == 0
    assert meta.control_included is True
    assert meta.attended is None


def test_mite_vaccine_maintenance_price(parser):
    meta = parser.parse("Vacuna acaros (50)", "")
    assert meta.category == "Tratamiento subcutáneo"
    assert meta.amount_expected == 50000
    assert meta.amount_paid is None
    assert meta.treatment_stage == "Mantención"
    assert meta.dosage_value is None


def test_roxair_default_amount(parser):
    meta = parser.parse("Roxair", "")
    assert meta.category == "Roxair"
    assert meta.amount_expected == 150000
    assert meta.amount_paid is None
    assert meta.attended is None


def test_no_show_without_category(parser):
    meta = parser.parse("Paciente no vino", "")
    assert meta.category is None
    assert meta.attended is False
    assert meta.amount_paid == 0
    assert meta.amount_expected is None


def test_slash_pair_in_subcutaneous_entry(parser):
    meta = parser.parse("Clustoid (25/50)", "")
    assert meta.category == "Tratamiento subcutáneo"
    assert meta.amount_paid == 25000
    assert meta.amount_expected == 50000


# ─── Reconciliation rules ─────────────────────────────────────────────────────

def test_no_show_overrides_paid_amount(parser):
    meta = parser.parse("Clustoid (50 pagado)", "no asiste")
    assert meta.attended is False
    assert meta.amount_paid == 0
    assert meta.amount_expected == 50000


def test_dosage_only_kept_for_subcutaneous(parser):
    meta = parser.parse("consulta dupixent 0,5 ml", "")
    assert meta.category == "Servicio de inyección"
    assert meta.dosage_value is None
    assert meta.dosage_unit is None
    assert meta.treatment_stage is None


def test_dose_threshold_sets_stage(parser):
    meta = parser.parse("clustoid0,3", "")
    assert meta.category == "Tratamiento subcutáneo"
    assert meta.dosage_value == 0.3
    assert meta.dosage_unit == "ml"
    assert meta.treatment_stage == "Inducción"
    assert meta.amount_expected is None


def test_roxair_ready_for_pickup_is_paid(parser):
    meta = parser.parse("Roxair listo", "")
    assert meta.attended is True
    assert meta.amount_expected == 150000
    assert meta.amount_paid == 150000


def test_roxair_paid_keyword_uses_default_price(parser):
    meta = parser.parse("retira roxair (pagado)", "Alondra")
    assert meta.category == "Roxair"
    assert meta.amount_expected == 150000
    assert meta.amount_paid == 150000


def test_roxair_no_show(parser):
    meta = parser.parse("Roxair", "no viene")
    assert meta.attended is False
    assert meta.amount_expected == 150000
    assert meta.amount_paid == 0


def test_domicilio_counts_as_paid(parser):
    meta = parser.parse("Clustoid (45)", "domicilio")
    assert meta.is_domicilio is True
    assert meta.amount_expected == 45000
    assert meta.amount_paid == 45000


def test_pending_confirmation_clears_paid(parser):
    meta = parser.parse("Clustoid (50 pagado)", "confirma")
    assert meta.amount_expected == 50000
    assert meta.amount_paid is None


def test_ignored_event_keeps_other_fields(parser):
    meta = parser.parse("Feriado", "no vino")
    assert meta.category is None
    assert meta.attended is False
    assert meta.amount_paid == 0
    assert is_ignored("Feriado") is True
    assert parser.is_ignored("Clustoid") is False


def test_control_included_is_independent_of_category(parser):
    meta = parser.parse("Clustoid (50)", "control")
    assert meta.category == "Tratamiento subcutáneo"
    assert meta.control_included is True


# ─── Input boundary & record ──────────────────────────────────────────────────

def test_missing_fields_give_empty_record(parser):
    meta = parser.parse(None, None)
    assert meta.category is None
    assert meta.amount_expected is None
    assert meta.amount_paid is None
    assert meta.attended is None
    assert meta.control_included is False
    assert meta.is_domicilio is False


def test_description_only_amount_reaches_trailing_rule(parser):
    assert parser.parse("", "50").amount_expected == 50000
    assert parser.parse(None, "50").amount_expected == 50000


def test_name_and_mobile_summary_has_no_category(parser):
    assert parser.parse("gonzalo calderon 981592361", "").category is None


def test_leading_space_defeats_start_anchor(parser):
    assert parser.parse("10:30 juan perez", "").category == "Consulta médica"
    assert parser.parse(" 10:30 juan perez", "").category is None


def test_overflowing_dose_is_dropped(parser):
    meta = parser.parse("clustoid " + "1" * 400 + ".5 ml", "")
    assert meta.category == "Tratamiento subcutáneo"
    assert meta.dosage_value is None
    assert meta.dosage_unit is None
    assert meta.treatment_stage is None


def test_non_text_input_is_rejected(parser):
    with pytest.raises(ValidationError):
        parser.parse(123, None)


def test_decomposed_accents_are_normalized(parser):
    decomposed = "Paciente llego\u0301"     # o + combining acute
    assert parser.parse(decomposed, "").attended is True


def test_oversized_identifiers_are_not_amounts(parser):
    assert parser.parse("consulta (123456789)", "").amount_expected is None


def test_result_is_immutable(parser):
    meta = parser.parse("control", "S/C")
    with pytest.raises(ValidationError):
        meta.amount_paid = 1000


def test_parse_is_deterministic(parser):
    first = parser.parse("Clustoid 2da dosis 0,2ml (30)", "llegó")
    second = parser.parse("Clustoid 2da dosis 0,2ml (30)", "llegó")
    assert first == second
    assert first.model_dump_json() == second.model_dump_json()


def test_camel_case_dump(parser):
    dumped = parser.parse("control", "S/C").model_dump(by_alias=True)
    assert dumped["amountExpected"] == 0
    assert dumped["controlIncluded"] is True
    assert "isDomicilio" in dumped


def test_module_level_parse():
    meta = parse("Roxair", None)
    assert meta.category == "Roxair"


def test_choices_are_exported():
    assert len(CATEGORY_CHOICES) == 7
    assert set(TREATMENT_STAGE_CHOICES) == {"Mantención", "Inducción"}


# ─── Record invariants across varied entries ─────────────────────────────────

VARIED_ENTRIES = [
    ("control", "S/C"),
    ("Vacuna acaros (50)", "llegó"),
    ("Clustoid (25/50)", "no vino"),
    ("clustoid0,3 (45)", "domicilio"),
    ("consulta dupixent 0,5 ml (30)", "transferencia"),
    ("test de parche 35 maria", None),
    ("Roxair listo", ""),
    ("Roxair", "no asiste"),
    ("lic remota 20 mil", "confirma"),
    ("telemedicina (987654321)", None),
    ("consulta (99999999)", "pagado 99999999"),
    ("1era consulta (40/40)", "asistió"),
    ("Feriado", "no vino"),
    ("juan perez 0,3", "2da dosis"),
    ("", "50"),
    (None, None),
]


@pytest.mark.parametrize("summary, description", VARIED_ENTRIES)
def test_record_invariants(parser, summary, description):
    meta = parser.parse(summary, description)

    for amount in (meta.amount_expected, meta.amount_paid):
        assert amount is None or 0 <= amount <= 100_000_000

    if meta.category != "Tratamiento subcutáneo":
        assert meta.dosage_value is None
        assert meta.dosage_unit is None
        assert meta.treatment_stage is None

    if meta.dosage_value is not None:
        assert meta.dosage_value > 0

    if meta.attended is False:
        assert meta.amount_paid == 0


# ─── Configuration ────────────────────────────────────────────────────────────

def test_roxair_default_from_config(tmp_path):
    config_file = tmp_path / "parser_config.yaml"
    config_file.write_text("amounts:\n  roxair_default: 120000\n", encoding="utf-8")

    meta = CalendarMetadataParser(str(config_file)).parse("Roxair", "")
    assert meta.amount_expected == 120000


def test_missing_config_uses_defaults(parser):
    assert parser.roxair_default_amount == 150000
    assert parser.config["api"]["max_batch_size"] == 500


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
