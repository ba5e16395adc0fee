"""
Treatment Stage Classifier
==========================
Induction (escalating doses) vs. maintenance (steady monthly dose) for
subcutaneous immunotherapy.

Priority
────────
  1. induction phrasing   "1era dosis", "3ra dosis", "segunda dosis", "primra dosis"
                          wins even when a maintenance cue is also present
  2. maintenance phrasing "mensual", "refuerzo", "(50)", "mantención", "0,5 ml"
  3. dose threshold       only with an extracted dose and no phrase:
                          < 0.5 ml → Inducción, >= 0.5 ml → Mantención
"""

from typing import Optional

from loguru import logger

from event_patterns import (
    HALF_ML_PATTERN,
    INDUCTION_PATTERNS,
    MAINTENANCE_PATTERNS,
    STAGE_INDUCTION,
    STAGE_MAINTENANCE,
    matches_any,
)


MAINTENANCE_DOSE_THRESHOLD = 0.5


def detect_stage_from_text(text: str) -> Optional[str]:
    """Explicit phrasing only; None when the text names no stage."""
    if matches_any(text, INDUCTION_PATTERNS):
        return STAGE_INDUCTION
    if matches_any(text, MAINTENANCE_PATTERNS) or HALF_ML_PATTERN.search(text):
        return STAGE_MAINTENANCE
    return None


def classify_treatment_stage(text: str, dosage_value: Optional[float] = None) -> Optional[str]:
    stage = detect_stage_from_text(text)
    if stage is not None:
        return stage

    if dosage_value is None:
        return None

    stage = STAGE_INDUCTION if dosage_value < MAINTENANCE_DOSE_THRESHOLD else STAGE_MAINTENANCE
    logger.debug(f"[TreatmentStage] {stage} from dose {dosage_value}")
    return stage
