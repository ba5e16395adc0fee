"""
Pattern Library for Clinic Calendar Events
==========================================
Every rule the metadata parser applies lives here as a pre-compiled regex,
grouped by concern.  No logic beyond ``matches_any``.

Text comes from a Chilean allergy clinic's scheduling calendar: Spanish
shorthand, missing accents, glued tokens ("1632control", "clustoid0,3")
and plenty of typos.  Patterns are written to tolerate that.

Groups
──────
  Categories        SUBCUT, TEST, LICENCIA, CONTROL, CONSULTA, ROXAIR,
                    INJECTION  (+ DECIMAL_DOSAGE for the implicit subcut rule)
  Ignore list       IGNORE_PATTERNS
  Attendance        ATTENDED, NOT_ATTENDED, PENDING_CONFIRMATION
  Treatment stage   INDUCTION, MAINTENANCE, HALF_ML
  Dosage            DOSAGE_UNIT_PATTERNS, CLUSTOID_DOSAGE, DECIMAL_STANDALONE
  Money             SIN_COSTO, MONEY_CONFIRMED, DOMICILIO, PHONE_PATTERNS
  Amount context    SLASH_PAIR, PAREN_GROUP, SLASH_FORMAT, PAGADO_KEYWORD, ...

Order inside each tuple does not matter unless noted; order *between*
groups is decided by the classifiers.
"""

import re
from typing import Iterable, Pattern


_I = re.IGNORECASE


def _compile(*patterns: str) -> tuple:
    return tuple(re.compile(p, _I) for p in patterns)


def matches_any(text: str, patterns: Iterable[Pattern]) -> bool:
    """True when at least one pattern is found anywhere in ``text``."""
    return any(p.search(text) for p in patterns)


# ─── Category labels ──────────────────────────────────────────────────────────

CATEGORY_SUBCUT    = "Tratamiento subcutáneo"
CATEGORY_TEST      = "Test y exámenes"
CATEGORY_CONSULTA  = "Consulta médica"
CATEGORY_CONTROL   = "Control médico"
CATEGORY_LICENCIA  = "Licencia médica"
CATEGORY_ROXAIR    = "Roxair"
CATEGORY_INJECTION = "Servicio de inyección"

CATEGORY_CHOICES = (
    CATEGORY_SUBCUT,
    CATEGORY_TEST,
    CATEGORY_CONSULTA,
    CATEGORY_CONTROL,
    CATEGORY_LICENCIA,
    CATEGORY_ROXAIR,
    CATEGORY_INJECTION,
)

STAGE_MAINTENANCE = "Mantención"
STAGE_INDUCTION   = "Inducción"

TREATMENT_STAGE_CHOICES = (STAGE_MAINTENANCE, STAGE_INDUCTION)


# ─── Category keywords ────────────────────────────────────────────────────────

SUBCUT_PATTERNS = _compile(
    r'cl[au]s[i]?t[oau]?id[eo]?',                   # clustoid, clastoid, clusitoid
    r'clutoid',                                      # missing 's'
    r'\bclust',
    r'\bdosis\s+clust',
    r'alxoid',
    r'cluxin',
    r'oral[\s-]?tec',                                # ORAL-TEC
    r'\bvacc?\b',                                    # vac, vacc
    r'\b[áa]caros?\b',                               # mite vaccine
    r'\bvac\.?\s*[aá]caros?\b',                      # "vac. acaros"
    r'vacuna',
    r'\bsubcut[áa]ne[oa]',
    r'inmuno',
    r'\d+[ªº]?\s*(era|ta|da|ra|va)?\s*dosis',        # 2era dosis, 4ta dosis
    r'\bdosis\s+mensual',
    r'v[ie]+n?[ie]?[eo]?r?o?n?\s+a\s+buscar',        # vinieron a buscar
    r'\bmantenci[oó]n\b',
    r'\bse\s+envio\s+dosis\b',
    r'\benviado\b.*\bpagado\b',                      # "enviado (50/ pagado)"
    r'\d+([.,]\d+)?\s*(ml|cc|mg)\b',                 # 0.5ml, 1 cc
)

# A bare decimal with no other signal is read as an unlabeled dose
DECIMAL_DOSAGE_PATTERN = re.compile(r'\b(\d+[.,]\d{1,2})\b')

TEST_PATTERNS = _compile(
    r'\bexam[eé]n(es)?\b',
    r'test\s*(de\s*)?parche',
    r'lectura\s*(de\s*)?parche',
    r'\d+(era|da|ra)?\s*test',                       # 1eratest
    r'lleg[oó]\s*test',                              # llegotest
    r'\d+(era|da|ra)?\s*lectura',                    # 2da lectura
    r'\btest\b',
    r'cut[áa]neo',
    r'ambiental',
    r'panel',
    r'multi\s*tes?t?',
    r'prick',
    r'aeroal[eé]rgenos?',
)

LICENCIA_PATTERNS = _compile(
    r'\blic\b',                                      # "lic remota"
    r'\blicencia\b',
)

CONTROL_PATTERNS = _compile(
    r'\bcontrol\b',
    r'\d+-\d+control',                               # 03-10control
    r'\d{3,4}control',                               # 1632control
    r'\d{1,2}:\d{2}control',                         # 14:56control
    r'confirma\s*control',
    r'\bontrol\b',                                   # dropped leading 'c'
)

CONSULTA_PATTERNS = _compile(
    r'\bconsulta\b',
    r'\bconsuta\b',
    r'\bconsult\b',
    r'\bconsulto\b',
    r'\d+(era|da|ra)?\s*consulta',
    r'\d+(era|da|ra)?\s*consuta',
    r'\d+(era|da|ra)?\s*consult\b',
    r'\d+(era|da|ra)?\s*consulto',
    r'^\d{1,2}:\d{2}\s+[a-záéíóúñ]+\s+[a-záéíóúñ]+',   # "10:30 juan perez"
    r'\btelemedicina\b',
    r'\bdoctoralia\b',
    r'\d+(era|da|ra)?\s*confirma\b',                 # "1era confirma 40"
    r'^\d{1,2}:\d{2}\s*\d+(era|da|ra)?\b',
    r'\breserva\s+[a-záéíóúñ]+',
    r'\breservado\s+\+?56',
    r'\breservado\s+9\d{8}',
    r'\bno\s+contesta\s+reserva\b',
    r'\bretirar\s+documentos\b',
    r'^[a-záéíóúñ]+\s+[a-záéíóúñ]+\s+9\d{8}$',                  # name + mobile
    r'^[a-záéíóúñ]+\s+[a-záéíóúñ]+\s+[a-záéíóúñ]+\s+9\d{8}$',
)

ROXAIR_PATTERNS = _compile(
    r'\broxair\b',
    r'\bretira\s+roxair\b',
    r'\benviar\s+roxair\b',
)

# Take-home medications the patient brings in for administration.
# Checked before SUBCUT so named biologics are not read as immunotherapy.
INJECTION_PATTERNS = _compile(
    r'\bdupixent\b',
    r'\bdacam\b',
    r'\bcidoten\b',
    r'\bbetametasona\b',
    r'\bneurobionta\b',
    r'\blo\s+trae\b',
    r'\btrae\s+(?:su|el)\s+medicamento\b',
    r'\btrae\s+medicamento\b',
    r'\bpaciente\s+trae\b',
    r'\binyecci[oó]n\b',
    r'\badministraci[oó]n\b',
    r'\bim\b',                                       # intramuscular
    r'\btrae\s+el\s+medicamento\b',
)


# ─── Ignore list ──────────────────────────────────────────────────────────────

IGNORE_PATTERNS = _compile(
    r'^recordar\b',
    r'^semana\s+de\s+vacaciones$',
    r'\brecordar\b.*\bdoctor\b',
    r'\bferiado\b',
    r'^vacaciones$',
    r'^elecciones$',
    r'^doctor\s+ocupado$',
    r'\bpublicidad\b',
    r'\bgrabaci[oó]n\s+de\s+videos?\b',
    r'^reuni[oó]n\b',
    r'^jornada\s+de\s+invierno\b',
    r'^reservado$',
    r'\band\b.*\b[a-záéíóúñ]+$',                     # "Jose Martinez and Carlota Arevalo"
)


# ─── Attendance ───────────────────────────────────────────────────────────────

ATTENDED_PATTERNS = _compile(
    r'\blleg[oó]\b',
    r'\basist[ií]o\b',
)

NOT_ATTENDED_PATTERNS = _compile(
    r'\bno\s+viene\b',
    r'\bno\s+vino\b',
    r'\bno\s+asiste\b',
    r'\bno\s+asisti[oó]\b',
    r'\bno\s+podr[áa]\s+asistir\b',
    r'\bno\s+podr[áa]\s+venir\b',
)

# Future attendance confirmed, visit not happened yet
PENDING_CONFIRMATION_PATTERNS = _compile(
    r'\bconfirma\b',
    r'\bconfirmado\b',
    r'\bconfirmada\b',
)

READY_KEYWORD_PATTERN = re.compile(r'\blisto\b', _I)


# ─── Treatment stage ──────────────────────────────────────────────────────────

INDUCTION_PATTERNS = _compile(
    r'\b1[º°]?(?:era|ra|er)?\s*dosis\b',             # 1era, 1ra, 1°
    r'\bprim(?:er)?a?\s*dosis\b',
    r'\bpr[im]+[er]*a\s*dosis\b',                    # primra, prmera
    # "era" widens the upstream calendar rule, which missed "3era dosis"
    r'\b[2-5][º°]?(?:era|da|ra|ta|va|a)?\s*dosis\b', # 2da, 3ra, 3era, 4ta
    r'(?:segunda|tercera|cuarta|quinta)\s*dosis\b',
)

MAINTENANCE_PATTERNS = _compile(
    r'\bmantenci[oó]n\b',
    r'\bmantencio\b',
    r'\bmant\b',
    r'\bmensual\b',
    r'\bvacuna\s+mensual\s+clustoid\b',
    r'\(\s*50\s*\)',                                 # (50) is the maintenance price
    r'\b50\s*(?:$|\))',
    r'\brefuerzo\b',
)

HALF_ML_PATTERN = re.compile(r'0[.,]5(\s*ml)?\b', _I)


# ─── Dosage ───────────────────────────────────────────────────────────────────

# (pattern, unit), tried in order, first hit wins
DOSAGE_UNIT_PATTERNS = (
    (re.compile(r'(\d+(?:[.,]\d+)?)\s*ml\b', _I), "ml"),
    (re.compile(r'(\d+(?:[.,]\d+)?)\s*cc\b', _I), "cc"),
    (re.compile(r'(\d+(?:[.,]\d+)?)\s*mg\b', _I), "mg"),
    (re.compile(r'(\d+[.,]\d+)\s*ml\s*\(', _I), "ml"),  # 0,2ml(
)

CLUSTOID_DOSAGE_PATTERN    = re.compile(r'clust(?:oid)?\s*(0[.,]\d+)', _I)   # clustoid0,3
DECIMAL_STANDALONE_PATTERN = re.compile(r'\b(0[.,]\d+)\b')                   # 0,5


# ─── Money signals ────────────────────────────────────────────────────────────

SIN_COSTO_PATTERN = re.compile(r'\bs/?c\b|sincosto|sin\s*costo', _I)

MONEY_CONFIRMED_PATTERNS = _compile(
    r'\blleg[oó]\b',
    r'\benv[ií][oó]\b',
    r'\btransferencia\b',
    r'\bpagado\b',
)

DOMICILIO_PATTERNS = _compile(
    r'\bdomicilio\b',
    r'\bse\s+la\s+llev[oó]\b',
    r'\bse\s+lo\s+llev[oó]\b',
)

# Matched against the digit-only string, never against raw text
PHONE_PATTERNS = (
    re.compile(r'^9\d{8}$'),                         # Chilean mobile
    re.compile(r'^569\d{8}$'),
    re.compile(r'^56\d{9}$'),
)


# ─── Amount context ───────────────────────────────────────────────────────────

SLASH_PAIR_PATTERN     = re.compile(r'\((\d+)\s*/\s*(\d+)\)')         # (paid/expected)
PAREN_GROUP_PATTERN    = re.compile(r'\(([^)]*?)(?:\)|$)')            # unclosed paren runs to end
SLASH_FORMAT_PATTERN   = re.compile(r'^\d+\s*/\s*\d+$')
PAGADO_KEYWORD_PATTERN = re.compile(r'pagado', _I)
PAGADO_AMOUNT_PATTERN  = re.compile(r'pagado\s*(\d+)', _I)
DATE_FRAGMENT_PATTERN  = re.compile(r'\b\d{1,2}-\d{1,2}\b')           # 03-10
AMOUNT_START_PATTERN   = re.compile(r'^[\d\s,./]*(?:mil)*\b', _I)
AMOUNT_AT_END_PATTERN  = re.compile(r'\s(\d{2,3})\s*$')
THOUSAND_SUFFIX_PATTERN = re.compile(r'(\d+)\s*mil(?:es)?\b', _I)     # 30 mil

TYPO_AMOUNT_PATTERN    = re.compile(r'[a-z](\d+)\)', _I)              # clustoid50)
ML_THOUSAND_PATTERN    = re.compile(r'ml\s*\((\d+\s*mil)', _I)        # 0,5ml(30 mil

PRODUCT_AMOUNT_PATTERN = re.compile(
    r'(?:cl[au]s[i]?t[oau]?id[eo]?|cluxin|alxoid|oral[-\s]?tec|vacuna|[aá]caros?)'
    r'\s+(\d{2,3})\b',
    _I,
)

CONTEXT_AMOUNT_PATTERN = re.compile(
    r'\b(?:test|examen(?:es)?|ambient(?:e|al)|consulta|control|parche)'
    r'\s*(?:de\s+parche)?\s*(\d{2,3})\b',
    _I,
)
