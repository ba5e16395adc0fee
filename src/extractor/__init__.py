"""
Extractor package - amount and dosage extraction for clinic calendar entries.

The amount side is a strategy chain (AmountExtractor) followed by a
signal-driven correction (refine_amounts); every amount passes through
normalize_amount.  DosageExtractor reads the administered dose.

Usage
-----
from extractor import AmountExtractor, refine_amounts
amounts = refine_amounts(AmountExtractor().extract(text), text)
"""

from extractor.amount_normalizer import normalize_amount
from extractor.amount_extractor import AmountExtractor
from extractor.amount_refiner import refine_amounts
from extractor.dosage_extractor import DosageExtractor

__all__ = ["normalize_amount", "AmountExtractor", "refine_amounts", "DosageExtractor"]
