"""Keyword and regex text analysis: document type, entities, abbreviations, block types.

Pure functions with no I/O; shared by the OCR and structuring adapters.
"""

from __future__ import annotations

import re

from medocr.domain.pipeline.models import BlockType, DocumentType, EntityType, MedicalEntity

MEDICAL_ABBREVIATIONS: dict[str, str] = {
    "BID": "Twice daily",
    "TID": "Three times daily",
    "QID": "Four times daily",
    "PO": "By mouth / Oral",
    "IV": "Intravenous",
    "IM": "Intramuscular",
    "PRN": "As needed",
    "STAT": "Immediately",
    "NPO": "Nothing by mouth",
    "SOB": "Shortness of breath",
    "HTN": "Hypertension",
    "DM": "Diabetes Mellitus",
    "CAD": "Coronary Artery Disease",
    "CHF": "Congestive Heart Failure",
    "CBC": "Complete Blood Count",
    "CMP": "Comprehensive Metabolic Panel",
}

_ABBREVIATION_RE = re.compile(r"\b(" + "|".join(map(re.escape, MEDICAL_ABBREVIATIONS)) + r")\b")

# Drug-like suffixes followed by a dose; ``\b`` after the unit keeps "5 grams" out.
_MEDICATION_RE = re.compile(
    r"\b([A-Z][a-z]+(?:in|ol|ide|ine))\s+(\d+\s*(?:mg|mcg|g|mL))\b",
    re.IGNORECASE,
)

_MARKDOWN_HEADING_RE = re.compile(r"^#{1,6}\s")
_LIST_ITEM_RE = re.compile(r"^[*\-+]\s")
_TABLE_ROW_RE = re.compile(r"\|.*\|")
_CAPITALIZED_RE = re.compile(r"^[A-Z]")


def detect_document_type(text: str) -> DocumentType:
    """Classify by ordered, case-insensitive keyword checks; first match wins."""
    lower = text.lower()
    if "prescription" in lower or "rx:" in lower:
        return DocumentType.PRESCRIPTION
    if "lab results" in lower or "laboratory" in lower:
        return DocumentType.LAB_RESULTS
    if "discharge" in lower and "summary" in lower:
        return DocumentType.DISCHARGE_SUMMARY
    if "soap" in lower or "subjective" in lower:
        return DocumentType.CLINICAL_NOTES
    return DocumentType.UNKNOWN


def extract_entities(text: str) -> list[MedicalEntity]:
    return [
        MedicalEntity(type=EntityType.MEDICATION, name=m.group(1), value=m.group(2))
        for m in _MEDICATION_RE.finditer(text)
    ]


def expand_abbreviations(text: str) -> str:
    """Append ``(Expansion)`` after each whole-word, case-sensitive abbreviation.

    Occurrences already followed by their expansion are left untouched, so
    applying this twice gives the same text as applying it once.
    """

    def _replace(m: re.Match[str]) -> str:
        abbr = m.group(1)
        suffix = f" ({MEDICAL_ABBREVIATIONS[abbr]})"
        if m.string.startswith(suffix, m.end()):
            return abbr
        return abbr + suffix

    return _ABBREVIATION_RE.sub(_replace, text)


def infer_block_type(text: str) -> BlockType:
    if _MARKDOWN_HEADING_RE.search(text):
        return BlockType.HEADING
    if _LIST_ITEM_RE.search(text):
        return BlockType.LIST
    if _TABLE_ROW_RE.search(text):
        return BlockType.TABLE
    if len(text) < 50 and _CAPITALIZED_RE.search(text):
        return BlockType.HEADING
    return BlockType.PARAGRAPH
