from __future__ import annotations

from medocr.domain.pipeline.classifier import (
    detect_document_type,
    expand_abbreviations,
    extract_entities,
    infer_block_type,
)
from medocr.domain.pipeline.models import BlockType, DocumentType, EntityType


def test_detect_document_type_keywords() -> None:
    assert detect_document_type("Rx: Amoxicillin") == DocumentType.PRESCRIPTION
    assert detect_document_type("LAB RESULTS - CBC panel") == DocumentType.LAB_RESULTS
    assert detect_document_type("Central Laboratory report") == DocumentType.LAB_RESULTS
    assert detect_document_type("Subjective: headache for 3 days") == DocumentType.CLINICAL_NOTES
    assert detect_document_type("hello world") == DocumentType.UNKNOWN


def test_detect_document_type_discharge_requires_both_words() -> None:
    assert detect_document_type("Discharge Summary\nPatient stable") == DocumentType.DISCHARGE_SUMMARY
    assert detect_document_type("Patient discharge planned tomorrow") == DocumentType.UNKNOWN
    assert detect_document_type("Summary of visit") == DocumentType.UNKNOWN


def test_detect_document_type_order_prefers_prescription() -> None:
    # Both keywords present; the earlier rule wins
    assert detect_document_type("Prescription attached to lab results") == DocumentType.PRESCRIPTION


def test_extract_entities_medications() -> None:
    text = "- Amoxicillin 500 mg three times daily\n- Metoprolol 25mg\n- Furosemide 40 mg\n- Water 5 grams"
    entities = extract_entities(text)
    assert [(e.name, e.value) for e in entities] == [
        ("Amoxicillin", "500 mg"),
        ("Metoprolol", "25mg"),
        ("Furosemide", "40 mg"),
    ]
    assert all(e.type == EntityType.MEDICATION for e in entities)


def test_extract_entities_none() -> None:
    assert extract_entities("No medications prescribed.") == []


def test_expand_abbreviations_single_and_idempotent() -> None:
    once = expand_abbreviations("BID")
    assert once == "BID (Twice daily)"
    assert expand_abbreviations(once) == once


def test_expand_abbreviations_whole_word_case_sensitive() -> None:
    text = "Take PO BID. History of HTN and DM. bid, SOBER, PRNX"
    expanded = expand_abbreviations(text)
    assert expanded == (
        "Take PO (By mouth / Oral) BID (Twice daily). "
        "History of HTN (Hypertension) and DM (Diabetes Mellitus). bid, SOBER, PRNX"
    )
    assert expand_abbreviations(expanded) == expanded


def test_infer_block_type() -> None:
    assert infer_block_type("## Medications") == BlockType.HEADING
    assert infer_block_type("- Aspirin 81 mg") == BlockType.LIST
    assert infer_block_type("| Test | Value |") == BlockType.TABLE
    assert infer_block_type("PATIENT INFORMATION") == BlockType.HEADING
    assert infer_block_type("patient reports mild headache") == BlockType.PARAGRAPH
    long_text = "Patient reports intermittent chest pain for the last three weeks without radiation."
    assert infer_block_type(long_text) == BlockType.PARAGRAPH
