from __future__ import annotations

_OUTPUT_TAIL = "\n\nRaw OCR Text:\n{raw_text}\n\nStructured Output (Markdown):"

PRESCRIPTION_TEMPLATE = (
    "You are a medical AI assistant specializing in prescription analysis.\n"
    "Convert the following raw OCR text from a medical prescription into structured Markdown format.\n\n"
    "Extract and organize:\n"
    "- Patient Information (name, age, ID)\n"
    "- Medications (name, dose, frequency, route, duration)\n"
    "- Doctor Information\n"
    "- Date prescribed" + _OUTPUT_TAIL
)

LAB_RESULTS_TEMPLATE = (
    "You are a medical AI assistant specializing in laboratory results analysis.\n"
    "Convert the following raw OCR text from lab results into structured Markdown format.\n\n"
    "Extract and organize:\n"
    "- Patient Information\n"
    "- Test Names and Values\n"
    "- Reference Ranges\n"
    "- Abnormal Flags (High/Low/Critical)\n"
    "- Test Date" + _OUTPUT_TAIL
)

CLINICAL_NOTES_TEMPLATE = (
    "You are a medical AI assistant specializing in clinical documentation.\n"
    "Convert the following raw OCR text from clinical notes into structured Markdown format.\n\n"
    "Extract and organize using SOAP format:\n"
    "- Subjective (patient complaints, symptoms)\n"
    "- Objective (physical exam findings, vitals)\n"
    "- Assessment (diagnosis, differential)\n"
    "- Plan (treatment, follow-up)" + _OUTPUT_TAIL
)

DEFAULT_TEMPLATE = (
    "You are a medical AI assistant.\n"
    "Convert the following raw OCR text from a medical document into well-structured Markdown format.\n\n"
    "Use appropriate headings (##), lists, and tables to organize the information clearly.\n"
    "Expand common medical abbreviations.\n"
    "Preserve all medical terminology and codes." + _OUTPUT_TAIL
)

TEMPLATES: dict[str, str] = {
    "prescription": PRESCRIPTION_TEMPLATE,
    "lab_results": LAB_RESULTS_TEMPLATE,
    "clinical_notes": CLINICAL_NOTES_TEMPLATE,
}


def select_template(context: str | None) -> str:
    return TEMPLATES.get(context or "", DEFAULT_TEMPLATE)


def build_structuring_prompt(raw_text: str, context: str | None = None) -> str:
    # Only the template is parsed for fields; braces inside raw_text pass through.
    return select_template(context).format(raw_text=raw_text)
