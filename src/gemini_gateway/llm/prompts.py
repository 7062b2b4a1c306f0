"""
Fixed instruction prompts for the two upstream call shapes.

Templates are rendered with Jinja2 so the label is inserted verbatim
(autoescape off: the output is plain text, not HTML).
"""

from jinja2 import Environment, StrictUndefined

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=False)

EXTRACTION_PROMPT = (
    "Extract all text from this image exactly as it appears, including labels, values, and hex codes. "
    "Maintain original formatting and line breaks precisely. Preserve all characters from any language, "
    "including Cyrillic letters like 'С', 'Т', 'О'."
)

_CLASSIFICATION_TEMPLATE = _env.from_string(
    """You are an expert color system analyst. Determine the single most official or widely accepted 6-digit hex code for "{{ label }}".
First, check official standards (Pantone, RAL) or major manufacturer specs. If multiple, pick the most common one.
If no standard, analyze reputable sources and choose the strongest consensus.
For the specific color "White", always return #F0F0F0.
Respond with only the hex code in #XXXXXX format. If you cannot determine reliably, respond with 'N/A'."""
)


def build_extraction_parts(image_base64: str, mime_type: str) -> list[dict]:
    """generateContent parts for an OCR request: instruction, then inline image."""
    return [
        {"text": EXTRACTION_PROMPT},
        {"inlineData": {"mimeType": mime_type, "data": image_base64}},
    ]


def build_classification_parts(label: str) -> list[dict]:
    """generateContent parts for a color lookup."""
    return [{"text": _CLASSIFICATION_TEMPLATE.render(label=label)}]
