"""
Extract text from an offering memorandum (OM) and run the LLM to produce a
SiteExtraction: per-field value, literal source snippet and confidence.

Also hosts the two free-form generation calls (rent comp summary, deal
summary). All three share one call/parse/fail path: any fault is re-raised as
ExtractionFailedError carrying the original reason.
Results are suggestions for a reviewer; nothing here writes to the database.
"""
from __future__ import annotations

import json
import logging
import math
import re
import time
from typing import Any, BinaryIO

from config import Settings
from errors import ExtractionFailedError, ValidationFailedError
from models import (
    NUMERIC_EXTRACTION_FIELDS,
    CompFacts,
    DealSummary,
    ExtractedField,
    FieldKind,
    SiteExtraction,
)

logger = logging.getLogger(__name__)

# ~25k tokens; keeps the prompt inside the model context window
MAX_DOCUMENT_CHARS = 100_000
TRUNCATION_MARKER = "\n\n[Document truncated...]"

EXTRACTION_TEMPERATURE = 0.1
EXTRACTION_MAX_TOKENS = 2048
COMP_SUMMARY_MAX_TOKENS = 200
DEAL_SUMMARY_MAX_TOKENS = 1024

LOW_EMAIL_CONFIDENCE = 0.5
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

PARSE_OM_RULES = """You are a precise data extraction assistant for real estate offering memorandums (OMs) and listing documents.

CRITICAL RULES - READ CAREFULLY:
1. Extract ONLY values that are EXPLICITLY stated in the provided text
2. If a value is not present or unclear, return null - DO NOT GUESS
3. DO NOT use general knowledge, assumptions, or estimates
4. DO NOT infer values from context unless directly stated
5. Provide the exact source snippet where you found each value

CONFIDENCE SCORING:
- 1.0: Exact text match, verbatim from document
- 0.8-0.9: Clear match but reformatted (e.g., "$1,000,000" converted to number)
- 0.6-0.7: Inferred from context with high certainty
- 0.4-0.5: Uncertain, multiple possible interpretations
- <0.4: Very uncertain, user must review carefully

REQUIRED OUTPUT FORMAT:
Return a valid JSON object with this exact structure:
{schema}

EXTRACTION GUIDELINES:
- For property names: Extract from title, header, or explicit "Property Name:" labels
- For addresses: Look for complete street addresses, not just city/state
- For acreage: Look for explicit "acres", "ac", or land size measurements
- For prices: Look for "asking price", "list price", "price", typically with $ symbol
- For broker info: Look in contact sections, often at end of document
- For MUD: Municipal Utility District name if mentioned
- For restrictions: Any deed restrictions, HOA rules, or zoning notes

Remember: When in doubt, return null. User confirmation is required before database storage."""


def _schema_description() -> str:
    lines = []
    for name, info in SiteExtraction.model_fields.items():
        value_hint = "number or null" if name in NUMERIC_EXTRACTION_FIELDS else '"string or null"'
        lines.append(
            f'  "{info.alias}": {{ "value": {value_hint}, "sourceSnippet": "exact text from document", "confidence": 0.0-1.0 }}'
        )
    return "{\n" + ",\n".join(lines) + "\n}"


def build_extraction_prompt(document_text: str) -> str:
    return f"""{PARSE_OM_RULES.format(schema=_schema_description())}

DOCUMENT TEXT TO ANALYZE:
{document_text}

Extract the property information following the rules above. Return ONLY the JSON object, no additional text."""


def build_comp_summary_prompt(comp: CompFacts) -> str:
    facts = json.dumps(comp.model_dump(), indent=2)
    return f"""You are a real estate analyst writing notes on a rental comparable.
Write a 1-2 sentence summary of this comp using ONLY the facts below.
Do not add amenities, ratings, locations or numbers that are not listed. If a value is "?" or null, leave it out.
Return plain text only, no markdown.

Comp facts:
{facts}"""


def build_deal_summary_prompt(snapshot: dict[str, Any]) -> str:
    facts = json.dumps(snapshot, indent=2, default=str)
    return f"""You are a land acquisitions analyst reviewing a development site.
Using ONLY the data below, list the strengths and risks of this deal and write a short overview.
Do not invent market data, comps, or numbers that are not present. Missing data may be noted as a risk.
Return ONLY a JSON object of the form:
{{ "pros": ["..."], "cons": ["..."], "overview": "2-3 sentences" }}

Site data:
{facts}"""


def extract_text_from_pdf(file: BinaryIO) -> str:
    """Extract raw text from a PDF using pypdf. An unreadable PDF is a validation error."""
    from pypdf import PdfReader

    try:
        reader = PdfReader(file)
        parts = []
        for page in reader.pages:
            text = page.extract_text()
            if text:
                parts.append(text)
    except Exception as e:
        logger.error("[intake] PDF parse failed: %s", e)
        raise ValidationFailedError(
            f"Failed to parse PDF: {e}. Ensure the file is a valid PDF."
        ) from e
    return "\n\n".join(parts) if parts else ""


def truncate_document(text: str, max_chars: int = MAX_DOCUMENT_CHARS) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def _strip_code_fence(raw: str) -> str:
    raw = raw.strip()
    if raw.startswith("```"):
        raw = re.sub(r"^```\w*\n?", "", raw)
        raw = re.sub(r"\n?```\s*$", "", raw)
    return raw


# ---- Sanitizing model output ----

def _is_real_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _clamp_confidence(raw: Any) -> float:
    """Numbers clamp into [0, 1]; anything else (strings, bools, NaN) is 0."""
    if not _is_real_number(raw):
        return 0.0
    try:
        confidence = float(raw)
    except OverflowError:
        # Integers past float range still clamp by sign
        return 1.0 if raw > 0 else 0.0
    if math.isnan(confidence):
        return 0.0
    return max(0.0, min(1.0, confidence))


def _to_number(value: Any) -> float | None:
    if _is_real_number(value):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str) and value.strip():
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def sanitize_field(raw: Any, kind: FieldKind) -> ExtractedField:
    """
    Normalize one field of model output into an ExtractedField.

    A missing or malformed field, an unparseable number, or an empty string
    all collapse to the default (value None, confidence 0, no snippet).
    """
    if not isinstance(raw, dict):
        return ExtractedField()

    value = raw.get("value")
    snippet = raw.get("sourceSnippet")
    confidence = _clamp_confidence(raw.get("confidence"))
    source_snippet = snippet if isinstance(snippet, str) and snippet else None

    if kind is FieldKind.NUMBER:
        number = _to_number(value)
        if number is None:
            return ExtractedField()
        return ExtractedField(value=number, source_snippet=source_snippet, confidence=confidence)

    text = str(value).strip() if value is not None else ""
    if not text:
        return ExtractedField()
    return ExtractedField(value=text, source_snippet=source_snippet, confidence=confidence)


def validate_and_sanitize(parsed: dict[str, Any]) -> SiteExtraction:
    """Sanitize every schema field, then cap confidence of a malformed broker email."""
    fields = {}
    for name, info in SiteExtraction.model_fields.items():
        kind = FieldKind.NUMBER if name in NUMERIC_EXTRACTION_FIELDS else FieldKind.TEXT
        fields[name] = sanitize_field(parsed.get(info.alias), kind)
    result = SiteExtraction(**fields)

    email = result.broker_email
    if email.value and not _EMAIL_RE.match(email.value):
        logger.warning("[extract] invalid broker email format: %s", email.value)
        email.confidence = min(email.confidence, LOW_EMAIL_CONFIDENCE)
    return result


def _clean_string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def sanitize_deal_summary(parsed: Any) -> DealSummary:
    """Wrong shapes collapse to empty defaults rather than failing the call."""
    if not isinstance(parsed, dict):
        return DealSummary()
    overview = parsed.get("overview")
    return DealSummary(
        pros=_clean_string_list(parsed.get("pros")),
        cons=_clean_string_list(parsed.get("cons")),
        overview=overview.strip() if isinstance(overview, str) else "",
    )


class SiteExtractor:
    """
    LLM client for OM extraction and summaries. Built once at startup from
    Settings and shared by reference; holds no per-call state.
    """

    def __init__(self, client: Any | None, model: str = "gpt-4o-mini"):
        self._client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings) -> "SiteExtractor":
        if not settings.openai_api_key:
            logger.warning("OPENAI_API_KEY is not set; extraction calls will fail until it is configured.")
            return cls(client=None, model=settings.openai_om_model)
        from openai import OpenAI

        client = OpenAI(api_key=settings.openai_api_key, base_url=settings.openai_base_url)
        return cls(client=client, model=settings.openai_om_model)

    @property
    def configured(self) -> bool:
        return self._client is not None

    def _complete(self, prompt: str, *, temperature: float, max_tokens: int, json_mode: bool) -> str:
        if self._client is None:
            raise ValueError("OPENAI_API_KEY not configured")
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        t0 = time.perf_counter()
        response = self._client.chat.completions.create(**kwargs)
        elapsed = time.perf_counter() - t0
        logger.info("[extract] LLM call duration=%.2fs model=%s", elapsed, self.model)

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise ValueError("No response from model")
        return content

    def _complete_json(self, prompt: str, *, temperature: float, max_tokens: int) -> Any:
        raw = self._complete(prompt, temperature=temperature, max_tokens=max_tokens, json_mode=True)
        return json.loads(_strip_code_fence(raw))

    def extract_site_data(self, document_text: str) -> SiteExtraction:
        """Extract site facts from document text; raises ExtractionFailedError on any fault."""
        try:
            logger.info("[extract] extracting site data from %d characters of text", len(document_text))
            prompt = build_extraction_prompt(truncate_document(document_text))
            parsed = self._complete_json(
                prompt,
                temperature=EXTRACTION_TEMPERATURE,
                max_tokens=EXTRACTION_MAX_TOKENS,
            )
            if not isinstance(parsed, dict):
                raise ValueError("Model response is not a JSON object")
            result = validate_and_sanitize(parsed)
            logger.info("[extract] extracted and validated site data")
            return result
        except Exception as e:
            logger.error("[extract] site data extraction failed: %s", e)
            raise ExtractionFailedError(f"Failed to extract site data: {e}") from e

    def generate_comp_summary(self, comp: CompFacts) -> str:
        """1-2 sentence plain-text summary of a rent comp from the given facts only."""
        try:
            text = self._complete(
                build_comp_summary_prompt(comp),
                temperature=0.3,
                max_tokens=COMP_SUMMARY_MAX_TOKENS,
                json_mode=False,
            )
            return text.strip()
        except Exception as e:
            logger.error("[extract] comp summary failed: %s", e)
            raise ExtractionFailedError(f"Failed to generate comp summary: {e}") from e

    def generate_deal_summary(self, snapshot: dict[str, Any]) -> DealSummary:
        try:
            parsed = self._complete_json(
                build_deal_summary_prompt(snapshot),
                temperature=0.3,
                max_tokens=DEAL_SUMMARY_MAX_TOKENS,
            )
            return sanitize_deal_summary(parsed)
        except Exception as e:
            logger.error("[extract] deal summary failed: %s", e)
            raise ExtractionFailedError(f"Failed to generate deal summary: {e}") from e
