"""Tests for per-field sanitizing and the broker email rule."""
import math

import pytest

from models import ExtractedField, FieldKind, SiteExtraction
from om_extract import sanitize_field, validate_and_sanitize


def _is_default(field: ExtractedField) -> bool:
    return field.value is None and field.confidence == 0 and field.source_snippet is None


# ---- confidence ----

@pytest.mark.parametrize(
    "raw,expected",
    [(0.85, 0.85), (1.7, 1.0), (-0.3, 0.0), (1, 1.0), (0, 0.0), (10**400, 1.0), (-(10**400), 0.0)],
)
def test_confidence_clamps_into_unit_interval(raw, expected):
    field = sanitize_field({"value": "x", "confidence": raw}, FieldKind.TEXT)
    assert field.confidence == expected


@pytest.mark.parametrize("raw", ["0.9", True, None, [0.5], float("nan")])
def test_non_numeric_confidence_is_zero(raw):
    field = sanitize_field({"value": "x", "confidence": raw}, FieldKind.TEXT)
    assert field.value == "x"
    assert field.confidence == 0.0


# ---- text ----

@pytest.mark.parametrize("raw", [None, "not a dict", 42, ["value"], {}])
def test_missing_or_malformed_field_is_default(raw):
    assert _is_default(sanitize_field(raw, FieldKind.TEXT))


@pytest.mark.parametrize("value", [None, "", "   "])
def test_empty_text_is_default_even_with_confidence(value):
    field = sanitize_field({"value": value, "sourceSnippet": "s", "confidence": 0.9}, FieldKind.TEXT)
    assert _is_default(field)


def test_text_value_is_stringified_and_trimmed():
    field = sanitize_field({"value": "  Porter, TX ", "sourceSnippet": "Porter, TX", "confidence": 1}, FieldKind.TEXT)
    assert field.value == "Porter, TX"
    assert field.source_snippet == "Porter, TX"

    field = sanitize_field({"value": 77365, "confidence": 0.8}, FieldKind.TEXT)
    assert field.value == "77365"


def test_empty_snippet_becomes_none():
    field = sanitize_field({"value": "x", "sourceSnippet": "", "confidence": 0.5}, FieldKind.TEXT)
    assert field.source_snippet is None


@pytest.mark.parametrize("snippet", [{"text": "10 AC"}, ["10 AC"], 10.5])
def test_non_string_snippet_is_dropped(snippet):
    field = sanitize_field({"value": "10 AC", "sourceSnippet": snippet, "confidence": 0.8}, FieldKind.TEXT)
    assert field.value == "10 AC"
    assert field.source_snippet is None


def test_oversized_number_does_not_fail_extraction():
    result = validate_and_sanitize(
        {
            "sizeAcres": {"value": 10**400, "sourceSnippet": "huge", "confidence": 0.9},
            "city": {"value": "Porter", "sourceSnippet": "Porter", "confidence": 10**400},
        }
    )
    assert result.size_acres.value is None
    assert result.size_acres.confidence == 0
    assert result.city.value == "Porter"
    assert result.city.confidence == 1.0


# ---- numbers ----

@pytest.mark.parametrize(
    "value,expected",
    [(10.5, 10.5), (12, 12.0), ("1000000", 1_000_000.0), (" 4.25 ", 4.25)],
)
def test_numeric_values_convert_to_float(value, expected):
    field = sanitize_field({"value": value, "sourceSnippet": "s", "confidence": 0.8}, FieldKind.NUMBER)
    assert isinstance(field.value, float)
    assert field.value == expected
    assert field.confidence == 0.8


@pytest.mark.parametrize(
    "value",
    ["ten acres", "", "  ", None, True, float("nan"), math.inf, [1], {"n": 1}, 10**400, -(10**400), "1e400"],
)
def test_unconvertible_number_is_full_default(value):
    field = sanitize_field({"value": value, "sourceSnippet": "s", "confidence": 0.95}, FieldKind.NUMBER)
    assert _is_default(field)


# ---- validator ----

def test_validator_defaults_every_missing_field():
    result = validate_and_sanitize({})
    assert isinstance(result, SiteExtraction)
    for name in SiteExtraction.model_fields:
        assert _is_default(getattr(result, name)), name


def test_validator_reads_camel_case_keys():
    result = validate_and_sanitize(
        {
            "addressLine1": {"value": "123 Main St", "sourceSnippet": "123 Main St", "confidence": 1.0},
            "sizeAcres": {"value": "10.5", "sourceSnippet": "10.5 AC", "confidence": 0.9},
            "deedRestrictionsText": {"value": "No mobile homes", "confidence": 0.6},
        }
    )
    assert result.address_line1.value == "123 Main St"
    assert result.size_acres.value == 10.5
    assert result.deed_restrictions_text.value == "No mobile homes"


def test_invalid_broker_email_confidence_is_capped():
    result = validate_and_sanitize(
        {"brokerEmail": {"value": "invalid-email", "sourceSnippet": "invalid-email", "confidence": 0.9}}
    )
    assert result.broker_email.value == "invalid-email"
    assert result.broker_email.confidence <= 0.5


def test_valid_broker_email_confidence_unchanged():
    result = validate_and_sanitize(
        {"brokerEmail": {"value": "a@b.com", "sourceSnippet": "a@b.com", "confidence": 0.9}}
    )
    assert result.broker_email.confidence == 0.9


def test_email_cap_never_raises_confidence():
    result = validate_and_sanitize({"brokerEmail": {"value": "nope", "confidence": 0.2}})
    assert result.broker_email.confidence == 0.2


def test_serializes_with_camel_case_aliases():
    result = validate_and_sanitize({"brokerEmail": {"value": "a@b.com", "sourceSnippet": "a@b.com", "confidence": 0.9}})
    body = result.model_dump(by_alias=True)
    assert body["brokerEmail"] == {"value": "a@b.com", "sourceSnippet": "a@b.com", "confidence": 0.9}
    assert "addressLine1" in body
