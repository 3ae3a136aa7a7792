"""Source selection for OM parsing and the /intake/parse-om endpoint."""
import pytest

from conftest import make_extractor
from errors import ValidationFailedError
from services.intake import parse_document

LISTING_TEXT = (
    "FOR SALE: Porter Road Tract. 10.5 acres at 123 FM 1314, Porter, TX 77365. "
    "Asking $1,000,000. Broker: Dana Broker, dana@landco.com"
)

REPLY = {
    "name": {"value": "Porter Road Tract", "sourceSnippet": "Porter Road Tract", "confidence": 1.0},
    "sizeAcres": {"value": "10.5", "sourceSnippet": "10.5 acres", "confidence": 0.9},
}


def test_raw_text_is_extracted():
    extractor = make_extractor(reply=REPLY)
    result = parse_document(extractor, raw_text=LISTING_TEXT)
    assert result.name.value == "Porter Road Tract"
    assert result.size_acres.value == 10.5


def test_raw_text_wins_over_url():
    extractor = make_extractor(reply=REPLY)
    result = parse_document(extractor, raw_text=LISTING_TEXT, listing_url="https://example.com/listing")
    assert result.name.value == "Porter Road Tract"


def test_url_only_is_not_supported():
    with pytest.raises(ValidationFailedError, match="URL scraping not yet implemented"):
        parse_document(make_extractor(reply=REPLY), listing_url="https://example.com/listing")


@pytest.mark.parametrize("raw_text", [None, "", "   "])
def test_no_source_is_rejected(raw_text):
    with pytest.raises(ValidationFailedError, match="Provide a PDF file"):
        parse_document(make_extractor(reply=REPLY), raw_text=raw_text)


def test_short_text_is_rejected_before_model_call():
    extractor = make_extractor(reply=REPLY)
    with pytest.raises(ValidationFailedError, match="too short"):
        parse_document(extractor, raw_text="10 acres, call me" + " " * 60)
    assert extractor._client.calls == []


def test_parse_om_route_with_raw_text(client):
    from main import app

    app.state.extractor = make_extractor(reply=REPLY)
    res = client.post("/intake/parse-om", data={"rawText": LISTING_TEXT})
    assert res.status_code == 200
    body = res.json()
    assert body["name"] == {"value": "Porter Road Tract", "sourceSnippet": "Porter Road Tract", "confidence": 1.0}
    assert body["brokerEmail"] == {"value": None, "sourceSnippet": None, "confidence": 0.0}


def test_parse_om_route_rejects_non_pdf(client):
    res = client.post("/intake/parse-om", files={"file": ("listing.txt", b"hello", "text/plain")})
    assert res.status_code == 400
    assert res.json()["detail"] == "Only PDF files are allowed"


def test_parse_om_route_rejects_bad_pdf(client):
    res = client.post("/intake/parse-om", files={"file": ("om.pdf", b"not really a pdf", "application/pdf")})
    assert res.status_code == 400
    assert res.json()["detail"].startswith("Failed to parse PDF")


def test_parse_om_route_without_input(client):
    res = client.post("/intake/parse-om", data={})
    assert res.status_code == 400


def test_parse_om_route_surfaces_model_failure(client):
    from main import app

    app.state.extractor = make_extractor(error=RuntimeError("API Error"))
    res = client.post("/intake/parse-om", data={"rawText": LISTING_TEXT})
    assert res.status_code == 500
    assert "API Error" in res.json()["detail"]
