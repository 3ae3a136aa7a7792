from config import DEFAULT_ALLOWED_ORIGINS, Settings


def test_settings_defaults():
    s = Settings.from_env({})
    assert s.openai_api_key == ""
    assert s.ai_enabled is False
    assert s.openai_om_model == "gpt-4o-mini"
    assert s.openai_base_url is None
    assert s.http_timeout == 10.0
    assert s.max_upload_bytes == 10 * 1024 * 1024
    assert s.allowed_origins == DEFAULT_ALLOWED_ORIGINS


def test_settings_from_env_values():
    s = Settings.from_env(
        {
            "OPENAI_API_KEY": " sk-test ",
            "OPENAI_BASE_URL": "https://api.groq.com/openai/v1",
            "OPENAI_OM_MODEL": "llama-3.1-70b",
            "ENRICHMENT_HTTP_TIMEOUT": "4.5",
            "MAX_UPLOAD_BYTES": "1024",
            "ALLOWED_ORIGINS": "https://a.example, https://b.example,",
        }
    )
    assert s.openai_api_key == "sk-test"
    assert s.ai_enabled is True
    assert s.openai_base_url == "https://api.groq.com/openai/v1"
    assert s.openai_om_model == "llama-3.1-70b"
    assert s.http_timeout == 4.5
    assert s.max_upload_bytes == 1024
    assert s.allowed_origins == ["https://a.example", "https://b.example"]


def test_bad_numbers_fall_back_to_defaults():
    s = Settings.from_env({"ENRICHMENT_HTTP_TIMEOUT": "soon", "MAX_UPLOAD_BYTES": "big"})
    assert s.http_timeout == 10.0
    assert s.max_upload_bytes == 10 * 1024 * 1024


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["openai_configured"] is False
