from __future__ import annotations

from vocab_cards.config import DEFAULT_FALLBACK_FILES, client_settings


def test_client_settings_read_environment(monkeypatch):
    monkeypatch.setenv("VOCAB_CARDS_API_BASE_URL", "http://files.local:9000/")
    monkeypatch.setenv("VOCAB_CARDS_TIMEOUT_SEC", "2.5")
    monkeypatch.setenv("VOCAB_CARDS_FALLBACK_FILES", "intro, verbs,,nouns")

    settings = client_settings()

    assert settings.api_base_url == "http://files.local:9000"
    assert settings.timeout_sec == 2.5
    assert settings.fallback_files == ("intro", "verbs", "nouns")


def test_client_settings_defaults(monkeypatch):
    for key in ("VOCAB_CARDS_API_BASE_URL", "VOCAB_CARDS_TIMEOUT_SEC", "VOCAB_CARDS_FALLBACK_FILES"):
        monkeypatch.delenv(key, raising=False)

    settings = client_settings()

    assert settings.api_base_url == "http://localhost:3001"
    assert settings.timeout_sec == 5.0
    assert settings.fallback_files == DEFAULT_FALLBACK_FILES
