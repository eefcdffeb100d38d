from query_service.core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("QUICKWIT_URL", raising=False)
    monkeypatch.delenv("QUICKWIT_INDEX_ID", raising=False)
    settings = Settings(_env_file=None)

    assert settings.QUICKWIT_URL == "http://localhost:7280"
    assert settings.QUICKWIT_INDEX_ID == "logs"
    assert settings.QUICKWIT_TIMEOUT_SECONDS == 30.0
    assert settings.AI_ANALYZER_TIMEOUT_SECONDS == 180.0
    assert settings.SERVICES_LOOKBACK_HOURS == 24
    assert settings.SERVICES_SCAN_PAGE_SIZE == 500
    assert settings.SERVICES_SCAN_MAX_PAGES == 10


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("QUICKWIT_URL", "http://qw.internal:7280/")
    monkeypatch.setenv("QUICKWIT_INDEX_ID", "otel-logs")
    monkeypatch.setenv("SERVICES_SCAN_MAX_PAGES", "3")
    monkeypatch.setenv("ENVIRONMENT", "local")
    settings = Settings(_env_file=None)

    assert settings.QUICKWIT_INDEX_ID == "otel-logs"
    assert settings.SERVICES_SCAN_MAX_PAGES == 3
    assert settings.is_local is True


def test_is_local_false_when_unset(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    assert Settings(_env_file=None).is_local is False


def test_quickwit_client_from_settings(monkeypatch):
    from query_service.search import service

    monkeypatch.setattr(
        service,
        "settings",
        Settings(_env_file=None, QUICKWIT_URL="http://qw.internal:7280/", QUICKWIT_INDEX_ID="otel-logs"),
    )
    client = service.QuickwitClient.from_settings()

    assert client.search_url == "http://qw.internal:7280/api/v1/otel-logs/search"
    assert client.services_scan_page_size == 500
