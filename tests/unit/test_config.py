from src.core.config import Config


def test_config_reads_backend_settings(monkeypatch):
    monkeypatch.setenv("BACKEND_URL", "http://inventory.local:3100/")
    monkeypatch.setenv("ADMIN_EMAIL", "ops@example.com")
    monkeypatch.setenv("ADMIN_PASSWORD", "s3cret")
    monkeypatch.setenv("BACKEND_TIMEOUT", "4.5")
    monkeypatch.setenv("BACKEND_REAUTH_ON_401", "true")

    cfg = Config.load()

    assert cfg.backend_url == "http://inventory.local:3100"
    assert cfg.admin_email == "ops@example.com"
    assert cfg.admin_password == "s3cret"
    assert cfg.backend_timeout == 4.5
    assert cfg.reauth_on_401 is True
    assert cfg.validate() == []


def test_config_defaults(monkeypatch):
    for key in (
        "TOKEN_TTL_HOURS",
        "BACKEND_REAUTH_ON_401",
        "DEFAULT_SEARCH_LIMIT",
        "DEFAULT_VECTOR_THRESHOLD",
        "MCP_SERVER_NAME",
    ):
        monkeypatch.delenv(key, raising=False)

    cfg = Config.load()

    assert cfg.token_ttl_hours == 23
    assert cfg.reauth_on_401 is False
    assert cfg.default_search_limit == 10
    assert cfg.default_vector_threshold == 0.7
    assert cfg.mcp_server_name == "ulbra-supply-mcp"


def test_validate_reports_bad_values(monkeypatch):
    monkeypatch.setenv("BACKEND_TIMEOUT", "0")
    monkeypatch.setenv("DEFAULT_VECTOR_THRESHOLD", "1.5")
    monkeypatch.setenv("ADMIN_PASSWORD", "")

    errors = Config.load().validate()

    assert any("BACKEND_TIMEOUT" in e for e in errors)
    assert any("DEFAULT_VECTOR_THRESHOLD" in e for e in errors)
    assert any("ADMIN_PASSWORD" in e for e in errors)
