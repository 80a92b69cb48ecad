from storefront.core.config import get_settings


def test_health(client):
    res = client.get("/api/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["uptime_seconds"] >= 0
    assert body["environment"] == get_settings().ENVIRONMENT


def test_env_check_never_returns_values(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "CLERK_SECRET_KEY", "sk_live_very_secret")
    monkeypatch.setattr(get_settings(), "CLERK_WEBHOOK_SECRET", None)

    res = client.get("/api/env-check")

    assert res.status_code == 200
    assert res.json()["has_clerk_secret_key"] is True
    assert res.json()["has_clerk_webhook_secret"] is False
    assert "sk_live_very_secret" not in res.text


def test_debug_reports_set_or_missing(client, monkeypatch):
    monkeypatch.setattr(get_settings(), "SUPABASE_URL", "https://proj.supabase.co")
    monkeypatch.setattr(get_settings(), "CLERK_DOMAIN", None)

    body = client.get("/api/debug").json()

    assert body["supabase_url"] == "SET"
    assert body["clerk_domain"] == "MISSING"
    assert body["database"] in {"postgres", "sqlite"}
    assert "proj.supabase.co" not in str(body)
