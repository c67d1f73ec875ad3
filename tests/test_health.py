def test_health_reports_database_ok(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_root_message(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "message" in resp.json()
