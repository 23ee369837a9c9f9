from fastapi.testclient import TestClient

from diabetes_backend.app import create_app
from conftest import make_settings


def test_health(client, store):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "store": store.name}


def test_test_db_connected(client):
    r = client.get("/test-db")
    assert r.status_code == 200
    assert r.json()["database"] == "connected"


def test_test_db_unreachable(client, store, monkeypatch):
    monkeypatch.setattr(store, "ping", lambda: False)
    r = client.get("/test-db")
    assert r.status_code == 503
    assert r.json()["code"] == "SERVICE_UNAVAILABLE"


def test_stats_count_diagnoses_by_tier(client):
    client.post("/api/diagnosis/process", json={"name": "A", "symptoms": ["G01", "G06"]})
    client.post("/api/diagnosis/process", json={"name": "B", "symptoms": ["G01"]})
    client.post("/api/diagnosis/process", json={"symptoms": []})

    r = client.get("/api/stats")
    assert r.status_code == 200
    body = r.json()
    assert body["total_users"] == 2
    assert body["total_diagnoses"] == 3
    assert body["diagnoses_by_tier"] == {"Low": 1, "Medium": 1, "High": 1}


def test_trace_id_is_generated(client):
    r = client.get("/health")
    assert r.headers.get("x-trace-id")


def test_not_found_envelope_carries_trace_id(client):
    r = client.get("/no/such/route", headers={"x-trace-id": "trace-42"})
    assert r.status_code == 404
    body = r.json()
    assert body["code"] == "NOT_FOUND"
    assert body["trace_id"] == "trace-42"


def test_unhandled_error_is_500_envelope(store, monkeypatch):
    app = create_app(store, settings=make_settings())
    client = TestClient(app, raise_server_exceptions=False)

    def explode():
        raise RuntimeError("kaboom")

    monkeypatch.setattr(store, "stats", explode)
    r = client.get("/api/stats")
    assert r.status_code == 500
    body = r.json()
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["message"] == "An unexpected error occurred"


def test_rate_limit_on_diagnosis(store):
    app = create_app(store, settings=make_settings(DIAGNOSIS_RATE_LIMIT="2/minute"))
    client = TestClient(app)
    for _ in range(2):
        assert client.post("/api/diagnosis/process", json={"symptoms": []}).status_code == 201

    r = client.post("/api/diagnosis/process", json={"symptoms": []})
    assert r.status_code == 429
    assert r.json()["code"] == "TOO_MANY_REQUESTS"
    assert r.headers["retry-after"] == "60"

    # other routes are not limited
    assert client.get("/health").status_code == 200


def test_json_log_lines_carry_trace_id():
    import json
    import logging

    from diabetes_backend.middleware.tracing import TRACE_ID_CTX_VAR
    from diabetes_backend.utils.log import JsonFormatter

    record = logging.LogRecord("diabetes", logging.INFO, __file__, 1, {"function": "x", "status": "ok"}, None, None)
    token = TRACE_ID_CTX_VAR.set("t-1")
    try:
        line = json.loads(JsonFormatter().format(record))
    finally:
        TRACE_ID_CTX_VAR.reset(token)
    assert line["level"] == "INFO"
    assert line["message"] == {"function": "x", "status": "ok"}
    assert line["trace_id"] == "t-1"


def test_each_app_keeps_its_own_diagnosis_limit(store):
    strict = TestClient(create_app(store, settings=make_settings(DIAGNOSIS_RATE_LIMIT="2/minute")))
    # built afterwards in the same process
    relaxed = TestClient(create_app(store, settings=make_settings(DIAGNOSIS_RATE_LIMIT="1000/minute")))

    for _ in range(2):
        assert strict.post("/api/diagnosis/process", json={"symptoms": []}).status_code == 201
    assert strict.post("/api/diagnosis/process", json={"symptoms": []}).status_code == 429

    for _ in range(3):
        assert relaxed.post("/api/diagnosis/process", json={"symptoms": []}).status_code == 201


def test_retry_after_follows_the_limit_window(store):
    client = TestClient(create_app(store, settings=make_settings(DIAGNOSIS_RATE_LIMIT="1/hour")))
    assert client.post("/diagnosa", json={"gejala": []}).status_code == 201
    r = client.post("/diagnosa", json={"gejala": []})
    assert r.status_code == 429
    assert r.headers["retry-after"] == "3600"
