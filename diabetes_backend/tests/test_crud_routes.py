from diabetes_backend.seed_data import DEFAULT_SYMPTOMS


# ---- users ----

def test_create_and_fetch_user(client):
    r = client.post("/api/users", json={"name": "  Siti  ", "age": 45, "sex": "female"})
    assert r.status_code == 201, r.text
    user = r.json()
    assert user["name"] == "Siti"
    assert user["age"] == 45

    r = client.get(f"/api/users/{user['id']}")
    assert r.status_code == 200
    assert r.json()["id"] == user["id"]

    r = client.get("/api/users")
    assert [u["id"] for u in r.json()] == [user["id"]]


def test_create_user_validates_age(client):
    r = client.post("/api/users", json={"name": "Old", "age": 200})
    assert r.status_code == 400
    assert r.json()["code"] == "BAD_REQUEST"


def test_unknown_user_is_404(client):
    r = client.get("/api/users/does-not-exist")
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_delete_user_requires_admin(client, admin_headers, store):
    user = store.create_user("Budi")
    store.save_diagnosis(user.id, "Low", 40.0, [])

    assert client.delete(f"/api/users/{user.id}").status_code == 401

    r = client.delete(f"/api/users/{user.id}", headers=admin_headers)
    assert r.status_code == 204
    assert store.get_user(user.id) is None
    assert store.list_diagnoses(user_id=user.id) == []

    assert client.delete(f"/api/users/{user.id}", headers=admin_headers).status_code == 404


# ---- symptoms ----

def test_list_symptoms(client):
    r = client.get("/api/symptoms")
    assert r.status_code == 200
    assert [s["code"] for s in r.json()] == [code for code, _, _ in DEFAULT_SYMPTOMS]


def test_legacy_symptom_list(client):
    r = client.get("/gejala")
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    assert body["data"][0]["code"] == "G01"
    assert {"id", "code", "label", "weight"} <= set(body["data"][0])


def test_get_symptom(client):
    r = client.get("/api/symptoms/G06")
    assert r.status_code == 200
    assert r.json()["code"] == "G06"
    assert client.get("/api/symptoms/G42").status_code == 404


def test_create_symptom_requires_admin(client):
    r = client.post("/api/symptoms", json={"code": "G07", "label": "Tingling"})
    assert r.status_code == 401
    assert r.json()["code"] == "UNAUTHORIZED"
    assert r.headers["www-authenticate"] == "Bearer"


def test_create_symptom_and_duplicate_conflict(client, admin_headers):
    r = client.post(
        "/api/symptoms",
        json={"code": "G07", "label": "Tingling hands", "weight": 2},
        headers=admin_headers,
    )
    assert r.status_code == 201, r.text
    assert r.json()["weight"] == 2

    r = client.post("/api/symptoms", json={"code": "G07", "label": "Again"}, headers=admin_headers)
    assert r.status_code == 409
    assert r.json()["code"] == "CONFLICT"

    r = client.post("/api/symptoms", json={"code": "G01", "label": "Seeded"}, headers=admin_headers)
    assert r.status_code == 409


def test_update_and_delete_symptom(client, admin_headers):
    r = client.put("/api/symptoms/G05", json={"weight": 4}, headers=admin_headers)
    assert r.status_code == 200
    assert r.json()["weight"] == 4
    assert r.json()["label"]

    assert client.put("/api/symptoms/NOPE", json={"weight": 1}, headers=admin_headers).status_code == 404
    assert client.put("/api/symptoms/G05", json={"weight": 0}, headers=admin_headers).status_code == 400

    assert client.delete("/api/symptoms/G05", headers=admin_headers).status_code == 204
    assert client.get("/api/symptoms/G05").status_code == 404


# ---- diagnoses ----

def _diagnose(client, **body):
    r = client.post("/api/diagnosis/process", json=body)
    assert r.status_code == 201, r.text
    return r.json()


def test_diagnosis_history(client):
    first = _diagnose(client, name="Dewi", symptoms=["G01"])
    second = _diagnose(client, name="Rudi", symptoms=["G02", "G03"])

    r = client.get("/api/diagnoses")
    assert r.status_code == 200
    assert [d["id"] for d in r.json()] == [second["diagnosis_id"], first["diagnosis_id"]]

    r = client.get("/api/diagnoses", params={"user_id": first["user_id"]})
    rows = r.json()
    assert len(rows) == 1
    assert rows[0]["symptom_codes"] == ["G01"]
    assert rows[0]["matched_rule"] == "R5"

    r = client.get(f"/api/diagnoses/{second['diagnosis_id']}")
    assert r.status_code == 200
    assert r.json()["risk_tier"] == "Medium"


def test_delete_diagnosis(client, admin_headers):
    diag = _diagnose(client, symptoms=["G04"])
    path = f"/api/diagnoses/{diag['diagnosis_id']}"

    assert client.delete(path).status_code == 401
    assert client.delete(path, headers=admin_headers).status_code == 204
    assert client.get(path).status_code == 404
    assert client.delete(path, headers=admin_headers).status_code == 404


def test_user_symptoms_are_flattened(client):
    diag = _diagnose(client, name="Ani", symptoms=["G01", "G99"])
    _diagnose(client, name="Other", symptoms=["G02"])

    r = client.get("/api/user-symptoms", params={"user_id": diag["user_id"]})
    assert r.status_code == 200
    rows = r.json()
    assert [row["symptom_code"] for row in rows] == ["G01", "G99"]
    assert rows[0]["label"]
    assert rows[1]["label"] is None
    assert all(row["diagnosis_id"] == diag["diagnosis_id"] for row in rows)

    assert len(client.get("/api/user-symptoms").json()) == 3


# ---- recommendations ----

def test_recommendations_by_tier(client):
    r = client.get("/api/recommendations", params={"risk_tier": "Medium"})
    assert r.status_code == 200
    tiers = {rec["risk_tier"] for rec in r.json()}
    assert tiers <= {None, "Medium"}
    assert "Medium" in tiers

    assert client.get("/api/recommendations", params={"risk_tier": "Extreme"}).status_code == 400


def test_create_and_delete_recommendation(client, admin_headers):
    payload = {"title": "Walk", "description": "Walk 30 minutes a day.", "risk_tier": "Low"}
    assert client.post("/api/recommendations", json=payload).status_code == 401

    r = client.post("/api/recommendations", json=payload, headers=admin_headers)
    assert r.status_code == 201
    rec_id = r.json()["id"]

    low_ids = [rec["id"] for rec in client.get("/api/recommendations", params={"risk_tier": "Low"}).json()]
    assert rec_id in low_ids

    assert client.delete(f"/api/recommendations/{rec_id}", headers=admin_headers).status_code == 204
    assert client.delete(f"/api/recommendations/{rec_id}", headers=admin_headers).status_code == 404


def test_diagnosis_attaches_tier_recommendations(client, admin_headers):
    client.post(
        "/api/recommendations",
        json={"title": "Retina exam", "description": "Book an eye exam.", "risk_tier": "High"},
        headers=admin_headers,
    )
    body = _diagnose(client, symptoms=["G01", "G06"])
    titles = [rec["title"] for rec in body["recommendations"]]
    assert "Retina exam" in titles
