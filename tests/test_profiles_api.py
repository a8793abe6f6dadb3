import pytest

from conftest import onboard, register, run

PROFILE = {"name": "Sam", "age": 41, "gender": "male", "profession": "plumber", "role": "Contractor"}


def test_register_login_logout(client):
    principal_id, headers = register(client, email="Sam@Example.com")

    r = client.post("/auth/login", json={"email": "sam@example.com", "password": "secret123"})
    assert r.status_code == 200, r.text
    assert r.json()["principal_id"] == principal_id
    assert r.json()["has_profile"] is False

    assert client.post("/auth/logout", headers=headers).json() == {"ok": True}
    # the token is gone
    assert client.get("/profiles/me", headers=headers).status_code == 401


def test_duplicate_email(client):
    register(client, email="dup@example.com")
    r = client.post("/auth/register", json={"email": "DUP@example.com", "password": "secret123"})
    assert r.status_code == 409


def test_bad_password(client):
    register(client, email="a@example.com")
    r = client.post("/auth/login", json={"email": "a@example.com", "password": "nope-nope"})
    assert r.status_code == 401
    assert r.json()["error"] == "auth_required"


def test_bogus_token(client):
    r = client.get("/profiles/me", headers={"Authorization": "Bearer not-a-session"})
    assert r.status_code == 401


def test_questionnaire_creates_profile(client):
    principal_id, headers = register(client)
    r = client.post("/profiles", json=PROFILE, headers=headers)
    assert r.status_code == 201, r.text
    profile = r.json()
    assert profile["id"] == principal_id
    assert profile["role"] == "Contractor"

    me = client.get("/profiles/me", headers=headers).json()
    assert me["name"] == "Sam"

    login = client.post("/auth/login", json={"email": "citizen@example.com", "password": "secret123"})
    assert login.json()["has_profile"] is True


def test_one_profile_per_principal(client):
    _, headers = register(client)
    client.post("/profiles", json=PROFILE, headers=headers)
    r = client.post("/profiles", json=PROFILE, headers=headers)
    assert r.status_code == 409


@pytest.mark.parametrize(
    "patch, field",
    [
        ({"name": "  "}, "name"),
        ({"age": 0}, "age"),
        ({"age": 151}, "age"),
        ({"age": None}, "age"),
        ({"gender": ""}, "gender"),
        ({"profession": ""}, "profession"),
        ({"role": None}, "role"),
    ],
)
def test_questionnaire_validation(client, patch, field):
    _, headers = register(client)
    r = client.post("/profiles", json={**PROFILE, **patch}, headers=headers)
    assert r.status_code == 422, r.text
    assert r.json()["field"] == field


def test_profile_missing(client):
    _, headers = register(client)
    r = client.get("/profiles/me", headers=headers)
    assert r.status_code == 404
    assert r.json()["error"] == "profile_missing"


def test_profile_mismatch(client):
    _, headers = register(client, email="one@example.com")
    other_id, _ = register(client, email="two@example.com")

    r = client.get(f"/profiles/{other_id}", headers=headers)
    assert r.status_code == 403
    assert r.json()["error"] == "profile_mismatch"

    r = client.get(f"/profiles/{other_id}/reports", headers=headers)
    assert r.status_code == 403


def test_own_profile_by_id(client, citizen):
    principal_id, headers = citizen
    r = client.get(f"/profiles/{principal_id}", headers=headers)
    assert r.status_code == 200
    assert client.get(f"/profiles/{principal_id}/reports", headers=headers).json() == []


def test_update_refreshes_cache(client, citizen, cache, db):
    principal_id, headers = citizen
    assert cache.get(principal_id).name == "Dana"

    r = client.patch("/profiles/me", json={"changes": {"name": " Dana K ", "age": 35}}, headers=headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["source"] == "session"
    assert body["profile"]["name"] == "Dana K"

    assert cache.get(principal_id).age == 35
    stored = run(db.profiles.find_one({"_id": principal_id}))
    assert stored["name"] == "Dana K"
    assert stored["updated_at"] >= stored["created_at"]


def test_update_validation(client, citizen):
    _, headers = citizen
    r = client.patch("/profiles/me", json={"changes": {"age": 200}}, headers=headers)
    assert r.status_code == 422
    assert r.json()["detail"] == "Please enter a valid age between 1 and 150"


def test_logout_clears_cache(client, citizen, cache):
    principal_id, headers = citizen
    client.get("/profiles/me", headers=headers)
    assert cache.get(principal_id) is not None

    client.post("/auth/logout", headers=headers)
    assert cache.get(principal_id) is None


def test_cached_profile_served_without_store(client, citizen, db):
    principal_id, headers = citizen
    run(db.profiles.delete_one({"_id": principal_id}))
    # still served from the cache until sign-out or a mutation
    assert client.get("/profiles/me", headers=headers).status_code == 200


def fallback_profile(principal_id="local-1"):
    return {
        "id": principal_id,
        "name": "Offline Olu",
        "age": 29,
        "gender": "female",
        "profession": "nurse",
        "role": "Citizen",
        "created_at": "2024-01-01T00:00:00",
        "updated_at": "2024-01-01T00:00:00",
    }


def test_resolve_prefers_session(client, citizen):
    _, headers = citizen
    r = client.post("/profiles/resolve", json={"fallback": fallback_profile()}, headers=headers)
    assert r.status_code == 200, r.text
    assert r.json()["source"] == "session"
    assert r.json()["profile"]["name"] == "Dana"


def test_resolve_uses_fallback_without_session(client):
    r = client.post("/profiles/resolve", json={"fallback": fallback_profile()})
    assert r.status_code == 200, r.text
    assert r.json()["source"] == "fallback"
    assert r.json()["profile"]["name"] == "Offline Olu"


def test_resolve_without_anything(client):
    r = client.post("/profiles/resolve", json={})
    assert r.status_code == 401


def test_update_fallback_is_local_only(client, db):
    r = client.patch(
        "/profiles/me",
        json={"changes": {"profession": "doctor"}, "fallback": fallback_profile()},
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["source"] == "fallback"
    assert body["profile"]["profession"] == "doctor"
    assert "locally" in body["notice"]
    assert run(db.profiles.count_documents({})) == 0
