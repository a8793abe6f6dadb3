import pytest

from conftest import register, run, seed_report


def contribute(client, headers, report_id, **body):
    payload = {"amount": 10, "name": "Neighbour"}
    payload.update(body)
    r = client.post(f"/reports/{report_id}/contributions", json=payload, headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_contributions_toward_my_reports(client, db, citizen):
    principal_id, headers = citizen
    mine = seed_report(db, profile_id=principal_id, location_string="Elm St")
    theirs = seed_report(db, profile_id="someone-else")

    _, donor = register(client, email="donor@example.com")
    contribute(client, donor, mine["_id"], amount=25.5, transaction_time="2024-03-01T10:00:00Z")
    contribute(client, donor, mine["_id"], amount=4.5, transaction_time="2024-03-02T10:00:00Z")
    contribute(client, donor, theirs["_id"], amount=100)

    r = client.get("/contributions/mine", headers=headers)
    assert r.status_code == 200, r.text
    data = r.json()

    assert data["stats"] == {
        "total_contributions": 2,
        "total_amount": 30.0,
        "verified_contributions": 0,
        "pending_contributions": 2,
    }
    amounts = [t["amount"] for t in data["transactions"]]
    assert amounts == [4.5, 25.5]
    assert data["transactions"][0]["report"]["location_string"] == "Elm St"


def test_verified_contributions_are_counted(client, db, citizen):
    principal_id, headers = citizen
    mine = seed_report(db, profile_id=principal_id)
    contribute(client, headers, mine["_id"], amount=5)
    contribute(client, headers, mine["_id"], amount=7)

    run(db.transactions.update_one({"amount": 7.0}, {"$set": {"transaction_verified": True}}))

    stats = client.get("/contributions/mine", headers=headers).json()["stats"]
    assert stats["verified_contributions"] == 1
    assert stats["pending_contributions"] == 1
    assert stats["total_amount"] == 12.0


def test_no_reports_means_no_contributions(client, citizen):
    _, headers = citizen
    data = client.get("/contributions/mine", headers=headers).json()
    assert data["transactions"] == []
    assert data["stats"]["total_contributions"] == 0


def test_contribution_to_unknown_report(client, citizen):
    _, headers = citizen
    r = client.post("/reports/missing/contributions", json={"amount": 1, "name": "x"}, headers=headers)
    assert r.status_code == 404


@pytest.mark.parametrize("body", [{"amount": 0, "name": "x"}, {"amount": -3, "name": "x"}, {"amount": 3, "name": ""}])
def test_contribution_validation(client, db, citizen, body):
    _, headers = citizen
    report = seed_report(db)
    r = client.post(f"/reports/{report['_id']}/contributions", json=body, headers=headers)
    assert r.status_code == 422


def test_contributions_need_profile(client):
    _, headers = register(client, email="noprofile@example.com")
    r = client.get("/contributions/mine", headers=headers)
    assert r.status_code == 404
