from types import SimpleNamespace

import pytest
from flask import Flask

from src.scoring_ledger.scoring_ledger.core.exceptions import StorageError
from src.scoring_ledger.scoring_ledger.scoring.controller import register


@pytest.fixture
def client(engine):
    app = Flask(__name__)
    container = SimpleNamespace(scoring_service=engine.service, condition_service=engine.conditions)
    register(app, container)
    return app.test_client()


def test_calculate_returns_score_result(client):
    resp = client.post(
        "/api/scoring/calculate",
        json={"studentId": 1, "type": "attendance", "week": 1, "data": {"status": "attend"}},
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert body["pointsAdded"] == 10
    assert body["newScore"] == 20
    assert body["processId"]


def test_calculate_validation_error_is_400(client):
    resp = client.post("/api/scoring/calculate", json={"studentId": 1, "type": "exam"})

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_calculate_missing_rule_is_400(make_engine, conditions):
    eng = make_engine(conditions=[conditions[("attendance", None)]])
    eng.students.add(1)
    app = Flask(__name__)
    register(app, SimpleNamespace(scoring_service=eng.service, condition_service=eng.conditions))

    resp = app.test_client().post(
        "/api/scoring/calculate", json={"studentId": 1, "type": "quiz", "week": 1, "data": {"percentage": 50}}
    )

    assert resp.status_code == 400
    assert "No scoring condition" in resp.get_json()["message"]


def test_calculate_unknown_student_is_404(client):
    resp = client.post(
        "/api/scoring/calculate",
        json={"studentId": 77, "type": "attendance", "week": 1, "data": {"status": "attend"}},
    )

    assert resp.status_code == 404


def test_calculate_storage_error_is_500(engine):
    def broken(*args, **kwargs):
        raise StorageError("database unavailable")

    app = Flask(__name__)
    register(app, SimpleNamespace(scoring_service=SimpleNamespace(calculate_score=broken), condition_service=engine.conditions))

    resp = app.test_client().post("/api/scoring/calculate", json={"studentId": 1, "type": "quiz"})

    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Error calculating score"


def test_last_history_found_and_not_found(client):
    client.post(
        "/api/scoring/calculate",
        json={"studentId": 1, "type": "quiz", "week": 2, "data": {"percentage": 80}},
    )

    found = client.post("/api/scoring/history/last", json={"studentId": 1, "type": "quiz", "week": 2}).get_json()
    missing = client.post("/api/scoring/history/last", json={"studentId": 1, "type": "quiz", "week": 9}).get_json()

    assert found["found"] is True
    assert found["history"]["score_added"] == 20
    assert found["history"]["process_week"] == 2
    assert missing == {"success": True, "found": False, "history": None}


def test_conditions_listing(client):
    body = client.get("/api/scoring/conditions").get_json()

    assert body["success"] is True
    assert sorted(c["type"] for c in body["conditions"]) == ["attendance", "homework", "homework", "quiz"]


def test_history_listing(client):
    client.post("/api/scoring/calculate", json={"studentId": 1, "type": "quiz", "week": 1, "data": {"percentage": 50}})
    client.post("/api/scoring/calculate", json={"studentId": 1, "type": "quiz", "week": 2, "data": {"percentage": 80}})

    body = client.post("/api/scoring/history", json={"studentId": 1, "type": "quiz", "limit": 1}).get_json()
    bad = client.post("/api/scoring/history", json={"type": "quiz"})

    assert body["success"] is True
    assert [h["process_week"] for h in body["history"]] == [2]
    assert bad.status_code == 400
