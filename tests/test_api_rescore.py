from starlette.testclient import TestClient

from contextscore.api.app import app


def _payload(**kwargs):
    payload = {
        "places": [
            {"id": "park", "name": "Han River Park", "category": "outdoor", "tags": ["공원"], "base_match_score": 8},
            {"id": "cafe", "name": "Quiet Cafe", "category": "cafe", "tags": ["조용한", "실내"], "base_match_score": 7},
        ],
        "context": {
            "time": "2026-10-17T15:00:00",
            "weather": {"condition": "Light rain", "temperature": 17, "rain_probability": 80},
            "mood": {"label": "tired", "intensity": 4},
        },
    }
    payload.update(kwargs)
    return payload


def test_api_rescore_ranks_and_explains():
    with TestClient(app) as c:
        resp = c.post("/api/rescore", json=_payload(include_explanations=True))
    assert resp.status_code == 200
    data = resp.json()

    # Rain pushes the indoor cafe above the outdoor park.
    assert [item["place"]["id"] for item in data["results"]] == ["cafe", "park"]
    cafe = data["results"][0]
    assert cafe["place"]["name"] == "Quiet Cafe"
    assert cafe["place"]["context_boost"] is True
    assert cafe["explanation"]["has_context_explanation"] is True

    meta = data["meta"]
    assert meta["candidates"] == 2
    assert meta["context_signals"]["weather"] is True
    assert meta["context_signals"]["location"] is False
    assert meta["warnings"] == []
    assert isinstance(meta["timings_ms"]["total"], int)


def test_api_rescore_without_context_keeps_order():
    with TestClient(app) as c:
        resp = c.post("/api/rescore", json=_payload(context=None, max_results=1))
    assert resp.status_code == 200
    data = resp.json()

    assert [item["place"]["id"] for item in data["results"]] == ["park"]
    assert "context_score" not in data["results"][0]["place"]
    assert data["meta"]["warnings"][0]["code"] == "CONTEXT_MISSING"


def test_api_rescore_rejects_disallowed_overrides():
    with TestClient(app) as c:
        resp = c.post("/api/rescore", json=_payload(settings_overrides={"app": {"timezone": "UTC"}}))
    assert resp.status_code == 400
    assert resp.json()["detail"]["code"] == "VALIDATION_ERROR"


def test_api_rescore_applies_allowed_overrides():
    overrides = {"scoring": {"multiplier_bounds": {"min": 0.9, "max": 1.1}}}
    with TestClient(app) as c:
        resp = c.post("/api/rescore", json=_payload(settings_overrides=overrides))
    assert resp.status_code == 200
    for item in resp.json()["results"]:
        assert 0.9 <= item["place"]["context_score"] <= 1.1


def test_api_rescore_validates_payload_shape():
    with TestClient(app) as c:
        resp = c.post("/api/rescore", json={"places": [{"id": "x", "base_match_score": -1}]})
    assert resp.status_code == 422


def test_api_explain_single_place():
    payload = {
        "place": {"id": "c", "category": "cafe", "tags": ["조용한"], "base_match_score": 5},
        "context": {"time": "2026-10-17T15:00:00+09:00", "mood": {"label": "stressed", "intensity": 5}},
    }
    with TestClient(app) as c:
        resp = c.post("/api/explain", json=payload)
    assert resp.status_code == 200
    data = resp.json()
    assert data["place"]["final_match_score"] > 5
    assert "토요일이라 여유롭게 방문하기 좋은 날입니다." in data["explanation"]["context_reasons"]


def test_api_settings_and_labels():
    with TestClient(app) as c:
        settings = c.get("/api/settings").json()
        labels = c.get("/api/labels").json()

    assert settings["scoring"]["multiplier_bounds"] == {"min": 0.5, "max": 2.0}
    assert settings["app"]["timezone"] == "Asia/Seoul"
    assert labels["day_of_week"][0] == "일요일"
    assert labels["weather"]["sunny"] == "맑음"


def test_api_rescore_tolerates_negative_elapsed_minutes():
    context = {"recent_activity": {"category": "cafe", "elapsed_minutes": -10}}
    with TestClient(app) as c:
        resp = c.post("/api/rescore", json=_payload(context=context))
    assert resp.status_code == 200
    results = resp.json()["results"]
    assert len(results) == 2
    cafe = next(item["place"] for item in results if item["place"]["id"] == "cafe")
    # cafe -> cafe without decay
    assert cafe["context_factors"]["activity_score"] == 0.7


def test_api_title_comes_from_settings():
    assert app.title == "ContextScore API"
