import json

from symptom_journal.utils.exceptions import AIServiceError

ANALYSIS = {
    "summary": "Frequent moderate headaches.",
    "urgency": "medium",
    "patterns": ["Headaches on weekdays"],
    "recommendations": ["Keep a sleep log"],
    "doctorNotes": "Headache 5/8 on 2024-01-01.",
}

ENTRY = {"id": "e-1", "date": "2024-01-01", "symptoms": ["Headache"], "severity": 5, "notes": ""}


def test_capability_description(client):
    r = client.get("/api/analyze")
    assert r.status_code == 200
    assert r.json() == {
        "message": "AI Symptom Analysis API",
        "endpoints": {"POST /api/analyze": "Analyze symptom entries and generate insights"},
    }


def test_analyze_returns_model_json(client, fake_ai):
    fake_ai.queue("```json\n" + json.dumps(ANALYSIS) + "\n```")
    r = client.post("/api/analyze", json={"entries": [ENTRY]})
    assert r.status_code == 200, r.text
    assert r.json() == ANALYSIS
    assert '"id": "e-1"' in fake_ai.prompts[0]


def test_analyze_falls_back_on_prose(client, fake_ai):
    fake_ai.queue("Rest and hydrate.")
    r = client.post("/api/analyze", json={"entries": []})
    assert r.status_code == 200
    body = r.json()
    assert body["summary"] == body["doctorNotes"] == "Rest and hydrate."
    assert body["urgency"] == "low"


def test_analyze_rejects_malformed_input(client, fake_ai):
    for payload in ({}, {"entries": "nope"}, {"entries": None}, [ENTRY]):
        r = client.post("/api/analyze", json=payload)
        assert r.status_code == 400
        assert r.json()["error"] == "Invalid entries data"

    r = client.post("/api/analyze", content=b"{not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert fake_ai.prompts == []


def test_analyze_ai_failure_is_500(client, fake_ai):
    fake_ai.queue(AIServiceError("upstream down"))
    r = client.post("/api/analyze", json={"entries": [ENTRY]})
    assert r.status_code == 500
    j = r.json()
    assert j["error"] == "Failed to analyze symptoms"
    assert j["code"] == "INTERNAL_SERVER_ERROR"


def test_strict_mode_rejects_off_schema_output(client, app, fake_ai):
    app.state.settings = app.state.settings.model_copy(update={"analysis_strict": True})
    fake_ai.queue('{"summary": "x", "urgency": "critical", "doctorNotes": "y"}')
    r = client.post("/api/analyze", json={"entries": [ENTRY]})
    assert r.status_code == 500
    assert fake_ai.mime_types == ["application/json"]


def test_duplicate_requests_are_not_coalesced(client, fake_ai):
    fake_ai.queue(json.dumps(ANALYSIS), json.dumps(ANALYSIS))
    for _ in range(2):
        assert client.post("/api/analyze", json={"entries": [ENTRY]}).status_code == 200
    assert len(fake_ai.prompts) == 2


def test_insights_for_stored_entries(client, fake_ai):
    client.post("/api/entries", json={"date": "2024-01-01", "symptoms": ["Headache"], "severity": 5})
    fake_ai.queue("A.\n\nB.\nC.\nD.\nE.\nF.", json.dumps({**ANALYSIS, "urgency": "high"}))

    r = client.post("/api/insights")
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["insights"] == ["A.", "B.", "C.", "D.", "E."]
    assert body["analysis"]["urgency"] == "high"
    assert body["urgency_tone"] == "danger"
    assert "Headache" in fake_ai.prompts[0]


def test_insights_without_entries_skip_ai(client, fake_ai):
    r = client.post("/api/insights")
    assert r.status_code == 200
    assert r.json() == {"insights": [], "analysis": None, "urgency_tone": "ok"}
    assert fake_ai.prompts == []


def test_insights_analysis_failure(client, fake_ai):
    client.post("/api/entries", json={"date": "2024-01-01", "symptoms": ["Fever"], "severity": 3})
    fake_ai.queue("Fever once.", AIServiceError("down"))
    r = client.post("/api/insights")
    assert r.status_code == 500
    assert r.json()["error"] == "Failed to generate AI insights. Please try again."
    assert r.json()["insights"] == ["Fever once."]


def test_analyze_rate_limit_envelope(client, fake_ai):
    fake_ai.queue(*["{}"] * 20)
    for _ in range(20):
        assert client.post("/api/analyze", json={"entries": []}).status_code == 200
    r = client.post("/api/analyze", json={"entries": []})
    assert r.status_code == 429
    j = r.json()
    assert j["code"] == "TOO_MANY_REQUESTS"
    assert "trace_id" in j
    # fixed one-minute window opened by the first request
    assert 50 <= int(r.headers["Retry-After"]) <= 60


def test_analyze_rate_limit_comes_from_settings(app, client, fake_ai):
    app.state.settings = app.state.settings.model_copy(update={"analyze_rate_limit": "2/minute"})
    fake_ai.queue("{}", "{}")
    for _ in range(2):
        assert client.post("/api/analyze", json={"entries": []}).status_code == 200
    assert client.post("/api/analyze", json={"entries": []}).status_code == 429
    assert len(fake_ai.prompts) == 2
