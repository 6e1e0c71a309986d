"""HTTP surface tests — FastAPI app built against the bundled surveys.

``TestClient`` is used as a context manager so the lifespan handler runs
and loads the store exactly as in production.
"""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from survey_server.app import create_app
from survey_server.config import ServerSettings, load_settings

SURVEY_DIR = Path(__file__).resolve().parent.parent / "surveys"


@pytest.fixture
def client(tmp_path):
    (tmp_path / "memo.m4a").write_bytes(b"0" * 16)
    settings = ServerSettings(survey_dir=str(SURVEY_DIR), media_dir=str(tmp_path))
    with TestClient(create_app(settings)) as c:
        yield c


def _url(survey_id="daily_mood", suffix=""):
    return f"/api/v1/surveys/{survey_id}{suffix}"


GOOD_DAY = {"mood": 4, "hours_slept": 7.5, "note": "Fine"}


# =====================================================================
# Health and survey definitions
# =====================================================================


class TestSurveyEndpoints:

    def test_health(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"
        assert r.json()["surveys"] >= 1

    def test_list(self, client):
        r = client.get("/api/v1/surveys")
        assert r.status_code == 200
        ids = [s["id"] for s in r.json()]
        assert "daily_mood" in ids

    def test_get_survey(self, client):
        r = client.get(_url())
        assert r.status_code == 200
        body = r.json()
        assert body["id"] == "daily_mood"
        assert body["items"][0]["prompt_type"] == "number_single_choice"
        assert body["items"][0]["display_type"] == "slider"

    def test_unknown_survey(self, client):
        assert client.get(_url("nope")).status_code == 404

    def test_schema(self, client):
        r = client.get(_url(suffix="/schema"))
        assert r.status_code == 200
        schema = {s["name"]: s for s in r.json()}
        assert schema["mood"]["kind"] == "number"
        assert schema["mood_reasons"]["kind"] == "array"
        assert schema["woke_at"]["optional"] is True


# =====================================================================
# Response validation
# =====================================================================


class TestValidateEndpoint:

    def test_valid_response(self, client):
        r = client.post(_url(suffix="/responses/validate"), json={"responses": GOOD_DAY})
        assert r.status_code == 200
        body = r.json()
        assert body["survey_id"] == "daily_mood"
        assert body["values"]["mood"] == 4
        assert body["values"]["hours_slept"] == 7.5
        assert body["statuses"]["mood_reasons"] == "not_displayed"
        assert body["statuses"]["steps"] == "skipped"

    def test_media_answer_resolved(self, client):
        responses = {"mood": 2, "hours_slept": 6, "voice_note": "memo"}
        r = client.post(_url(suffix="/responses/validate"), json={"responses": responses})
        assert r.status_code == 200
        assert r.json()["values"]["voice_note"] == "memo"

    def test_rejected_response(self, client):
        responses = {**GOOD_DAY, "mood": 9}
        r = client.post(_url(suffix="/responses/validate"), json={"responses": responses})
        assert r.status_code == 422
        errors = r.json()["errors"]
        assert errors == [{
            "prompt_id": "mood",
            "kind": "constraint_violation",
            "violation": "unknown_choice_value",
            "message": "The response value '9' is unknown",
        }]

    def test_collect_mode(self, client):
        responses = {"mood": 9, "hours_slept": 30, "voice_note": "missing"}
        r = client.post(
            _url(suffix="/responses/validate"),
            json={"responses": responses, "fail_fast": False},
        )
        assert r.status_code == 422
        kinds = [(e["prompt_id"], e["kind"]) for e in r.json()["errors"]]
        assert kinds == [
            ("mood", "constraint_violation"),
            ("hours_slept", "constraint_violation"),
            ("voice_note", "media_not_found"),
        ]

    def test_unknown_survey(self, client):
        r = client.post(_url("nope", "/responses/validate"), json={"responses": {}})
        assert r.status_code == 404

    def test_malformed_body(self, client):
        r = client.post(_url(suffix="/responses/validate"), json={"answers": {}})
        assert r.status_code == 422


# =====================================================================
# Settings
# =====================================================================


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("SERVER_PORT", "SERVER_CORS_ORIGINS", "SERVER_FAIL_FAST", "SERVER_SURVEY_DIR"):
            monkeypatch.delenv(name, raising=False)
        s = load_settings()
        assert s.port == 8080
        assert s.cors_origins == ["*"]
        assert s.fail_fast is True
        assert s.survey_dir is None

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("SERVER_PORT", "9000")
        monkeypatch.setenv("SERVER_CORS_ORIGINS", "https://a.example, https://b.example")
        monkeypatch.setenv("SERVER_FAIL_FAST", "no")
        monkeypatch.setenv("SERVER_LOG_LEVEL", "debug")
        s = load_settings()
        assert s.port == 9000
        assert s.cors_origins == ["https://a.example", "https://b.example"]
        assert s.fail_fast is False
        assert s.log_level == "DEBUG"

    def test_server_default_policy(self, tmp_path):
        """fail_fast=False in settings applies when the request omits it."""
        settings = ServerSettings(survey_dir=str(SURVEY_DIR), media_dir=str(tmp_path), fail_fast=False)
        with TestClient(create_app(settings)) as c:
            r = c.post(
                _url(suffix="/responses/validate"),
                json={"responses": {"mood": 9, "hours_slept": 30}},
            )
        assert r.status_code == 422
        assert len(r.json()["errors"]) == 2
