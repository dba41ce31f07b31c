"""
Tests for the HTTP trigger surface.
"""

import pytest
from fastapi.testclient import TestClient

from affairs_digest.api import create_app
from affairs_digest.api.app import key_matches
from affairs_digest.config import Config
from conftest import StubDispatcher


def make_client(config, dispatcher):
    return TestClient(create_app(config, dispatcher=dispatcher, schedule=False))


class TestHealthRoute:
    def test_returns_static_text(self, config):
        response = make_client(config, StubDispatcher()).get("/")

        assert response.status_code == 200
        assert response.text == "Current Affairs Service is running!"

    def test_works_with_empty_configuration(self):
        dispatcher = StubDispatcher()
        response = make_client(Config(), dispatcher).get("/")

        assert response.status_code == 200
        assert dispatcher.calls == 0


class TestSendNowRoute:
    def test_correct_key_and_success(self, config):
        dispatcher = StubDispatcher(result=True)
        response = make_client(config, dispatcher).get("/send-now", params={"key": "s3cret"})

        assert response.status_code == 200
        assert response.text == "Email sent successfully!"
        assert dispatcher.calls == 1

    def test_correct_key_and_failure(self, config):
        dispatcher = StubDispatcher(result=False)
        response = make_client(config, dispatcher).get("/send-now", params={"key": "s3cret"})

        assert response.status_code == 500
        assert response.text == "Failed to send email"

    def test_correct_key_and_crash(self, config):
        dispatcher = StubDispatcher(result=RuntimeError("SMTP relay unreachable"))
        response = make_client(config, dispatcher).get("/send-now", params={"key": "s3cret"})

        assert response.status_code == 500
        assert response.text == "Error: SMTP relay unreachable"

    @pytest.mark.parametrize("params", [{"key": "wrong"}, {"key": ""}, {"key": "S3CRET"}, {}])
    def test_bad_or_missing_key_is_rejected(self, config, params):
        dispatcher = StubDispatcher()
        response = make_client(config, dispatcher).get("/send-now", params=params)

        assert response.status_code == 401
        assert response.text == "Unauthorized"
        assert dispatcher.calls == 0

    def test_unset_secret_rejects_everything(self):
        dispatcher = StubDispatcher()
        client = make_client(Config(), dispatcher)

        assert client.get("/send-now").status_code == 401
        assert client.get("/send-now", params={"key": ""}).status_code == 401
        assert dispatcher.calls == 0


def test_key_matches():
    assert key_matches("abc", "abc")
    assert key_matches("ключ", "ключ")
    assert not key_matches("abc", "abcd")
    assert not key_matches(None, "abc")
    assert not key_matches("", "")
    assert not key_matches("abc", None)


def test_lifespan_starts_and_stops_scheduler(config, monkeypatch):
    import affairs_digest.scheduler as scheduler_module

    events = []
    sentinel = object()

    def fake_start(cfg, dispatcher):
        events.append(("start", cfg, dispatcher))
        return sentinel

    def fake_stop(scheduler):
        events.append(("stop", scheduler))

    monkeypatch.setattr(scheduler_module, "start_scheduler", fake_start)
    monkeypatch.setattr(scheduler_module, "stop_scheduler", fake_stop)

    dispatcher = StubDispatcher()
    app = create_app(config, dispatcher=dispatcher, schedule=True)

    with TestClient(app) as client:
        assert client.get("/").status_code == 200
        assert events == [("start", config, dispatcher)]

    assert events[-1] == ("stop", sentinel)


def test_schedule_defaults_to_config(config, monkeypatch):
    import affairs_digest.scheduler as scheduler_module

    started = []
    monkeypatch.setattr(scheduler_module, "start_scheduler", lambda *a: started.append(a))
    config.scheduler.enabled = False

    with TestClient(create_app(config, dispatcher=StubDispatcher())):
        pass

    assert started == []
