"""
Pytest configuration and fixtures for all tests.
"""

import os

import pytest

from affairs_digest.config import Config, set_config
from affairs_digest.delivery import DeliveryResult


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep host config files and AFFAIRS_DIGEST_* variables out of tests."""
    for name in list(os.environ):
        if name.startswith("AFFAIRS_DIGEST_"):
            monkeypatch.delenv(name)
    monkeypatch.delenv("PORT", raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    set_config(None)


@pytest.fixture
def config():
    """A fully populated configuration."""
    return Config(
        api_keys={"gemini": "test-gemini-key"},
        email={
            "sender": "digest@example.com",
            "recipients": "a@example.com, b@example.com",
        },
        smtp={"password": "app-password"},
        server={"trigger_key": "s3cret"},
    )


class StubFetcher:
    def __init__(self, content="1. NATIONAL AFFAIRS\nHeadline: Budget passed\nThe Budget was passed."):
        self.content = content
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if isinstance(self.content, Exception):
            raise self.content
        return self.content


class StubDelivery:
    def __init__(self, success=True):
        self.success = success
        self.calls = []

    def send(self, subject, html_content, text_content, recipients=None):
        self.calls.append(
            {"subject": subject, "html_content": html_content, "text_content": text_content}
        )
        return DeliveryResult(
            success=self.success, error=None if self.success else "relay refused"
        )


class StubDispatcher:
    def __init__(self, result=True):
        self.result = result
        self.calls = 0

    def run(self):
        self.calls += 1
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def stub_fetcher():
    return StubFetcher()


@pytest.fixture
def stub_delivery():
    return StubDelivery()
