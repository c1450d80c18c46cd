import threading
import time

import pytest

import muse


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.requests = []

    def generate_content(self, model, contents):
        self.requests.append((model, contents))
        if self.error is not None:
            raise self.error
        return FakeResponse(self.text)


class FakeClient:
    models = None

    def __init__(self, api_key):
        self.api_key = api_key


def _install_client(monkeypatch, models):
    client_cls = type("Client", (FakeClient,), {"models": models})
    monkeypatch.setattr(muse.genai, "Client", client_cls)


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch):
    for name in muse.API_KEY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_missing_key_returns_distinct_message() -> None:
    assert muse.generate_cosmic_prompt() == muse.MISSING_KEY


def test_success_returns_model_text(monkeypatch) -> None:
    models = FakeModels(text="  Nebula hums a lullaby to sleeping comets.  ")
    _install_client(monkeypatch, models)
    monkeypatch.setenv("GEMINI_API_KEY", "k")
    assert muse.generate_cosmic_prompt() == "Nebula hums a lullaby to sleeping comets."
    assert models.requests == [(muse.MODEL, muse.PROMPT)]


def test_empty_response_returns_void_message(monkeypatch) -> None:
    _install_client(monkeypatch, FakeModels(text=None))
    assert muse.generate_cosmic_prompt(api_key="k") == muse.EMPTY_RESPONSE


def test_failure_maps_to_fallback(monkeypatch) -> None:
    _install_client(monkeypatch, FakeModels(error=ConnectionError("offline")))
    assert muse.generate_cosmic_prompt(api_key="k") == muse.SILENT_STARS


def test_api_key_fallback_variable(monkeypatch) -> None:
    monkeypatch.setenv("API_KEY", "legacy")
    assert muse.get_api_key() == "legacy"


def test_requester_ignores_overlapping_requests() -> None:
    release = threading.Event()
    results = []

    def slow():
        release.wait(5)
        return "done"

    requester = muse.MuseRequester(results.append, slow)
    assert requester.request()
    assert requester.pending
    assert not requester.request()

    release.set()
    deadline = time.monotonic() + 5
    while requester.pending and time.monotonic() < deadline:
        time.sleep(0.01)
    assert results == ["done"]
    assert not requester.pending
