"""Debounced header search box."""
import threading

import requests

from pipe_catalog.client import TypeaheadBox
from factories import FakeResponse, payload


class RecordingSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.done = threading.Event()

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        self.done.set()
        if self.error is not None:
            raise self.error
        return self.response or FakeResponse(payload("Peterson"))


class GatedSession:
    """Holds each request open until the test releases its text."""

    def __init__(self, responses):
        self.responses = responses
        self.started = {q: threading.Event() for q in responses}
        self.gates = {q: threading.Event() for q in responses}

    def get(self, url, params=None, timeout=None):
        q = params["q"]
        self.started[q].set()
        self.gates[q].wait(5)
        return FakeResponse(self.responses[q])

    def release(self, q):
        self.gates[q].set()


def make_box(session, **kw):
    kw.setdefault("delay", 0.05)
    return TypeaheadBox(base_url="http://catalog.test/", session=session, **kw)


def test_short_text_sends_nothing():
    session = RecordingSession()
    box = make_box(session)
    box.type("p")
    box.wait(2)
    assert session.calls == []
    assert box.show_results is False
    assert box.results == []


def test_debounce_sends_only_the_last_text():
    session = RecordingSession()
    box = make_box(session, delay=0.2)
    for text in ("pe", "pet", "peter"):
        box.type(text)
    box.wait(2)
    assert session.calls == [("http://catalog.test/api/search", {"q": "peter", "limit": "8"})]
    assert box.show_results is True
    assert [r.name for r in box.results] == ["Peterson"]
    assert box.loading is False


def test_on_results_callback():
    seen = []
    box = make_box(RecordingSession(), on_results=seen.append)
    box.type("peterson")
    box.wait(2)
    assert [[r.name for r in batch] for batch in seen] == [["Peterson"]]


def test_clearing_text_hides_dropdown():
    box = make_box(RecordingSession())
    box.type("peterson")
    box.wait(2)
    assert box.show_results is True
    box.type("")
    box.wait(2)
    assert box.show_results is False
    assert box.results == []


def test_error_clears_results():
    session = RecordingSession(error=requests.ConnectionError("refused"))
    box = make_box(session)
    box.results = ["stale"]
    box.type("peterson")
    box.wait(2)
    assert len(session.calls) == 1
    assert box.results == []
    assert box.loading is False


def test_close_cancels_pending_request():
    session = RecordingSession()
    box = make_box(session, delay=0.2)
    box.type("peterson")
    box.close()
    box.wait(2)
    assert session.calls == []
    box.type("savinelli")
    box.wait(2)
    assert session.calls == []


def test_submit_returns_search_page_address():
    box = make_box(RecordingSession(), delay=10)
    box.type("bent pipe")
    box.show_results = True
    assert box.submit() == "/buscar?q=bent+pipe"
    assert box.show_results is False
    box.close()


def test_submit_blank_does_nothing():
    box = make_box(RecordingSession(), delay=10)
    box.type("   ")
    assert box.submit() is None
    box.close()


def test_select_result_resets_box():
    box = make_box(RecordingSession())
    box.type("peterson")
    box.wait(2)
    box.select_result()
    box.wait(2)
    assert box.text == ""
    assert box.show_results is False
    assert box.results == []


def test_late_response_for_older_text_is_ignored():
    session = GatedSession({"slow": payload("Old"), "fresh": payload("New")})
    box = make_box(session)
    box.type("slow")
    assert session.started["slow"].wait(2)
    first = box._timer

    session.release("fresh")
    box.type("fresh")
    box.wait(2)
    assert [r.name for r in box.results] == ["New"]

    session.release("slow")
    first.join(2)
    assert [r.name for r in box.results] == ["New"]
    assert box.show_results is True
    assert box.loading is False


def test_stale_completion_keeps_newer_request_loading():
    session = GatedSession({"slow": payload("Old"), "fresh": payload("New")})
    box = make_box(session)
    box.type("slow")
    assert session.started["slow"].wait(2)
    first = box._timer

    box.type("fresh")
    assert session.started["fresh"].wait(2)
    assert box.loading is True

    session.release("slow")
    first.join(2)
    assert box.loading is True
    assert box.results == []

    session.release("fresh")
    box.wait(2)
    assert box.loading is False
    assert [r.name for r in box.results] == ["New"]


def test_close_clears_loading():
    session = GatedSession({"slow": payload("Old")})
    box = make_box(session)
    box.type("slow")
    assert session.started["slow"].wait(2)
    box.close()
    assert box.loading is False
    session.release("slow")
    box.wait(2)
    assert box.loading is False
    assert box.results == []
