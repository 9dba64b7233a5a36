import asyncio

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config import ApiKeyStore
from conftest import FakeCatalog, FakeCompletionClient
from models import DocumentDescriptor
from presenter import BufferedPresenter
from router import router
from session import ChatSession


@pytest.fixture
def app():
    app = FastAPI()
    app.state.key_store = ApiKeyStore("gsk_test")
    app.state.presenter = BufferedPresenter()
    app.state.session = ChatSession(
        client=FakeCompletionClient(answer="*Réponse*"),
        key_store=app.state.key_store,
        catalog=FakeCatalog(
            [DocumentDescriptor(name="a.pdf", path="documents/a.pdf", size=10)]
        ),
        presenter=app.state.presenter,
    )
    asyncio.run(app.state.session.initialize())
    app.include_router(router)
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


def test_chat_returns_events(client):
    resp = client.post("/chat", json={"message": "Bonjour"})

    assert resp.status_code == 200
    events = resp.json()["events"]
    assert [e["kind"] for e in events] == ["message", "typing", "typing_done", "message"]
    assert events[0] == {"kind": "message", "role": "user", "html": "Bonjour"}
    assert events[-1]["html"] == "<em>Réponse</em>"


def test_blank_chat_message_has_no_events(client):
    resp = client.post("/chat", json={"message": "  "})
    assert resp.json() == {"events": []}


def test_chat_requires_message(client):
    assert client.post("/chat", json={}).status_code == 422


def test_clear_history(client, app):
    client.post("/chat", json={"message": "Bonjour"})

    resp = client.delete("/chat/history")

    assert [e["kind"] for e in resp.json()["events"]] == ["reset", "message"]
    assert len(app.state.session.store) == 0


def test_list_documents(client):
    resp = client.get("/documents")
    assert resp.json() == {
        "total": 1,
        "documents": [{"name": "a.pdf", "path": "documents/a.pdf", "url": None, "size": 10}],
    }


def test_api_key_lifecycle(client):
    assert client.get("/config").json() == {"configured": True}

    assert client.delete("/config/api-key").json() == {"configured": False}
    events = client.post("/chat", json={"message": "Bonjour"}).json()["events"]
    assert len(events) == 1
    assert events[0]["role"] == "assistant"

    assert client.put("/config/api-key", json={"api_key": "gsk_new"}).json() == {
        "configured": True
    }


def test_blank_api_key_is_rejected(client):
    resp = client.put("/config/api-key", json={"api_key": "   "})
    assert resp.status_code == 422


def test_failed_send_does_not_leak_into_next_response(client, app):
    app.state.session.client.error = RuntimeError("tokenizer unavailable")
    first = client.post("/chat", json={"message": "Q1"})
    assert first.status_code == 200
    assert first.json()["events"][-1]["html"].startswith("Erreur : tokenizer unavailable.")

    app.state.session.client.error = None
    events = client.post("/chat", json={"message": "Q2"}).json()["events"]

    assert [(e["kind"], e["role"]) for e in events] == [
        ("message", "user"),
        ("typing", None),
        ("typing_done", None),
        ("message", "assistant"),
    ]
    assert events[0]["html"] == "Q2"
    assert [m.role for m in app.state.session.store.messages] == ["user", "user", "assistant"]


def test_server_error_drains_pending_events(app, monkeypatch):
    client = TestClient(app, raise_server_exceptions=False)

    def broken(system_prompt):
        raise RuntimeError("boom")

    with monkeypatch.context() as m:
        m.setattr(app.state.session.store, "build_request_messages", broken)
        assert client.post("/chat", json={"message": "Q1"}).status_code == 500
    assert app.state.presenter.drain() == []

    events = client.post("/chat", json={"message": "Q2"}).json()["events"]
    assert [e["html"] for e in events if e["kind"] == "message"] == ["Q2", "<em>Réponse</em>"]
