from __future__ import annotations

import random

from fastapi.testclient import TestClient

from guided_chat.api.app import create_app
from guided_chat.config.settings import Settings
from guided_chat.infra.scheduler import ManualScheduler


def _open(client: TestClient, scheduler: ManualScheduler, domain: str) -> str:
    response = client.post(f"/domains/{domain}/open")
    assert response.status_code == 200
    scheduler.run_until_idle()
    return response.json()["conversation_id"]


def _step(client: TestClient, conversation_id: str) -> str | None:
    return client.get(f"/conversations/{conversation_id}").json()["current_flow_step_id"]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == "guided_chat"


def test_correlation_id_is_propagated(client):
    response = client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.headers["X-Correlation-ID"] == "abc-123"

    generated = client.get("/health").headers["X-Correlation-ID"]
    assert generated


def test_domains_listing(client):
    response = client.get("/domains")
    ids = {item["id"] for item in response.json()}
    assert ids == {"insurance", "banking", "booking", "healthcare"}


def test_unknown_domain(client):
    response = client.post("/domains/retail/open")
    assert response.status_code == 404
    assert response.json()["detail"] == "domain_not_found"

    assert client.post("/conversations", json={"domain": "retail"}).status_code == 422


def test_open_domain_shows_typing_then_message(client, api_scheduler):
    response = client.post("/domains/booking/open")
    body = response.json()
    assert body["is_typing"] is True
    assert body["messages"] == []

    api_scheduler.run_until_idle()
    snapshot = client.get(f"/conversations/{body['conversation_id']}").json()
    assert snapshot["is_typing"] is False
    assert len(snapshot["messages"]) == 1
    assert [r["value"] for r in snapshot["messages"][0]["quick_replies"]] == [
        "hotel",
        "flight",
        "package",
    ]


def test_submit_message_advances_flow(client, api_scheduler):
    cid = _open(client, api_scheduler, "insurance")

    response = client.post(f"/conversations/{cid}/messages", json={"content": "887654321"})
    assert response.status_code == 200
    assert response.json()["accepted"] is True
    api_scheduler.run_until_idle()

    snapshot = client.get(f"/conversations/{cid}").json()
    assert snapshot["current_flow_step_id"] == "policy_holder_name"
    assert snapshot["title"] == "887654321"
    assert snapshot["expected_input"]["id"] == "policyHolderName"


def test_invalid_and_empty_messages(client, api_scheduler):
    cid = _open(client, api_scheduler, "insurance")

    invalid = client.post(f"/conversations/{cid}/messages", json={"content": "1234567"})
    assert invalid.status_code == 422
    assert invalid.json()["detail"] == {
        "reason": "invalid",
        "error": "❌ Policy number must be at least 8 digits (currently 7)",
    }

    empty = client.post(f"/conversations/{cid}/messages", json={"content": ""})
    assert empty.status_code == 422
    assert empty.json()["detail"]["reason"] == "empty"


def test_message_to_inactive_conversation(client, api_scheduler):
    first = _open(client, api_scheduler, "insurance")
    created = client.post("/conversations", json={"domain": "banking"})
    assert created.status_code == 201

    response = client.post(f"/conversations/{first}/messages", json={"content": "887654321"})
    assert response.status_code == 409
    assert response.json()["detail"] == "conversation_inactive"


def test_quick_reply_routes_flow(client, api_scheduler):
    cid = _open(client, api_scheduler, "banking")

    response = client.post(f"/conversations/{cid}/quick-replies", json={"reply_id": "fraud"})
    assert response.status_code == 200
    api_scheduler.run_until_idle()
    assert _step(client, cid) == "account_number"

    missing = client.post(f"/conversations/{cid}/quick-replies", json={"reply_id": "nope"})
    assert missing.status_code == 404
    assert missing.json()["detail"] == "quick_reply_not_found"


def test_edit_message(client, api_scheduler):
    cid = _open(client, api_scheduler, "insurance")
    message_id = client.post(
        f"/conversations/{cid}/messages", json={"content": "887654321"}
    ).json()["message_id"]

    response = client.patch(
        f"/conversations/{cid}/messages/{message_id}", json={"content": "887654399"}
    )
    assert response.status_code == 200
    assert response.json()["title"] == "887654399"

    assert client.patch(
        f"/conversations/{cid}/messages/unknown", json={"content": "x"}
    ).status_code == 404


def test_history_select_restart_and_delete(client, api_scheduler):
    first = _open(client, api_scheduler, "healthcare")
    second = client.post("/conversations", json={}).json()["conversation_id"]
    api_scheduler.run_until_idle()

    history = client.get("/conversations", params={"domain": "healthcare"}).json()
    assert [item["id"] for item in history] == [second, first]

    selected = client.post(f"/conversations/{first}/select")
    assert selected.status_code == 200

    restarted = client.post(f"/conversations/{first}/restart").json()
    assert restarted["messages"] == []
    assert restarted["current_flow_step_id"] == "welcome"

    assert client.delete(f"/conversations/{second}").status_code == 204
    assert client.get(f"/conversations/{second}").status_code == 404
    assert client.delete(f"/conversations/{second}").status_code == 404
    assert client.post(f"/conversations/{second}/select").status_code == 404


def test_agent_connection(client, api_scheduler):
    cid = _open(client, api_scheduler, "insurance")

    response = client.post(f"/conversations/{cid}/agents/ins-1/connect")
    assert response.json()["status"] == "connecting"
    api_scheduler.run_until_idle()

    snapshot = client.get(f"/conversations/{cid}").json()
    assert snapshot["agent_connection"]["status"] == "connected"
    assert "Sarah Martinez has joined" in snapshot["messages"][-1]["content"]

    unknown = client.post(f"/conversations/{cid}/agents/ghost/connect").json()
    assert unknown["status"] == "error"


def test_upload_and_send_attachment():
    scheduler = ManualScheduler()
    app = create_app(
        settings=Settings(upload_failure_rate=0.0), scheduler=scheduler, rng=random.Random(3)
    )
    with TestClient(app) as client:
        cid = _open(client, scheduler, "insurance")
        for text in ("887654321", "John Doe"):
            client.post(f"/conversations/{cid}/messages", json={"content": text})
            scheduler.run_until_idle()

        upload = client.post(
            f"/conversations/{cid}/attachments",
            json={"name": "card.png", "size": 2048, "type": "image/png"},
        )
        assert upload.status_code == 202
        file_id = upload.json()["id"]
        scheduler.run_until_idle()
        assert client.get(f"/conversations/{cid}/attachments/{file_id}").json()["status"] == (
            "success"
        )

        response = client.post(
            f"/conversations/{cid}/messages",
            json={"content": "john@example.com", "attachment_ids": [file_id]},
        )
        assert response.status_code == 200
        snapshot = client.get(f"/conversations/{cid}").json()
        sent = next(m for m in snapshot["messages"] if m["id"] == response.json()["message_id"])
        assert sent["attachments"][0]["name"] == "card.png"

        missing = client.post(
            f"/conversations/{cid}/messages",
            json={"content": "x", "attachment_ids": [file_id]},
        )
        assert missing.status_code == 404
        assert missing.json()["detail"] == "attachment_not_found"


def test_rejected_upload_is_reported_in_body(client, api_scheduler):
    cid = _open(client, api_scheduler, "banking")

    response = client.post(
        f"/conversations/{cid}/attachments",
        json={"name": "movie.mp4", "size": 1024, "type": "video/mp4"},
    )

    assert response.status_code == 202
    assert response.json()["status"] == "error"
    assert response.json()["error"].startswith('File type "video/mp4" not supported.')


def test_close_session(client, api_scheduler):
    _open(client, api_scheduler, "insurance")
    client.post("/conversations", json={"domain": "banking"})

    response = client.post("/session/close")

    assert response.json() == {"discarded": 2}
    assert api_scheduler.pending() == 0
    assert client.get("/conversations", params={"domain": "insurance"}).json() == []
