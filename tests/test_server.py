from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from adapters.accounts import AccountResolver
from adapters.sqlite_storage import SQLiteStorage
from core.config import TenantContext
from core.dispatcher import ActionDispatcher
from core.errors import SendError
from core.models import CorrelationLink, PostedMessage
from core.relay import ChatEventRelay, TrackerEventRelay
from server import create_app

DATA_DIR = Path(__file__).parent / "data"


class FakeSlack:
    def __init__(self) -> None:
        self.posts: list[tuple[str, Optional[str], str]] = []
        self.fail = False

    async def post_message(self, channel: str, thread_id: Optional[str], text: str) -> PostedMessage:
        if self.fail:
            raise SendError("channel_not_found")
        self.posts.append((channel, thread_id, text))
        return PostedMessage(thread_id=thread_id or "1715290000.000100", message_id="1715290000.000100")

    async def get_display_name(self, user_id: str) -> str:
        return "Bob"


class FakeTrello:
    def __init__(self) -> None:
        self.comments: list[tuple[str, str]] = []

    async def post_comment(self, card_id: str, text: str) -> None:
        self.comments.append((card_id, text))


class Harness:
    def __init__(self, tmp_path) -> None:
        self.storage = SQLiteStorage(str(tmp_path / "threadlink.db"))
        self.storage.init_db()
        self.storage.save_account(TenantContext(account_id="acc", name="Acme", chat_channel="C0123456"))
        self.slack = FakeSlack()
        self.trello = FakeTrello()
        dispatcher = ActionDispatcher(links=self.storage, chat=self.slack, tracker=self.trello)
        app = create_app(
            AccountResolver(self.storage),
            ChatEventRelay(links=self.storage, profiles=self.slack, dispatcher=dispatcher),
            TrackerEventRelay(links=self.storage, dispatcher=dispatcher),
        )
        self.client = TestClient(app)


@pytest.fixture()
def harness(tmp_path) -> Harness:
    return Harness(tmp_path)


def _load(name: str) -> dict:
    return json.loads((DATA_DIR / name).read_text(encoding="utf-8"))


def test_default_route(harness: Harness) -> None:
    response = harness.client.get("/")

    assert response.status_code == 200
    assert response.text == "Default"


def test_trello_head_handshake(harness: Harness) -> None:
    assert harness.client.head("/trello-webhook/acc").status_code == 200
    assert harness.client.head("/trello-webhook/unknown").status_code == 404


def test_slack_challenge_is_echoed(harness: Harness) -> None:
    response = harness.client.post("/slack-webhook/acc", json=_load("slack/url-verification.json"))

    assert response.status_code == 200
    assert response.text == "3eZbrw1aBm2rZgRNFdxV2595E9CY3gmdALWMmHkvFXO7tYXAYM8P"


def test_trello_event_starts_thread_and_links(harness: Harness) -> None:
    response = harness.client.post("/trello-webhook/acc", json=_load("trello/card-moved.json"))

    assert response.status_code == 200
    assert response.text == "Success"
    assert harness.slack.posts == [
        ("C0123456", None, "This card has been moved from list Doing to list Done by Alice")
    ]
    assert harness.storage.find_by_tracker_card("abc64ds5ad45s6161d") == "1715290000.000100"


def test_slack_reply_comments_on_linked_card(harness: Harness) -> None:
    harness.storage.create(CorrelationLink(chat_thread_id="1715287188.123456", tracker_card_id="abc64ds5ad45s6161d"))

    response = harness.client.post("/slack-webhook/acc", json=_load("slack/thread-replied.json"))

    assert response.status_code == 200
    assert harness.trello.comments == [("abc64ds5ad45s6161d", "Bob posted in chat\nlgtm")]


def test_slack_bot_reply_is_not_relayed(harness: Harness) -> None:
    harness.storage.create(CorrelationLink(chat_thread_id="1715287188.123456", tracker_card_id="abc64ds5ad45s6161d"))

    response = harness.client.post("/slack-webhook/acc", json=_load("slack/thread-replied-bot.json"))

    assert response.status_code == 200
    assert harness.trello.comments == []


def test_unknown_account_is_404(harness: Harness) -> None:
    response = harness.client.post("/trello-webhook/nope", json=_load("trello/card-moved.json"))

    assert response.status_code == 404


def test_invalid_json_is_400(harness: Harness) -> None:
    response = harness.client.post(
        "/slack-webhook/acc",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400


def test_unrecognized_slack_payload_is_400(harness: Harness) -> None:
    response = harness.client.post("/slack-webhook/acc", json={"type": "app_rate_limited"})

    assert response.status_code == 400


def test_incomplete_trello_event_is_400(harness: Harness) -> None:
    raw = _load("trello/card-moved.json")
    del raw["action"]["display"]["entities"]["listBefore"]

    response = harness.client.post("/trello-webhook/acc", json=raw)

    assert response.status_code == 400
    assert harness.slack.posts == []


def test_send_failure_is_502_without_link(harness: Harness) -> None:
    harness.slack.fail = True

    response = harness.client.post("/trello-webhook/acc", json=_load("trello/card-moved.json"))

    assert response.status_code == 502
    assert harness.storage.find_by_tracker_card("abc64ds5ad45s6161d") is None
