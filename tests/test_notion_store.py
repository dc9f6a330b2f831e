"""
Unit tests for NotionStore using the in-memory MockNotionClient.

These tests verify:
    - lookup by firebase_id,
    - create-vs-update outcomes and un-archiving,
    - dry-run never writes,
    - pagination and rate-delay behavior of the full scan.
"""

import pytest

from notesync.notion_store import PAGE_SIZE, RATE_DELAY_SECONDS, NotionStore
from tests.fixtures.mock_notion import MockNotionClient


# =====================================================================
# Lookup
# =====================================================================


def test_find_page_returns_match(notion_store, mock_notion) -> None:
    mock_notion.add_page("other")
    page = mock_notion.add_page("note-1")

    assert notion_store.find_page_by_firebase_id("note-1") == page

    query = mock_notion.method_calls("databases.query")[-1]
    assert query["page_size"] == 1
    assert query["filter"] == {"property": "firebase_id", "rich_text": {"equals": "note-1"}}


def test_find_page_returns_none_when_absent(notion_store) -> None:
    assert notion_store.find_page_by_firebase_id("missing") is None


# =====================================================================
# Upsert
# =====================================================================


def test_unseen_id_creates_exactly_one_page(notion_store, mock_notion) -> None:
    outcome = notion_store.upsert_note("note-1", {"content": "hello"})

    assert outcome == "created"
    pages = mock_notion.pages_for("note-1")
    assert len(pages) == 1
    assert pages[0]["properties"]["Content"]["title"][0]["text"]["content"] == "hello"


def test_second_upsert_updates_in_place(notion_store, mock_notion) -> None:
    notion_store.upsert_note("note-1", {"content": "first"})
    outcome = notion_store.upsert_note("note-1", {"content": "second"})

    assert outcome == "updated"
    pages = mock_notion.pages_for("note-1")
    assert len(pages) == 1
    assert pages[0]["properties"]["Content"]["title"][0]["text"]["content"] == "second"


def test_update_unarchives_page(notion_store, mock_notion) -> None:
    page = mock_notion.add_page("note-1", archived=True)

    assert notion_store.upsert_note("note-1", {"content": "back"}) == "updated"

    update = mock_notion.method_calls("pages.update")[-1]
    assert update["page_id"] == page["id"]
    assert update["archived"] is False
    assert page["archived"] is False


def test_upsert_uses_configured_title_property(mock_notion) -> None:
    store = NotionStore(mock_notion, database_id="db-123", title_property="Name", sleep=lambda s: None)
    store.upsert_note("note-1", {"content": "hi"})

    create = mock_notion.method_calls("pages.create")[-1]
    assert "Name" in create["properties"]


def test_upsert_does_not_throttle_itself(notion_store, sleep_calls) -> None:
    notion_store.upsert_note("note-1", {"content": "x"})
    assert sleep_calls == []


def test_dry_run_reports_outcomes_without_writing(dry_run_store, mock_notion) -> None:
    mock_notion.add_page("existing")

    assert dry_run_store.upsert_note("existing", {"content": "x"}) == "updated"
    assert dry_run_store.upsert_note("new", {"content": "y"}) == "created"

    assert mock_notion.method_calls("pages.create") == []
    assert mock_notion.method_calls("pages.update") == []
    assert mock_notion.pages_for("new") == []


def test_missing_client_raises() -> None:
    store = NotionStore(None, database_id="db-123")
    with pytest.raises(RuntimeError, match="Notion client is not configured"):
        store.upsert_note("note-1", {})


# =====================================================================
# Archive
# =====================================================================


def test_archive_page_sets_flag(notion_store, mock_notion) -> None:
    page = mock_notion.add_page("stale")
    notion_store.archive_page(page["id"])

    assert page["archived"] is True
    assert mock_notion.method_calls("pages.update")[-1] == {"page_id": page["id"], "archived": True}


def test_dry_run_archive_is_a_no_op(dry_run_store, mock_notion) -> None:
    page = mock_notion.add_page("stale")
    dry_run_store.archive_page(page["id"])

    assert page["archived"] is False
    assert mock_notion.method_calls("pages.update") == []


# =====================================================================
# Full scan
# =====================================================================


def test_get_all_pages_follows_cursor(notion_store, mock_notion, sleep_calls) -> None:
    for i in range(PAGE_SIZE * 2 + 5):
        mock_notion.add_page(f"note-{i}")

    pages = notion_store.get_all_pages()

    assert len(pages) == PAGE_SIZE * 2 + 5
    queries = mock_notion.method_calls("databases.query")
    assert len(queries) == 3
    assert "start_cursor" not in queries[0]
    assert queries[1]["start_cursor"] == str(PAGE_SIZE)
    assert all(q["page_size"] == PAGE_SIZE for q in queries)
    assert sleep_calls == [RATE_DELAY_SECONDS] * 3


def test_get_all_pages_on_empty_database(notion_store, mock_notion, sleep_calls) -> None:
    assert notion_store.get_all_pages() == []
    assert len(mock_notion.method_calls("databases.query")) == 1
    assert sleep_calls == [RATE_DELAY_SECONDS]


def test_throttle_uses_rate_delay() -> None:
    delays = []
    store = NotionStore(MockNotionClient(), database_id="db-123", sleep=delays.append, rate_delay=0.5)
    store.throttle()
    assert delays == [0.5]


# =====================================================================
# Construction from settings
# =====================================================================


def test_from_settings_builds_sdk_client(monkeypatch) -> None:
    created = []

    def fake_client(**kwargs):
        created.append(kwargs)
        return MockNotionClient(database_id="db-456")

    monkeypatch.setattr("notesync.notion_store.Client", fake_client)
    settings = {
        "notion_token": "secret_abc",
        "notion_database_id": "db-456",
        "firebase_service_account": {},
        "firebase_uid": None,
        "title_property": "Name",
        "delete_mode": "archive",
    }

    store = NotionStore.from_settings(settings, dry_run=True)

    assert created == [{"auth": "secret_abc"}]
    assert store.database_id == "db-456"
    assert store.title_property == "Name"
    assert store.dry_run is True
    assert store.rate_delay == RATE_DELAY_SECONDS
