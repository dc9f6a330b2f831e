"""
Shared pytest configuration for the notesync test suite.

This file centralizes reusable testing utilities so that:
    • Orchestrator and store tests use deterministic in-memory clients
    • No test ever sleeps or touches the network
    • CLI tests share one CliRunner and one clean environment
"""

import json

import pytest
from typer.testing import CliRunner

from notesync.notion_store import NotionStore
from tests.fixtures.mock_firestore import MockNoteSource
from tests.fixtures.mock_notion import MockNotionClient

DATABASE_ID = "db-123"

CONFIG_KEYS = (
    "NOTION_TOKEN",
    "NOTION_DATABASE_ID",
    "FIREBASE_SA_JSON",
    "FIREBASE_UID",
    "NOTION_TITLE_PROP",
    "NOTION_DELETE_MODE",
)


# ============================================================================
# SHARED TEST INFRASTRUCTURE
# ============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provides a fresh Typer CliRunner instance for CLI tests."""
    return CliRunner()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every sync setting from the environment."""
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def full_env(clean_env):
    """A complete, valid configuration in the environment."""
    clean_env.setenv("NOTION_TOKEN", "secret_test")
    clean_env.setenv("NOTION_DATABASE_ID", DATABASE_ID)
    clean_env.setenv("FIREBASE_SA_JSON", json.dumps({"type": "service_account", "project_id": "demo"}))
    return clean_env


# ============================================================================
# DETERMINISTIC MOCK CLIENTS
# ============================================================================


@pytest.fixture
def sleep_calls():
    """Records the delays NotionStore.throttle() asks for."""
    return []


@pytest.fixture
def mock_notion() -> MockNotionClient:
    return MockNotionClient(database_id=DATABASE_ID)


@pytest.fixture
def notion_store(mock_notion, sleep_calls) -> NotionStore:
    """A NotionStore over the in-memory client that never really sleeps."""
    return NotionStore(mock_notion, database_id=DATABASE_ID, sleep=sleep_calls.append)


@pytest.fixture
def dry_run_store(mock_notion, sleep_calls) -> NotionStore:
    return NotionStore(mock_notion, database_id=DATABASE_ID, dry_run=True, sleep=sleep_calls.append)


@pytest.fixture
def note_source() -> MockNoteSource:
    return MockNoteSource()
