"""
notesync/types.py

Centralized type definitions for the Firestore → Notion sync.

This module defines the TypedDicts and Protocols shared by the field mapper,
the Notion store wrapper, the Firestore source, the orchestrator, and the
test doubles. Keeping these types in one place gives:

    • A single source of truth for note and summary schemas
    • Clear contracts between the CLI, orchestrator, and the two stores
    • Easy mocking and dependency injection in tests

When a Firestore field or a Notion property changes, update this file first.
"""

from typing import Any, Dict, List, Literal, Optional, Protocol, TypedDict


# ---------------------------------------------------------------------------
# NoteDocument
# ---------------------------------------------------------------------------
# The raw field map of a Firestore `notes` document.
#
# Every field is optional: documents written by older app versions may lack
# tags, sectionId, or either timestamp. Timestamps arrive as datetimes from
# the Firestore SDK, but exported data may carry {"_seconds": n} maps,
# ISO strings, or epoch milliseconds instead.
# ---------------------------------------------------------------------------
class NoteDocument(TypedDict, total=False):
    uid: str
    content: Any
    tags: Any
    sectionId: Any
    updatedAt: Any
    createdAt: Any


# ---------------------------------------------------------------------------
# SourceRecord
# ---------------------------------------------------------------------------
# One Firestore note as seen by the orchestrator: the document id plus its
# field map. Fetched once per run and never mutated.
# ---------------------------------------------------------------------------
class SourceRecord(TypedDict):
    id: str
    data: NoteDocument


# ---------------------------------------------------------------------------
# UpsertOutcome / SyncStage
# ---------------------------------------------------------------------------
UpsertOutcome = Literal["created", "updated"]

SyncStage = Literal[
    "init",
    "fetch_source",
    "upsert_loop",
    "scan_target",
    "archive_loop",
    "done",
    "failed",
]


# ---------------------------------------------------------------------------
# SyncFailure / SyncSummary
# ---------------------------------------------------------------------------
# The structured summary returned by the orchestrator and printed by the CLI.
# failures is a list (not a count) so callers can see which notes failed and
# in which loop; `failed` carries the count.
# ---------------------------------------------------------------------------
class SyncFailure(TypedDict):
    id: str
    stage: SyncStage
    error: str


class SyncSummary(TypedDict):
    stage: SyncStage
    dry_run: bool
    created: int
    updated: int
    archived: int
    skipped: int
    failed: int
    failures: List[SyncFailure]


# ---------------------------------------------------------------------------
# SyncSettings
# ---------------------------------------------------------------------------
# Parsed environment configuration (see notesync/config.py).
#
# firebase_service_account is the decoded FIREBASE_SA_JSON blob.
# firebase_uid is None when the run covers every user's notes.
# ---------------------------------------------------------------------------
class SyncSettings(TypedDict):
    notion_token: str
    notion_database_id: str
    firebase_service_account: Dict[str, Any]
    firebase_uid: Optional[str]
    title_property: str
    delete_mode: str


# ---------------------------------------------------------------------------
# NotionClientInterface
# ---------------------------------------------------------------------------
# Structural description of the subset of notion_client.Client used by
# NotionStore:
#
#     client.databases.query(database_id=..., filter=..., page_size=..., start_cursor=...)
#     client.pages.create(parent=..., properties=...)
#     client.pages.update(page_id=..., properties=..., archived=...)
#
# The SDK exposes these as endpoint objects, so the Protocol only promises
# the two attributes. The in-memory fake in tests/fixtures satisfies it too.
# ---------------------------------------------------------------------------
class NotionClientInterface(Protocol):
    databases: Any
    pages: Any


# ---------------------------------------------------------------------------
# NoteSourceInterface
# ---------------------------------------------------------------------------
# Anything that can produce the current snapshot of source notes.
# ---------------------------------------------------------------------------
class NoteSourceInterface(Protocol):
    def fetch_notes(self, uid: Optional[str] = None) -> List[SourceRecord]:
        """Return every note, optionally restricted to one owner uid."""
        ...
