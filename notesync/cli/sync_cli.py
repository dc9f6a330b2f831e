"""
Sync command-line interface.

This module defines the `sync` command group for the Typer-based CLI.
The command stays thin: it loads configuration, builds the two clients,
and delegates the run to the orchestrator.

Public surface:

    • `sync_app`  → mounted in notesync/cli/main.py as:

          notesync sync run --dry-run --verbose

Exit codes:
    • 0: the run completed, even if some notes or pages failed
    • 1: configuration is missing/invalid, or the run aborted
"""

from __future__ import annotations

import typer

from notesync.config import ConfigurationError, load_settings
from notesync.firestore_source import FirestoreNoteSource
from notesync.logging_utils import log_error, log_event
from notesync.notion_store import NotionStore
from notesync.sync.orchestrator import sync_notes
from notesync.types import NoteSourceInterface, SyncSettings, SyncSummary

sync_app = typer.Typer(
    help=(
        "Mirror Firestore notes into a Notion database.\n\n"
        "Creates or updates one Notion page per note and archives pages whose "
        "note no longer exists. Configuration is read from the environment "
        "(or a .env file)."
    )
)


# ---------------------------------------------------------------------------
# Client factories (replaced in tests)
# ---------------------------------------------------------------------------
def build_note_source(settings: SyncSettings) -> NoteSourceInterface:
    return FirestoreNoteSource.from_service_account(settings["firebase_service_account"])


def build_notion_store(settings: SyncSettings, dry_run: bool = False) -> NotionStore:
    return NotionStore.from_settings(settings, dry_run=dry_run)


# ---------------------------------------------------------------------------
# Command: notesync sync run
# ---------------------------------------------------------------------------
@sync_app.command("run")
def sync_command(
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Query both stores but do not create, update, or archive Notion pages.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Show high-level progress logs.",
    ),
) -> None:
    """
    Run one reconciliation pass from Firestore to Notion.
    """
    try:
        settings = load_settings()
    except ConfigurationError as e:
        log_error(str(e))
        raise typer.Exit(code=1)

    try:
        run_sync(settings, dry_run=dry_run, verbose=verbose)
    except Exception as e:
        log_error(f"Fatal: {e}")
        raise typer.Exit(code=1)


def run_sync(
    settings: SyncSettings,
    dry_run: bool = False,
    verbose: bool = False,
) -> SyncSummary:
    """
    Build clients from settings and run the orchestrator.

    Responsibilities:

        1. Print the run banner.
        2. Instantiate the Firestore source and the Notion store.
        3. Delegate the run to the orchestrator.
    """
    uid = settings["firebase_uid"]

    log_event("Sync start…")
    log_event(f"Filter UID: {uid or '(none; syncing all)'}")
    log_event(f"Title prop: {settings['title_property']}")
    log_event(f"Delete mode: {settings['delete_mode']} (Notion archives pages)")
    if dry_run:
        log_event("[dry-run] No Notion pages will be written.")

    source = build_note_source(settings)
    store = build_notion_store(settings, dry_run=dry_run)

    return sync_notes(source, store, uid=uid, verbose=verbose)
