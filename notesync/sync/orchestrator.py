"""
High-level sync orchestrator: Firestore notes → Notion database.

This module defines the canonical reconciliation run. It is intentionally
explicit and linear so that tests can assert on sequencing and counters,
and so that the stage a failed run stopped in is always visible:

    init → fetch_source → upsert_loop → scan_target → archive_loop → done
                                (any stage) → failed

Failure tiers:
    • A failure on a single note (upsert) or a single page (archive) is
      recorded in the report and the loop moves on.
    • Anything raised outside those loops (fetching Firestore, scanning
      Notion) marks the report `failed` and is re-raised to the caller.

The orchestrator does *not* perform:
    • field mapping (delegated to notesync.mapping via NotionStore)
    • Notion or Firestore I/O details (delegated to the injected clients)
    • configuration loading (done by the CLI)
"""

from typing import Any, List, Optional, Set

from notesync.logging_utils import log_error, log_event, log_verbose
from notesync.mapping import get_firebase_id_from_page
from notesync.notion_store import NotionStore
from notesync.types import (
    NoteSourceInterface,
    SourceRecord,
    SyncFailure,
    SyncStage,
    SyncSummary,
)


# ============================================================================
# SYNC REPORT: COUNTERS ACCUMULATED ACROSS STAGES
# ============================================================================
class SyncReport:
    """
    Structured sync metrics for both dry-run and real runs.

    Tests assert on exact counter values, and the CLI prints the summary
    line from them.
    """

    def __init__(self, dry_run: bool = False) -> None:
        self.stage: SyncStage = "init"
        self.dry_run = dry_run

        # Pages created for notes seen for the first time
        self.created = 0

        # Existing pages refreshed (and un-archived)
        self.updated = 0

        # Pages archived because their note is gone from Firestore
        self.archived = 0

        # Pages without a firebase_id; not managed by this sync
        self.skipped = 0

        # Per-item failures in either loop
        self.failures: List[SyncFailure] = []

    @property
    def failed(self) -> int:
        return len(self.failures)

    def record_failure(self, item_id: str, error: Exception) -> None:
        self.failures.append({"id": item_id, "stage": self.stage, "error": _error_message(error)})

    def to_summary_dict(self) -> SyncSummary:
        return {
            "stage": self.stage,
            "dry_run": self.dry_run,
            "created": self.created,
            "updated": self.updated,
            "archived": self.archived,
            "skipped": self.skipped,
            "failed": self.failed,
            "failures": list(self.failures),
        }

    def summary_line(self) -> str:
        return (
            f"Done. Created: {self.created}, Updated: {self.updated}, "
            f"Archived(deleted): {self.archived}, Skipped: {self.skipped}, "
            f"Failed: {self.failed}"
        )


def _error_message(error: Exception) -> str:
    return str(error) or error.__class__.__name__


def _outcome_message(outcome: str, note_id: str, dry_run: bool) -> str:
    if dry_run:
        return f"[dry-run] Would have {outcome} {note_id}"
    return f"{outcome.capitalize()} {note_id}"


# ============================================================================
# STAGES
# ============================================================================
def upsert_notes(
    notes: List[SourceRecord],
    store: NotionStore,
    report: SyncReport,
) -> None:
    """Upsert every note, recording failures without stopping."""
    for note in notes:
        try:
            outcome = store.upsert_note(note["id"], note["data"])
            if outcome == "created":
                report.created += 1
            else:
                report.updated += 1
            log_event(_outcome_message(outcome, note["id"], store.dry_run))
        except Exception as e:
            # Non-fatal: record the failure and continue with the next note.
            report.record_failure(note["id"], e)
            log_error(f"Failed upsert for {note['id']}: {_error_message(e)}")

        store.throttle()


def archive_missing_pages(
    pages: List[Any],
    source_ids: Set[str],
    store: NotionStore,
    report: SyncReport,
) -> None:
    """
    Archive pages whose firebase_id no longer exists in Firestore.

    Pages without a readable firebase_id are counted as skipped and never
    touched. Pages whose id is still present are left alone.
    """
    for page in pages:
        firebase_id = get_firebase_id_from_page(page)
        if not firebase_id:
            report.skipped += 1
            continue

        if firebase_id in source_ids:
            continue

        try:
            store.archive_page(page["id"])
            report.archived += 1
            if store.dry_run:
                log_event(f"[dry-run] Would have archived Notion page for deleted note {firebase_id}")
            else:
                log_event(f"Archived Notion page for deleted note {firebase_id}")
        except Exception as e:
            report.record_failure(firebase_id, e)
            log_error(f"Failed to archive {firebase_id}: {_error_message(e)}")

        store.throttle()


# ============================================================================
# MAIN ORCHESTRATOR
# ============================================================================
def sync_notes(
    source: NoteSourceInterface,
    store: NotionStore,
    uid: Optional[str] = None,
    verbose: bool = False,
    report: Optional[SyncReport] = None,
) -> SyncSummary:
    """
    Reconcile the Notion database with the current Firestore snapshot.

    Steps:
        1. Fetch notes from Firestore (filtered by `uid` when given).
        2. Upsert each note into Notion.
        3. Scan every page in the Notion database.
        4. Archive pages whose firebase_id is not in the snapshot.

    Returns the summary dict. A caller-supplied `report` is updated in
    place, so its `stage` shows where a run that raised stopped.
    """
    if report is None:
        report = SyncReport(dry_run=store.dry_run)

    try:
        # ------------------------------------------------------------
        # 1. FETCH SOURCE SNAPSHOT
        # ------------------------------------------------------------
        report.stage = "fetch_source"
        notes = source.fetch_notes(uid)
        source_ids = {note["id"] for note in notes}
        log_event(f"Found {len(notes)} Firestore notes matching filter.")

        # ------------------------------------------------------------
        # 2. UPSERT EVERY NOTE
        # ------------------------------------------------------------
        report.stage = "upsert_loop"
        upsert_notes(notes, store, report)

        # ------------------------------------------------------------
        # 3. SCAN THE WHOLE NOTION DATABASE
        # ------------------------------------------------------------
        report.stage = "scan_target"
        log_verbose("Scanning Notion database for deleted notes...", verbose)
        pages = store.get_all_pages()
        log_verbose(f"Scanned {len(pages)} Notion pages.", verbose)

        # ------------------------------------------------------------
        # 4. ARCHIVE PAGES WHOSE NOTE IS GONE
        # ------------------------------------------------------------
        report.stage = "archive_loop"
        archive_missing_pages(pages, source_ids, store, report)

    except Exception:
        report.stage = "failed"
        raise

    report.stage = "done"
    log_event(report.summary_line())
    return report.to_summary_dict()
