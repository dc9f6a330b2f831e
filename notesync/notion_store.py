"""
Thin wrapper around the Notion SDK for the notes database.

NotionStore exposes the handful of operations the sync needs and nothing
else:

    • find_page_by_firebase_id: lookup by reconciliation key
    • upsert_note: create-or-update one note
    • archive_page: soft-delete one page
    • get_all_pages: paginate the whole database
    • throttle: fixed delay between API calls

The underlying client is dependency-injected. Production code passes a
notion_client.Client; tests pass an in-memory fake with the same
`databases.query` / `pages.create` / `pages.update` surface.

In dry-run mode reads still go to Notion (so outcomes are accurate) but no
page is created, updated, or archived.
"""

import time
from typing import Any, Callable, Dict, List, Optional

from notion_client import Client

from notesync.mapping import FIREBASE_ID_PROP, build_notion_properties
from notesync.types import NoteDocument, NotionClientInterface, SyncSettings, UpsertOutcome

# Notion averages three requests per second per integration.
RATE_DELAY_SECONDS = 0.22

PAGE_SIZE = 100


class NotionStore:
    """
    Dependency-injected access to one Notion database.

    Parameters
    ----------
    client : NotionClientInterface | None
        A notion_client.Client or a compatible test double.
    database_id : str
        Id of the Notion database holding the synced notes.
    title_property : str
        Name of the database's title property.
    dry_run : bool
        If True, writes are skipped and only reported.
    sleep : Callable[[float], None]
        Used by throttle(); tests pass a recorder instead of time.sleep.
    rate_delay : float
        Seconds to wait after each call that throttle() guards.
    """

    def __init__(
        self,
        client: Optional[NotionClientInterface],
        database_id: str,
        title_property: str = "Content",
        dry_run: bool = False,
        sleep: Callable[[float], None] = time.sleep,
        rate_delay: float = RATE_DELAY_SECONDS,
    ) -> None:
        self.client = client
        self.database_id = database_id
        self.title_property = title_property
        self.dry_run = dry_run
        self._sleep = sleep
        self.rate_delay = rate_delay

    @classmethod
    def from_settings(cls, settings: SyncSettings, dry_run: bool = False) -> "NotionStore":
        """Build a store backed by the official Notion SDK client."""
        client = Client(auth=settings["notion_token"])
        return cls(
            client,
            database_id=settings["notion_database_id"],
            title_property=settings["title_property"],
            dry_run=dry_run,
        )

    def _require_client(self) -> NotionClientInterface:
        if self.client is None:
            raise RuntimeError("Notion client is not configured")
        return self.client

    def throttle(self) -> None:
        """Wait the fixed inter-request delay."""
        self._sleep(self.rate_delay)

    # -----------------------------------------------------------------------
    # Lookup
    # -----------------------------------------------------------------------
    def find_page_by_firebase_id(self, firebase_id: str) -> Optional[Dict[str, Any]]:
        """
        Return the first page whose `firebase_id` equals the given id, or None.
        """
        client = self._require_client()
        resp = client.databases.query(
            database_id=self.database_id,
            filter={"property": FIREBASE_ID_PROP, "rich_text": {"equals": firebase_id}},
            page_size=1,
        )
        results = resp.get("results") or []
        return results[0] if results else None

    # -----------------------------------------------------------------------
    # Upsert
    # -----------------------------------------------------------------------
    def upsert_note(self, firebase_id: str, note: NoteDocument) -> UpsertOutcome:
        """
        Create or update the page for one Firestore note.

        An existing page gets fresh properties and `archived=False`, which
        restores pages archived by an earlier run. A missing page is created
        under the database.

        The lookup and the create are two separate requests. Two overlapping
        runs can therefore both miss the lookup and create duplicate pages.

        Returns
        -------
        "created" or "updated"
        """
        props = build_notion_properties(firebase_id, note, title_property=self.title_property)
        existing = self.find_page_by_firebase_id(firebase_id)

        if existing:
            if not self.dry_run:
                self._require_client().pages.update(
                    page_id=existing["id"], properties=props, archived=False
                )
            return "updated"

        if not self.dry_run:
            self._require_client().pages.create(
                parent={"database_id": self.database_id}, properties=props
            )
        return "created"

    # -----------------------------------------------------------------------
    # Archive
    # -----------------------------------------------------------------------
    def archive_page(self, page_id: str) -> None:
        """Soft-delete a page. Notion keeps archived pages restorable."""
        if self.dry_run:
            return
        self._require_client().pages.update(page_id=page_id, archived=True)

    # -----------------------------------------------------------------------
    # Full scan
    # -----------------------------------------------------------------------
    def get_all_pages(self) -> List[Dict[str, Any]]:
        """
        Return every page in the database.

        Follows `next_cursor` while `has_more` is set, PAGE_SIZE pages at a
        time, waiting the rate delay after each request.
        """
        client = self._require_client()
        pages: List[Dict[str, Any]] = []
        cursor: Optional[str] = None

        while True:
            query: Dict[str, Any] = {"database_id": self.database_id, "page_size": PAGE_SIZE}
            if cursor:
                query["start_cursor"] = cursor

            resp = client.databases.query(**query)
            pages.extend(resp.get("results") or [])
            cursor = resp.get("next_cursor") if resp.get("has_more") else None
            self.throttle()

            if not cursor:
                return pages
