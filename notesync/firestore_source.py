"""
Firestore source for the sync.

FirestoreNoteSource adapts a firebase_admin Firestore client to
NoteSourceInterface. It reads the `notes` collection once per run and
normalizes each DocumentSnapshot into a SourceRecord, so the rest of the
code never handles SDK objects.
"""

from typing import Any, Dict, List, Optional, cast

import firebase_admin
from firebase_admin import credentials, firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from notesync.types import NoteDocument, SourceRecord

NOTES_COLLECTION = "notes"


class FirestoreNoteSource:
    """Reads notes from a Firestore collection, optionally filtered by owner uid."""

    def __init__(self, db: Any, collection: str = NOTES_COLLECTION) -> None:
        """
        Args:
            db:
                A Firestore client (firebase_admin.firestore.client()) or a
                test double exposing collection().where().stream().
            collection:
                Name of the notes collection.
        """
        self._db = db
        self.collection = collection

    @classmethod
    def from_service_account(cls, service_account: Dict[str, Any]) -> "FirestoreNoteSource":
        """
        Initialize the default Firebase app from a decoded service account
        and return a source bound to its Firestore client.

        The default app is created once per process; later calls reuse it.
        """
        try:
            firebase_admin.get_app()
        except ValueError:
            firebase_admin.initialize_app(credentials.Certificate(service_account))
        return cls(firestore.client())

    def fetch_notes(self, uid: Optional[str] = None) -> List[SourceRecord]:
        """
        Return every note in the collection.

        When `uid` is given, only documents whose `uid` field equals it are
        returned.
        """
        query = self._db.collection(self.collection)
        if uid:
            query = query.where(filter=FieldFilter("uid", "==", uid))

        records: List[SourceRecord] = []
        for snapshot in query.stream():
            data = snapshot.to_dict() or {}
            records.append({"id": snapshot.id, "data": cast(NoteDocument, data)})
        return records
