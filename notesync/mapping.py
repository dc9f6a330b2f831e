"""
Field mapping between Firestore notes and Notion database properties.

This module provides pure helper functions used by NotionStore and the sync
orchestrator. Nothing here touches the network. The functions only turn a
Firestore note into a Notion property payload, and read the reconciliation
key back out of a Notion page.

Notion property layout (one row per note):

    <title prop>   title         ← content (≤ 2000 chars, "—" when empty)
    created_at     date          ← updatedAt, else createdAt, else now
    tags           multi_select  ← tags (each ≤ 100 chars)
    category       select        ← sectionId (≤ 100 chars, "Notes" by default)
    firebase_id    rich_text     ← Firestore document id, verbatim
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from notesync.types import NoteDocument

TITLE_LIMIT = 2000
OPTION_LIMIT = 100

EMPTY_TITLE = "—"
DEFAULT_CATEGORY = "Notes"

FIREBASE_ID_PROP = "firebase_id"


def _trim(value: Any, limit: int = TITLE_LIMIT) -> str:
    """Truncate a string to `limit` characters; non-strings become ""."""
    return value[:limit] if isinstance(value, str) else ""


def _format_utc(dt: datetime) -> str:
    # Naive datetimes are taken to be UTC already.
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Timestamp normalization
# ---------------------------------------------------------------------------
def to_iso(value: Any, now: Optional[datetime] = None) -> str:
    """
    Convert a note timestamp into an ISO-8601 UTC string with millisecond
    precision (e.g. "2023-11-14T22:13:20.000Z").

    Accepted encodings:
        • datetime (what the Firestore SDK returns for Timestamp fields)
        • {"_seconds": n} maps from exported/serialized timestamps
        • int/float epoch milliseconds
        • ISO-8601 strings

    Missing values, unknown encodings, and anything that fails to parse
    map to the current time instead of raising.
    """
    fallback = _format_utc(now or datetime.now(timezone.utc))

    if not value:
        return fallback

    try:
        if isinstance(value, Mapping):
            seconds = value.get("_seconds")
            if seconds is None:
                return fallback
            return _format_utc(datetime.fromtimestamp(float(seconds), tz=timezone.utc))

        if isinstance(value, datetime):
            return _format_utc(value)

        if isinstance(value, bool):
            return fallback

        if isinstance(value, (int, float)):
            return _format_utc(datetime.fromtimestamp(value / 1000.0, tz=timezone.utc))

        if isinstance(value, str):
            return _format_utc(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))

    except (ValueError, TypeError, OverflowError, OSError):
        return fallback

    return fallback


# ---------------------------------------------------------------------------
# Note → Notion properties
# ---------------------------------------------------------------------------
def build_tags(tags: Any) -> List[Dict[str, str]]:
    """Map a Firestore tags array to multi_select options; non-lists yield []."""
    if not isinstance(tags, list):
        return []
    return [{"name": str(tag)[:OPTION_LIMIT]} for tag in tags]


def build_notion_properties(
    firebase_id: str,
    note: NoteDocument,
    title_property: str = "Content",
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Build the Notion property payload for one Firestore note.

    Args:
        firebase_id:
            The Firestore document id. Stored verbatim in `firebase_id`,
            which is the key used to find the page again on later runs.
        note:
            The Firestore document fields.
        title_property:
            Name of the database's title property (NOTION_TITLE_PROP).
        now:
            Override for the current time, used when no timestamp parses.

    Returns:
        A dict ready to pass as `properties=` to pages.create/pages.update.
    """
    content = _trim(note.get("content") or "")
    created_iso = to_iso(note.get("updatedAt") or note.get("createdAt"), now=now)
    category = note.get("sectionId") or DEFAULT_CATEGORY

    return {
        title_property: {"title": [{"type": "text", "text": {"content": content or EMPTY_TITLE}}]},
        "created_at": {"date": {"start": created_iso}},
        "tags": {"multi_select": build_tags(note.get("tags"))},
        "category": {"select": {"name": str(category)[:OPTION_LIMIT]}},
        FIREBASE_ID_PROP: {"rich_text": [{"type": "text", "text": {"content": firebase_id}}]},
    }


# ---------------------------------------------------------------------------
# Notion page → reconciliation key
# ---------------------------------------------------------------------------
def get_firebase_id_from_page(page: Mapping[str, Any]) -> str:
    """
    Read the Firestore id stored on a Notion page.

    Returns "" when the page has no `firebase_id` property, when the property
    is not rich_text, or when its value cannot be read. Such pages were not
    created by this sync and must be left alone.
    """
    properties = page.get("properties")
    if not isinstance(properties, Mapping):
        return ""

    prop = properties.get(FIREBASE_ID_PROP)
    if not isinstance(prop, Mapping) or prop.get("type") != "rich_text":
        return ""

    fragments = prop.get("rich_text")
    if not isinstance(fragments, list) or not fragments:
        return ""

    first = fragments[0]
    if not isinstance(first, Mapping):
        return ""

    text = first.get("plain_text")
    if not text:
        inner = first.get("text")
        text = inner.get("content") if isinstance(inner, Mapping) else ""

    return text.strip() if isinstance(text, str) else ""
