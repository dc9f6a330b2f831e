"""
Root entrypoint for the notesync CLI.

This module defines the top-level `notesync` command and mounts sub-apps
from other modules under notesync/cli/:

    • notesync/cli/sync_cli.py   →  `notesync sync ...`
"""

# ---------------------------------------------------------------------------
# Imports (must be at top to satisfy flake8 E402)
# ---------------------------------------------------------------------------
from dotenv import load_dotenv
import typer

from .sync_cli import sync_app

# Load environment variables
load_dotenv()

# ---------------------------------------------------------------------------
# Root CLI application
# ---------------------------------------------------------------------------
cli = typer.Typer(
    help=(
        "Firestore → Notion notes sync.\n\n"
        "  notesync sync run [--dry-run] [--verbose]\n\n"
        "Requires NOTION_TOKEN, NOTION_DATABASE_ID and FIREBASE_SA_JSON."
    )
)

# ---------------------------------------------------------------------------
# Register sub-applications
# ---------------------------------------------------------------------------
cli.add_typer(sync_app, name="sync")

# ---------------------------------------------------------------------------
# Entry point for `python -m notesync.cli.main`
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    cli()
