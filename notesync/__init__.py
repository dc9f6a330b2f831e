"""
notesync: one-way sync of Firestore notes into a Notion database.
"""
