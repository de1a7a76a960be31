from notekeeper.db.models.user import User
from notekeeper.db.models.note import Note, note_shares

__all__ = [
    "User",
    "Note",
    "note_shares",
]
