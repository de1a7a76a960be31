from notekeeper.db.repositories.user_repository import UserRepository
from notekeeper.db.repositories.note_repository import NoteRepository

__all__ = [
    "UserRepository",
    "NoteRepository",
]
