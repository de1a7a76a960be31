from notekeeper.domains.notes.entities import Note
from notekeeper.domains.notes.policy import AccessPolicy
from notekeeper.domains.notes.schemas import (
    NoteBase, NoteCreate, NoteUpdate, NoteShareRequest,
    NoteResponse, NoteDeleteResponse
)
from notekeeper.domains.notes.services import NoteService

__all__ = [
    "Note",
    "AccessPolicy",
    "NoteBase", "NoteCreate", "NoteUpdate", "NoteShareRequest",
    "NoteResponse", "NoteDeleteResponse",
    "NoteService"
]
