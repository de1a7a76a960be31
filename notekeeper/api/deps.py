from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.db import get_db
from notekeeper.domains.notes.services import NoteService
from notekeeper.infrastructure.cache import CacheLayer


def get_note_cache(request: Request) -> CacheLayer:
    """Кэш-слой, созданный при старте приложения"""
    return request.app.state.note_cache


def get_note_service(
    db: AsyncSession = Depends(get_db),
    cache: CacheLayer = Depends(get_note_cache)
) -> NoteService:
    return NoteService(db, cache)
