from fastapi import APIRouter, Depends, status
from typing import List

from notekeeper.api.deps import get_note_service
from notekeeper.core.auth import get_current_actor
from notekeeper.domains.identity.entities import ActorContext
from notekeeper.domains.notes.schemas import (
    NoteCreate, NoteUpdate, NoteShareRequest, NoteResponse, NoteDeleteResponse
)
from notekeeper.domains.notes.services import NoteService

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=NoteResponse, status_code=status.HTTP_201_CREATED)
async def create_note(
    note_data: NoteCreate,
    actor: ActorContext = Depends(get_current_actor),
    note_service: NoteService = Depends(get_note_service)
):
    """Создание новой заметки"""
    return await note_service.create_note(actor, note_data.title, note_data.content)


@router.get("", response_model=List[NoteResponse])
async def get_user_notes(
    actor: ActorContext = Depends(get_current_actor),
    note_service: NoteService = Depends(get_note_service)
):
    """Заметки текущего пользователя (администратор видит все)"""
    return await note_service.list_owned(actor)


@router.get("/shared", response_model=List[NoteResponse])
async def get_shared_notes(
    actor: ActorContext = Depends(get_current_actor),
    note_service: NoteService = Depends(get_note_service)
):
    """Заметки, которыми поделились с текущим пользователем"""
    return await note_service.list_shared(actor)


@router.get("/{note_id}", response_model=NoteResponse)
async def get_note(
    note_id: int,
    actor: ActorContext = Depends(get_current_actor),
    note_service: NoteService = Depends(get_note_service)
):
    """Получение заметки по id"""
    return await note_service.get_note(note_id, actor)


@router.put("/{note_id}", response_model=NoteResponse)
async def update_note(
    note_id: int,
    update_data: NoteUpdate,
    actor: ActorContext = Depends(get_current_actor),
    note_service: NoteService = Depends(get_note_service)
):
    """Обновление заметки"""
    return await note_service.update_note(note_id, actor, update_data.title, update_data.content)


@router.post("/{note_id}/share", response_model=NoteResponse)
async def share_note(
    note_id: int,
    share_data: NoteShareRequest,
    actor: ActorContext = Depends(get_current_actor),
    note_service: NoteService = Depends(get_note_service)
):
    """Предоставление доступа к заметке"""
    return await note_service.share_note(note_id, actor, share_data.user_id)


@router.delete("/{note_id}", response_model=NoteDeleteResponse)
async def delete_note(
    note_id: int,
    actor: ActorContext = Depends(get_current_actor),
    note_service: NoteService = Depends(get_note_service)
):
    """Удаление заметки"""
    return await note_service.delete_note(note_id, actor)
