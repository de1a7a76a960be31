import logging
from typing import Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.core.exceptions import ForbiddenError, NotFoundError, store_errors
from notekeeper.db.repositories.note_repository import NoteRepository
from notekeeper.db.repositories.user_repository import UserRepository
from notekeeper.domains.identity.entities import ActorContext
from notekeeper.domains.notes.entities import Note
from notekeeper.domains.notes.policy import AccessPolicy
from notekeeper.domains.notes.schemas import NoteDeleteResponse, NoteResponse
from notekeeper.infrastructure.cache import CacheLayer

logger = logging.getLogger(__name__)

# Пространства имен ключей кэша: note:<namespace>:<id>
SINGLE = "single"
OWNED = "user"
SHARED = "shared"


class NoteService:
    """Сервис заметок: политика доступа, cache-aside чтение и инвалидация при записи.

    Сервис не держит разделяемого состояния и не берет блокировок:
    параллельные update одной заметки - last write wins в хранилище,
    кэш сходится после инвалидации и следующего чтения.
    Параллельные share одному пользователю идемпотентны: повторная
    вставка связи note_shares пропускается хранилищем.
    """

    def __init__(self, session: AsyncSession, cache: CacheLayer, policy: Optional[AccessPolicy] = None):
        self.session = session
        self.cache = cache
        self.policy = policy or AccessPolicy()
        self.note_repository = NoteRepository(session)
        self.user_repository = UserRepository(session)

    async def create_note(self, actor: ActorContext, title: str, content: str) -> NoteResponse:
        """Создание заметки от имени актора"""
        logger.info("Creating note for user %s", actor.user_id)
        with store_errors("create note"):
            owner = await self.user_repository.get_by_id(actor.user_id)
            if not owner:
                logger.warning("User with ID %s not found", actor.user_id)
                raise NotFoundError(f"User with ID {actor.user_id} not found")

            note = await self.note_repository.create(owner.id, title, content)

        await self.cache.invalidate(self.cache.key(OWNED, owner.id))
        logger.info("Note created successfully with ID %s", note.id)
        return NoteResponse.from_entity(note)

    async def list_owned(self, actor: ActorContext) -> List[NoteResponse]:
        """Заметки актора; администратор получает все заметки из хранилища"""
        logger.info("Fetching notes for user %s, is_admin: %s", actor.user_id, actor.is_admin)
        if actor.is_admin:
            with store_errors("list all notes"):
                notes = await self.note_repository.get_all()
            return [NoteResponse.from_entity(note) for note in notes]

        return await self._cached_list(
            self.cache.key(OWNED, actor.user_id),
            self.note_repository.get_by_owner,
            actor.user_id,
        )

    async def list_shared(self, actor: ActorContext) -> List[NoteResponse]:
        """Заметки, которыми поделились с актором"""
        logger.info("Fetching shared notes for user %s, is_admin: %s", actor.user_id, actor.is_admin)
        if actor.is_admin:
            with store_errors("list all notes"):
                notes = await self.note_repository.get_all()
            return [NoteResponse.from_entity(note) for note in notes]

        return await self._cached_list(
            self.cache.key(SHARED, actor.user_id),
            self.note_repository.get_by_sharee,
            actor.user_id,
        )

    async def get_note(self, note_id: int, actor: ActorContext) -> NoteResponse:
        """Чтение заметки; попадание в кэш не отменяет проверку доступа"""
        logger.info("Fetching note %s for user %s, is_admin: %s", note_id, actor.user_id, actor.is_admin)
        cache_key = self.cache.key(SINGLE, note_id)

        cached = await self._cached_note(cache_key)
        if cached is not None:
            logger.info("Cache hit for note %s", note_id)
            self._ensure_readable(actor, cached.owner_id, cached.shared_with_ids)
            return cached

        with store_errors("get note"):
            note = await self.note_repository.get_by_id(note_id)
        if not note:
            logger.warning("Note %s not found", note_id)
            raise NotFoundError("Note not found")

        self._ensure_readable(actor, note.owner_id, note.shared_with_ids)

        formatted = NoteResponse.from_entity(note)
        await self.cache.set(cache_key, formatted.model_dump(mode="json"))
        return formatted

    async def update_note(self, note_id: int, actor: ActorContext, title: str, content: str) -> NoteResponse:
        """Обновление заголовка и содержимого (владелец или администратор)"""
        logger.info("Updating note %s by user %s, is_admin: %s", note_id, actor.user_id, actor.is_admin)
        current = await self.get_note(note_id, actor)

        if not self.policy.can_write(actor.user_id, actor.role, current.owner_id, current.shared_with_ids):
            raise ForbiddenError("Only the owner can update the note")

        with store_errors("update note"):
            note = await self._load(note_id)
            note.update_content(title, content)
            updated = await self.note_repository.save(note)

        await self._invalidate(
            self.cache.key(SINGLE, note_id),
            self.cache.key(OWNED, note.owner_id),
            *(self.cache.key(SHARED, user_id) for user_id in note.shared_with_ids),
        )
        return NoteResponse.from_entity(updated)

    async def delete_note(self, note_id: int, actor: ActorContext) -> NoteDeleteResponse:
        """Удаление заметки; кэш инвалидируется до удаления записи"""
        logger.info("Removing note %s by user %s, is_admin: %s", note_id, actor.user_id, actor.is_admin)
        current = await self.get_note(note_id, actor)

        if not self.policy.can_delete(actor.user_id, actor.role, current.owner_id, current.shared_with_ids):
            raise ForbiddenError("Only the owner can delete the note")

        with store_errors("delete note"):
            note = await self._load(note_id)

            await self._invalidate(
                self.cache.key(SINGLE, note_id),
                self.cache.key(OWNED, note.owner_id),
                *(self.cache.key(SHARED, user_id) for user_id in note.shared_with_ids),
            )

            await self.note_repository.delete(note)
        return NoteDeleteResponse(success=True)

    async def share_note(self, note_id: int, actor: ActorContext, target_user_id: int) -> NoteResponse:
        """Предоставление доступа на чтение другому пользователю"""
        logger.info("Sharing note %s from user %s to user %s", note_id, actor.user_id, target_user_id)
        current = await self.get_note(note_id, actor)

        if not self.policy.can_share(actor.user_id, actor.role, current.owner_id, current.shared_with_ids):
            raise ForbiddenError("Only the owner can share the note")

        with store_errors("share note"):
            note = await self._load(note_id)

            target = await self.user_repository.get_by_id(target_user_id)
            if not target:
                logger.warning("Target user %s not found", target_user_id)
                raise NotFoundError("Target user not found")

            if not note.share_with(target):
                logger.info("Note %s is already visible to user %s", note_id, target_user_id)
                return NoteResponse.from_entity(note)

            updated = await self.note_repository.save(note)

        # owned-список владельца тоже встраивает shared_with
        await self._invalidate(
            self.cache.key(SINGLE, note_id),
            self.cache.key(SHARED, target_user_id),
            self.cache.key(OWNED, note.owner_id),
        )
        return NoteResponse.from_entity(updated)

    async def _load(self, note_id: int) -> Note:
        note = await self.note_repository.get_by_id(note_id)
        if not note:
            raise NotFoundError("Note not found")
        return note

    def _ensure_readable(self, actor: ActorContext, owner_id: int, shared_with: Iterable[int]) -> None:
        if not self.policy.can_read(actor.user_id, actor.role, owner_id, shared_with):
            raise ForbiddenError("Access denied")

    async def _cached_note(self, cache_key: str):
        payload = await self.cache.get(cache_key)
        if payload is None:
            return None
        try:
            return NoteResponse.model_validate(payload)
        except ValueError as exc:
            logger.warning("Discarding malformed cache entry %s: %s", cache_key, exc)
            return None

    async def _cached_list(self, cache_key: str, query, user_id: int) -> List[NoteResponse]:
        payload = await self.cache.get(cache_key)
        if payload is not None:
            try:
                notes = [NoteResponse.model_validate(item) for item in payload]
                logger.info("Cache hit for %s", cache_key)
                return notes
            except (TypeError, ValueError) as exc:
                logger.warning("Discarding malformed cache entry %s: %s", cache_key, exc)

        with store_errors("list notes"):
            notes = await query(user_id)
        formatted = [NoteResponse.from_entity(note) for note in notes]
        await self.cache.set(cache_key, [note.model_dump(mode="json") for note in formatted])
        return formatted

    async def _invalidate(self, *keys: str) -> None:
        for key in keys:
            await self.cache.invalidate(key)
