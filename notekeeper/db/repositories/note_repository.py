from typing import List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from notekeeper.db.base import is_valid_id, utcnow
from notekeeper.db.models.note import Note as NoteModel, note_shares
from notekeeper.db.repositories.user_repository import UserRepository
from notekeeper.domains.notes.entities import Note


class NoteRepository:
    """Репозиторий заметок и связей owner / shared_with"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def _select(self, with_relations: bool = True):
        stmt = select(NoteModel).execution_options(populate_existing=True)
        if with_relations:
            stmt = stmt.options(
                selectinload(NoteModel.owner),
                selectinload(NoteModel.shared_with),
            )
        return stmt

    async def create(self, owner_id: int, title: str, content: str) -> Note:
        """Создание новой заметки с пустым shared_with"""
        now = utcnow()
        db_note = NoteModel(
            title=title,
            content=content,
            owner_id=owner_id,
            created_at=now,
            updated_at=now
        )
        self.session.add(db_note)
        await self.session.commit()
        return await self.get_by_id(db_note.id)

    async def get_by_id(self, note_id: int, with_relations: bool = True) -> Optional[Note]:
        """Получение заметки по id"""
        if not is_valid_id(note_id):
            return None
        result = await self.session.execute(
            self._select(with_relations).where(NoteModel.id == note_id)
        )
        db_note = result.scalar_one_or_none()
        return self._to_domain(db_note, with_relations) if db_note else None

    async def get_by_owner(self, owner_id: int) -> List[Note]:
        """Заметки владельца"""
        if not is_valid_id(owner_id):
            return []
        result = await self.session.execute(
            self._select()
            .where(NoteModel.owner_id == owner_id)
            .order_by(NoteModel.updated_at.desc(), NoteModel.id.desc())
        )
        return [self._to_domain(note) for note in result.scalars().all()]

    async def get_by_sharee(self, user_id: int) -> List[Note]:
        """Заметки, которыми поделились с пользователем (с полным shared_with)"""
        if not is_valid_id(user_id):
            return []
        result = await self.session.execute(
            self._select()
            .join(note_shares, note_shares.c.note_id == NoteModel.id)
            .where(note_shares.c.user_id == user_id)
            .order_by(NoteModel.updated_at.desc(), NoteModel.id.desc())
        )
        return [self._to_domain(note) for note in result.scalars().all()]

    async def get_all(self) -> List[Note]:
        """Все заметки (для администраторов)"""
        result = await self.session.execute(
            self._select().order_by(NoteModel.updated_at.desc(), NoteModel.id.desc())
        )
        return [self._to_domain(note) for note in result.scalars().all()]

    async def save(self, note: Note) -> Note:
        """Сохранение заголовка, содержимого и множества shared_with"""
        await self.session.execute(
            update(NoteModel)
            .where(NoteModel.id == note.id)
            .values(
                title=note.title,
                content=note.content,
                updated_at=note.updated_at
            )
        )

        result = await self.session.execute(
            select(note_shares.c.user_id).where(note_shares.c.note_id == note.id)
        )
        stored = set(result.scalars().all())
        wanted = [user.id for user in note.shared_with]

        removed = stored - set(wanted)
        if removed:
            await self.session.execute(
                delete(note_shares).where(
                    note_shares.c.note_id == note.id,
                    note_shares.c.user_id.in_(removed)
                )
            )

        added = [user_id for user_id in dict.fromkeys(wanted) if user_id not in stored]
        await self.add_shares(note.id, added)

        await self.session.commit()
        return await self.get_by_id(note.id)

    async def add_shares(self, note_id: int, user_ids: List[int]) -> None:
        """Вставка связей note_shares; уже существующие пары пропускаются"""
        if not user_ids:
            return
        now = utcnow()
        stmt = self._insert_shares().on_conflict_do_nothing(
            index_elements=[note_shares.c.note_id, note_shares.c.user_id]
        )
        await self.session.execute(
            stmt,
            [{"note_id": note_id, "user_id": user_id, "shared_at": now} for user_id in user_ids]
        )

    def _insert_shares(self):
        # ON CONFLICT есть только в диалектных insert
        if self.session.bind.dialect.name == "sqlite":
            return sqlite_insert(note_shares)
        return postgresql_insert(note_shares)

    async def delete(self, note: Note) -> bool:
        """Удаление заметки вместе со связями shared_with"""
        await self.session.execute(delete(note_shares).where(note_shares.c.note_id == note.id))
        result = await self.session.execute(delete(NoteModel).where(NoteModel.id == note.id))
        await self.session.commit()
        return result.rowcount > 0

    def _to_domain(self, db_note: NoteModel, with_relations: bool = True) -> Note:
        """Преобразование модели БД в доменную сущность"""
        owner = None
        shared_with = []
        if with_relations:
            owner = UserRepository.to_domain(db_note.owner)
            shared_with = [UserRepository.to_domain(user) for user in db_note.shared_with]

        return Note(
            id=db_note.id,
            title=db_note.title,
            content=db_note.content,
            owner_id=db_note.owner_id,
            owner=owner,
            shared_with=shared_with,
            created_at=db_note.created_at,
            updated_at=db_note.updated_at
        )
