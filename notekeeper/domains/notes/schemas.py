from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from notekeeper.domains.identity.schemas import UserSummary
from notekeeper.domains.notes.entities import Note


class NoteBase(BaseModel):
    """Базовая схема заметки"""
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(default="", max_length=1000000)  # 1MB max content

    @field_validator('title')
    @classmethod
    def validate_title(cls, v):
        if not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()


class NoteCreate(NoteBase):
    """Схема для создания заметки"""
    pass


class NoteUpdate(NoteBase):
    """Схема для обновления заметки (заголовок и содержимое целиком)"""
    pass


class NoteShareRequest(BaseModel):
    """Схема для запроса на предоставление доступа к заметке"""
    user_id: int = Field(..., gt=0)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoteResponse(BaseModel):
    """Отформатированная заметка; она же снимок в кэше"""
    id: int
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    owner: UserSummary
    shared_with: List[UserSummary] = Field(default_factory=list)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @property
    def owner_id(self) -> int:
        return self.owner.id

    @property
    def shared_with_ids(self) -> List[int]:
        return [user.id for user in self.shared_with]

    @classmethod
    def from_entity(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            updated_at=note.updated_at,
            owner=UserSummary.model_validate(note.owner),
            shared_with=[UserSummary.model_validate(user) for user in note.shared_with],
        )


class NoteDeleteResponse(BaseModel):
    """Схема ответа на удаление"""
    success: bool = True
