import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


class Role(str, enum.Enum):
    """Роль актора: admin обходит все проверки политики доступа"""

    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        if not value:
            return cls.USER
        return cls(str(value).lower())


@dataclass(frozen=True)
class ActorContext:
    """Уже проверенная личность актора, приходит с каждым запросом"""

    user_id: int
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class User:
    """Запись каталога пользователей (только чтение для ядра заметок)"""

    def __init__(
        self,
        id: int,
        email: str,
        username: str,
        role: Role = Role.USER,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.email = email
        self.username = username
        self.role = role
        self.created_at = created_at
        self.updated_at = updated_at

    def __eq__(self, other) -> bool:
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role.value})"
