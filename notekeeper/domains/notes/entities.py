from datetime import datetime, timezone
from typing import List, Optional, Set

from notekeeper.domains.identity.entities import User


class Note:
    """Сущность заметки домена Notes"""

    def __init__(
        self,
        id: Optional[int],
        title: str,
        content: str,
        owner_id: int,
        owner: Optional[User] = None,
        shared_with: Optional[List[User]] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None
    ):
        self.id = id
        self.title = title
        self.content = content
        self.owner_id = owner_id
        self.owner = owner
        self.shared_with = list(shared_with or [])
        self.created_at = created_at
        self.updated_at = updated_at

    @property
    def shared_with_ids(self) -> Set[int]:
        return {user.id for user in self.shared_with}

    def update_content(self, title: str, content: str) -> None:
        """Обновление заголовка и содержимого"""
        self.title = title
        self.content = content
        now = datetime.now(timezone.utc)
        if self.created_at is not None:
            if self.created_at.tzinfo is None:
                now = now.replace(tzinfo=None)
            now = max(now, self.created_at)
        self.updated_at = now

    def share_with(self, user: User) -> bool:
        """Добавление получателя; False, если добавлять нечего"""
        if user.id == self.owner_id or user.id in self.shared_with_ids:
            return False
        self.shared_with.append(user)
        return True

    def __eq__(self, other) -> bool:
        if not isinstance(other, Note):
            return False
        return self.id == other.id

    def __repr__(self) -> str:
        return f"Note(id={self.id}, title={self.title}, owner_id={self.owner_id})"
