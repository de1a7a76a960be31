from typing import Iterable

from notekeeper.domains.identity.entities import Role


class AccessPolicy:
    """Политика доступа к заметкам.

    Чистые предикаты над (actor_id, actor_role, owner_id, shared_with).
    Роль admin - явный обход всех проверок.
    """

    @staticmethod
    def can_read(actor_id: int, actor_role: Role, owner_id: int, shared_with: Iterable[int]) -> bool:
        if actor_role is Role.ADMIN:
            return True
        return actor_id == owner_id or actor_id in set(shared_with)

    @staticmethod
    def can_write(actor_id: int, actor_role: Role, owner_id: int, shared_with: Iterable[int] = ()) -> bool:
        if actor_role is Role.ADMIN:
            return True
        return actor_id == owner_id

    @classmethod
    def can_delete(cls, actor_id: int, actor_role: Role, owner_id: int, shared_with: Iterable[int] = ()) -> bool:
        return cls.can_write(actor_id, actor_role, owner_id, shared_with)

    @classmethod
    def can_share(cls, actor_id: int, actor_role: Role, owner_id: int, shared_with: Iterable[int] = ()) -> bool:
        return cls.can_write(actor_id, actor_role, owner_id, shared_with)
