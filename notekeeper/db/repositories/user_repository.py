from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeeper.db.base import is_valid_id
from notekeeper.db.models.user import User as UserModel
from notekeeper.domains.identity.entities import Role, User


class UserRepository:
    """Репозиторий каталога пользователей (только чтение)"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Получение пользователя по id"""
        if not is_valid_id(user_id):
            return None
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        db_user = result.scalar_one_or_none()
        return self.to_domain(db_user) if db_user else None

    async def get_by_email(self, email: str) -> Optional[User]:
        """Получение пользователя по email"""
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email)
        )
        db_user = result.scalar_one_or_none()
        return self.to_domain(db_user) if db_user else None

    @staticmethod
    def to_domain(db_user: UserModel) -> User:
        """Преобразование модели БД в доменную сущность"""
        return User(
            id=db_user.id,
            email=db_user.email,
            username=db_user.username,
            role=Role.parse(db_user.role),
            created_at=db_user.created_at,
            updated_at=db_user.updated_at
        )
