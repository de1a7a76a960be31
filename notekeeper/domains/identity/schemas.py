from pydantic import BaseModel, ConfigDict

from notekeeper.domains.identity.entities import Role


class UserSummary(BaseModel):
    """Краткие данные пользователя, встраиваемые в заметку"""
    id: int
    email: str
    username: str
    role: Role

    model_config = ConfigDict(from_attributes=True)
