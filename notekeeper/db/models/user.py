from sqlalchemy import Column, String

from notekeeper.db.base import BaseModel


class User(BaseModel):
    __tablename__ = "users"

    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(100), nullable=False)
    role = Column(String(20), nullable=False, default="user")
