from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text
from sqlalchemy.orm import relationship

from notekeeper.db.base import Base, BaseModel, utcnow

# Множество sharedWith: составной первичный ключ исключает дубликаты
note_shares = Table(
    "note_shares",
    Base.metadata,
    Column("note_id", Integer, ForeignKey("notes.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("shared_at", DateTime(timezone=True), default=utcnow, nullable=False),
)


class Note(BaseModel):
    __tablename__ = "notes"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False, default="")
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Relationships (без обратной ссылки User.notes)
    owner = relationship("User", lazy="raise")
    shared_with = relationship("User", secondary=note_shares, lazy="raise", order_by="User.id")
