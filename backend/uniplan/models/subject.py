import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from uniplan.db.base import Base


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    lecturer_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
