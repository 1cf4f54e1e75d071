from datetime import date

from sqlalchemy import BigInteger, Date, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from person_service.db.base import Base


class Person(Base):
    """
    SQLAlchemy model for a Person record.

    Rows are written once and never updated or deleted by this service.
    """
    __tablename__ = "person"

    # Surrogate key assigned by the store (BIGSERIAL), never reused
    id: Mapped[int] = mapped_column(
        BigInteger,
        primary_key=True,
        autoincrement=True,
    )

    # Uniqueness is enforced by the store; the repository maps violations to ConflictError
    nickname: Mapped[str] = mapped_column(
        String,
        unique=True,
        index=True,
        nullable=False,
    )

    name: Mapped[str] = mapped_column(
        String,
        nullable=False,
    )

    dob: Mapped[date] = mapped_column(
        Date,
        nullable=False,
    )

    # NULL and an empty array are different states and both are preserved
    stacks: Mapped[list[str] | None] = mapped_column(
        ARRAY(String),
        nullable=True,
    )

    def __repr__(self) -> str:
        return f"<Person(id={self.id!r}, nickname={self.nickname!r})>"
