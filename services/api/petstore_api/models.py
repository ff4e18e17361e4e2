"""API data models.

SQLAlchemy declarative models for the pet store. The same table definition is
used on PostgreSQL and MySQL; SQLAlchemy emits the dialect-specific DDL
(`SERIAL` vs `AUTO_INCREMENT`).
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class Pet(Base):
    __tablename__ = "pets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    race: Mapped[str] = mapped_column(String(50), nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"Pet(id={self.id!r}, name={self.name!r}, race={self.race!r})"
