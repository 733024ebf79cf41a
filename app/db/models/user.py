from app.db.base import Base
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

IDENTITY_FIELDS = ("id", "email", "name", "given_name", "family_name", "picture", "locale")


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True)
    name: Mapped[str | None] = mapped_column(String, nullable=True)
    given_name: Mapped[str | None] = mapped_column(String, nullable=True)
    family_name: Mapped[str | None] = mapped_column(String, nullable=True)
    picture: Mapped[str | None] = mapped_column(String, nullable=True)
    locale: Mapped[str | None] = mapped_column(String, nullable=True)

    def identity_snapshot(self) -> dict:
        return {field: getattr(self, field) for field in IDENTITY_FIELDS}
