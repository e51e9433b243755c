"""
User table - schema of the Users table the data-access layer reads and writes.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from dbinteraction.db.base import Base


class User(Base):
    """Users row. Columns keep the database's PascalCase names."""

    __tablename__ = "Users"

    id: Mapped[int] = mapped_column("Id", primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column("FirstName", String(255), nullable=False)
    last_name: Mapped[str] = mapped_column("LastName", String(255), nullable=False)
    email_address: Mapped[str] = mapped_column(
        "EmailAddress", String(255), unique=True, index=True, nullable=False
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email_address={self.email_address})>"
