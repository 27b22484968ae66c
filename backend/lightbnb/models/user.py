"""User model — guests and property owners."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from lightbnb.database import Base, SerialPrimaryKeyMixin


class User(SerialPrimaryKeyMixin, Base):
    """A LightBnB account. The same account can own properties and book stays."""

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email!r}>"
