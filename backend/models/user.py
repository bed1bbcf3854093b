"""User model definitions."""

from sqlalchemy import Column, Integer, String
from backend.database import Base


DEFAULT_ROLE = "user"


class User(Base):
    """Represents a registered account."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(50), nullable=False, default=DEFAULT_ROLE)  # user/...
