"""SQLAlchemy model for user accounts."""

from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.database import Base


class User(Base):
    """
    User account.

    `password` holds a salted werkzeug hash, never the plain text. Email is
    unique; a duplicate registration fails on the constraint.
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    recipes = relationship("Recipe", back_populates="owner")

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"
