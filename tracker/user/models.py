"""User model for the database."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from tracker.core.database import Base


class User(Base):
    """User model representing an account holder."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False)
    password = Column(String(255), nullable=False)  # Hashed password

    # Relationship with Transactions
    transactions = relationship("Transaction", back_populates="user")
