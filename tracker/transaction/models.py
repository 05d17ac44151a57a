"""Transaction model for the database."""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from tracker.core.database import Base


class Transaction(Base):
    """Income or outcome record owned by a single user."""
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    nominal = Column(Numeric(14, 2), nullable=True)
    transaction_date = Column(DateTime, nullable=False, index=True)  # naive UTC
    status = Column(String(10), nullable=False)
    description = Column(String(255), nullable=True)

    # Relationships
    user = relationship("User", back_populates="transactions")
