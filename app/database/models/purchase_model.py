from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from database.init import Base
from database.models.user_model import utcnow


class Purchase(Base):
    """A listing recorded in a user's purchased list."""

    __tablename__ = "purchases"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    listing_id = Column(Integer, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True)
    purchased_at = Column(DateTime(timezone=True), default=utcnow)

    user = relationship("User", back_populates="purchases")
    listing = relationship("Listing")
