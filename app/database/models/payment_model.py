from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from database.init import Base
from database.models.user_model import utcnow
from enums.payment_status import PaymentStatus


class Payment(Base):
    __tablename__ = "payments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    method = Column(String(20), nullable=False)
    status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)
    # Both references are kept; clients historically send either one.
    property_id = Column(Integer, ForeignKey("listings.id", ondelete="SET NULL"), nullable=True)
    land_id = Column(Integer, ForeignKey("listings.id", ondelete="SET NULL"), nullable=True)
    payment_date = Column(DateTime(timezone=True), default=utcnow)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user = relationship("User", back_populates="payments")
    property = relationship("Listing", foreign_keys=[property_id])
    land = relationship("Listing", foreign_keys=[land_id])