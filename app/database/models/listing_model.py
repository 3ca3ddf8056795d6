from sqlalchemy import Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from database.init import Base
from database.models.user_model import utcnow
from enums.listing_kind import ListingKind
from enums.listing_status import ListingStatus


class Listing(Base):
    """A land, house or apartment offered for sale or rent.

    All kinds share one table; columns that only make sense for some kinds
    are nullable and filled in by the matching subclass.
    """

    __tablename__ = "listings"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(20), nullable=False, index=True)

    title = Column(String(200), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    size = Column(String(100), nullable=False)
    status = Column(String(20), default=ListingStatus.AVAILABLE.value, nullable=False, index=True)
    description = Column(Text, nullable=False)

    images = Column(JSON, default=list)
    video = Column(String(500), nullable=True)
    brochure_url = Column(String(500), nullable=True)
    purchase_date = Column(DateTime, nullable=True)
    inspection_dates = Column(JSON, default=list)
    features = Column(JSON, default=list)
    landmarks = Column(JSON, default=list)
    documents = Column(JSON, default=list)

    # land
    land_type = Column(String(20), nullable=True)

    # buildings
    property_type = Column(String(20), nullable=True)
    bedrooms = Column(Integer, nullable=True)
    bathrooms = Column(Integer, nullable=True)
    year_built = Column(Integer, nullable=True)
    rent_price = Column(Float, nullable=True)
    rent_period = Column(String(10), nullable=True)

    # house
    garage = Column(Boolean, default=False)
    garage_capacity = Column(Integer, default=0)
    has_garden = Column(Boolean, default=False)
    has_pool = Column(Boolean, default=False)

    # apartment
    floor = Column(Integer, nullable=True)
    unit = Column(String(50), nullable=True)
    has_balcony = Column(Boolean, default=False)
    has_parking_space = Column(Boolean, default=False)
    has_elevator = Column(Boolean, default=False)
    building_amenities = Column(JSON, default=list)

    owner_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    owner = relationship("User")

    __mapper_args__ = {"polymorphic_on": kind}

    def __repr__(self):
        return f"<{type(self).__name__}(id={self.id}, title='{self.title}')>"


class Land(Listing):
    __mapper_args__ = {"polymorphic_identity": ListingKind.LAND.value}


class House(Listing):
    __mapper_args__ = {"polymorphic_identity": ListingKind.HOUSE.value}


class Apartment(Listing):
    __mapper_args__ = {"polymorphic_identity": ListingKind.APARTMENT.value}


LISTING_MODELS = {
    ListingKind.LAND: Land,
    ListingKind.HOUSE: House,
    ListingKind.APARTMENT: Apartment,
}
