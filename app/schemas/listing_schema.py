from datetime import datetime
from typing import Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from enums.house_type import HouseType
from enums.land_type import LandType
from enums.listing_kind import ListingKind
from enums.listing_status import ListingStatus, RENTAL_STATUSES, allowed_statuses
from enums.rent_period import RentPeriod


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LandmarkItem(CamelModel):
    name: Optional[str] = None
    distance: Optional[str] = ""


class DocumentItem(CamelModel):
    name: Optional[str] = None
    url: Optional[str] = None


def _check_kind_status(kind: ListingKind, status: Optional[ListingStatus]):
    if status is not None and status not in allowed_statuses(kind):
        raise ValueError(f"Status '{status.value}' is not valid for a {kind.value}")


def _check_rent_terms(status, rent_price, rent_period):
    if status in RENTAL_STATUSES and (rent_price is None or rent_period is None):
        raise ValueError("rentPrice and rentPeriod are required when the status is 'For Rent' or 'Rented'")


# Create schemas


class ListingCreateBase(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    location: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., gt=0)
    size: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    status: ListingStatus = ListingStatus.AVAILABLE
    images: List[str] = []
    video: Optional[str] = None
    brochure_url: Optional[str] = None
    purchase_date: Optional[datetime] = None
    inspection_dates: List[datetime] = []
    features: List[str] = []
    landmarks: List[LandmarkItem] = []
    documents: List[DocumentItem] = []
    owner_id: Optional[int] = None


class LandCreate(ListingCreateBase):
    land_type: LandType = Field(LandType.RESIDENTIAL, alias="type")

    @model_validator(mode="after")
    def check_status(self):
        _check_kind_status(ListingKind.LAND, self.status)
        return self


class BuildingCreateBase(ListingCreateBase):
    bedrooms: int = Field(..., ge=0)
    bathrooms: int = Field(..., ge=0)
    year_built: Optional[int] = None
    rent_price: Optional[float] = Field(None, gt=0)
    rent_period: Optional[RentPeriod] = None

    @model_validator(mode="after")
    def check_rent_terms(self):
        _check_rent_terms(self.status, self.rent_price, self.rent_period)
        return self


class HouseCreate(BuildingCreateBase):
    property_type: HouseType
    garage: bool = False
    garage_capacity: int = Field(0, ge=0)
    has_garden: bool = False
    has_pool: bool = False


class ApartmentCreate(BuildingCreateBase):
    floor: int
    unit: str = Field(..., min_length=1)
    has_balcony: bool = False
    has_parking_space: bool = False
    has_elevator: bool = False
    building_amenities: List[str] = []


# Update schemas (every field optional; only the fields sent are applied)


class ListingUpdateBase(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[float] = Field(None, gt=0)
    size: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    status: Optional[ListingStatus] = None
    images: Optional[List[str]] = None
    video: Optional[str] = None
    brochure_url: Optional[str] = None
    purchase_date: Optional[datetime] = None
    inspection_dates: Optional[List[datetime]] = None
    features: Optional[List[str]] = None
    landmarks: Optional[List[LandmarkItem]] = None
    documents: Optional[List[DocumentItem]] = None
    owner_id: Optional[int] = None

    @field_validator("title", "location", "price", "size", "description")
    @classmethod
    def not_null(cls, value):
        # Required columns may be changed but never cleared
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class LandUpdate(ListingUpdateBase):
    land_type: Optional[LandType] = Field(None, alias="type")

    @model_validator(mode="after")
    def check_status(self):
        _check_kind_status(ListingKind.LAND, self.status)
        return self


class BuildingUpdateBase(ListingUpdateBase):
    bedrooms: Optional[int] = Field(None, ge=0)
    bathrooms: Optional[int] = Field(None, ge=0)
    year_built: Optional[int] = None
    rent_price: Optional[float] = Field(None, gt=0)
    rent_period: Optional[RentPeriod] = None


class HouseUpdate(BuildingUpdateBase):
    property_type: Optional[HouseType] = None
    garage: Optional[bool] = None
    garage_capacity: Optional[int] = Field(None, ge=0)
    has_garden: Optional[bool] = None
    has_pool: Optional[bool] = None


class ApartmentUpdate(BuildingUpdateBase):
    floor: Optional[int] = None
    unit: Optional[str] = Field(None, min_length=1)
    has_balcony: Optional[bool] = None
    has_parking_space: Optional[bool] = None
    has_elevator: Optional[bool] = None
    building_amenities: Optional[List[str]] = None


# Responses


class ListingResponseBase(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    kind: ListingKind
    title: str
    location: str
    price: float
    size: str
    status: ListingStatus
    description: str
    images: List[str] = []
    video: Optional[str] = None
    brochure_url: Optional[str] = None
    purchase_date: Optional[datetime] = None
    inspection_dates: List[datetime] = []
    features: List[str] = []
    landmarks: List[LandmarkItem] = []
    documents: List[DocumentItem] = []
    owner_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("images", "inspection_dates", "features", "landmarks", "documents", mode="before")
    @classmethod
    def none_as_empty(cls, value):
        return value or []


class LandResponse(ListingResponseBase):
    land_type: Optional[LandType] = Field(None, alias="type")


class BuildingResponseBase(ListingResponseBase):
    bedrooms: Optional[int] = None
    bathrooms: Optional[int] = None
    year_built: Optional[int] = None
    rent_price: Optional[float] = None
    rent_period: Optional[RentPeriod] = None


class HouseResponse(BuildingResponseBase):
    property_type: Optional[HouseType] = None
    garage: bool = False
    garage_capacity: int = 0
    has_garden: bool = False
    has_pool: bool = False


class ApartmentResponse(BuildingResponseBase):
    floor: Optional[int] = None
    unit: Optional[str] = None
    has_balcony: bool = False
    has_parking_space: bool = False
    has_elevator: bool = False
    building_amenities: List[str] = []

    @field_validator("building_amenities", mode="before")
    @classmethod
    def amenities_none_as_empty(cls, value):
        return value or []


class ListingSummary(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    kind: ListingKind
    title: str
    location: str
    price: float
    status: ListingStatus


CREATE_SCHEMAS: Dict[ListingKind, Type[ListingCreateBase]] = {
    ListingKind.LAND: LandCreate,
    ListingKind.HOUSE: HouseCreate,
    ListingKind.APARTMENT: ApartmentCreate,
}

UPDATE_SCHEMAS: Dict[ListingKind, Type[ListingUpdateBase]] = {
    ListingKind.LAND: LandUpdate,
    ListingKind.HOUSE: HouseUpdate,
    ListingKind.APARTMENT: ApartmentUpdate,
}

RESPONSE_SCHEMAS: Dict[ListingKind, Type[ListingResponseBase]] = {
    ListingKind.LAND: LandResponse,
    ListingKind.HOUSE: HouseResponse,
    ListingKind.APARTMENT: ApartmentResponse,
}


def listing_to_response(listing) -> ListingResponseBase:
    return RESPONSE_SCHEMAS[ListingKind(listing.kind)].model_validate(listing)
