from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from schemas.auth_schema import UserMinimumResponse
from schemas.listing_schema import ListingSummary


class PaymentCreate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    amount: float = Field(..., gt=0)
    method: PaymentMethod
    land_id: Optional[int] = None
    property_id: Optional[int] = None
    payment_date: Optional[datetime] = None

    @model_validator(mode="after")
    def check_listing_reference(self):
        if self.land_id is None and self.property_id is None:
            raise ValueError("Either landId or propertyId is required")
        return self


class PaymentResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: int
    user_id: int
    amount: float
    method: PaymentMethod
    status: PaymentStatus
    property_id: Optional[int] = None
    land_id: Optional[int] = None
    payment_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PaymentDetailResponse(PaymentResponse):
    user: Optional[UserMinimumResponse] = None
    property: Optional[ListingSummary] = None
    land: Optional[ListingSummary] = None
