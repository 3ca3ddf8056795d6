"""Client-side validation and payload building for the listing forms."""

from typing import Any, Dict, List

from enums.house_type import HouseType
from enums.land_type import LandType
from enums.listing_status import ListingStatus, RENTAL_STATUSES, allowed_statuses
from enums.listing_kind import ListingKind
from enums.rent_period import RentPeriod

KIND_BY_PAGE = {
    "lands": ListingKind.LAND,
    "houses": ListingKind.HOUSE,
    "apartments": ListingKind.APARTMENT,
}

REQUIRED_FIELDS = {
    "title": "Title",
    "location": "Location",
    "size": "Size",
    "description": "Description",
}

LAND_TYPES = [t.value for t in LandType]
HOUSE_TYPES = [t.value for t in HouseType]
RENT_PERIODS = [p.value for p in RentPeriod]


def status_options(kind: str) -> List[str]:
    allowed = allowed_statuses(KIND_BY_PAGE[kind])
    return [s.value for s in ListingStatus if s in allowed]


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _split_lines(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    return [line.strip() for line in str(value).splitlines() if line.strip()]


def validate_listing_form(kind: str, values: Dict[str, Any]) -> List[str]:
    """Return human readable problems with the form, empty when it can be submitted."""
    errors = []
    for field, label in REQUIRED_FIELDS.items():
        if _blank(values.get(field)):
            errors.append(f"{label} is required")

    price = values.get("price")
    if price is None or price == "":
        errors.append("Price is required")
    else:
        try:
            if float(price) <= 0:
                errors.append("Price must be greater than 0")
        except (TypeError, ValueError):
            errors.append("Price must be a number")

    status = values.get("status") or ListingStatus.AVAILABLE.value
    if status not in status_options(kind):
        errors.append(f"Status '{status}' is not valid for {kind}")

    if kind == "houses" and _blank(values.get("property_type")):
        errors.append("Property type is required")
    if kind == "apartments":
        if values.get("floor") is None:
            errors.append("Floor is required")
        if _blank(values.get("unit")):
            errors.append("Unit is required")

    if kind in ("houses", "apartments"):
        for field, label in (("bedrooms", "Bedrooms"), ("bathrooms", "Bathrooms")):
            if values.get(field) is None:
                errors.append(f"{label} is required")
        if status in {s.value for s in RENTAL_STATUSES}:
            if not values.get("rent_price"):
                errors.append("Rent price is required for rental listings")
            if _blank(values.get("rent_period")):
                errors.append("Rent period is required for rental listings")

    return errors


def build_listing_payload(kind: str, values: Dict[str, Any]) -> Dict[str, Any]:
    """Convert form values into the camelCase body the API expects."""
    payload = {
        "title": values["title"].strip(),
        "location": values["location"].strip(),
        "price": float(values["price"]),
        "size": str(values["size"]).strip(),
        "description": values["description"].strip(),
        "status": values.get("status") or ListingStatus.AVAILABLE.value,
        "images": _split_lines(values.get("images")),
        "features": _split_lines(values.get("features")),
    }
    if not _blank(values.get("video")):
        payload["video"] = values["video"].strip()
    if not _blank(values.get("brochure_url")):
        payload["brochureUrl"] = values["brochure_url"].strip()

    if kind == "lands":
        payload["type"] = values.get("land_type") or LandType.RESIDENTIAL.value
        return payload

    payload["bedrooms"] = int(values["bedrooms"])
    payload["bathrooms"] = int(values["bathrooms"])
    if values.get("year_built"):
        payload["yearBuilt"] = int(values["year_built"])
    if payload["status"] in {s.value for s in RENTAL_STATUSES}:
        payload["rentPrice"] = float(values["rent_price"])
        payload["rentPeriod"] = values["rent_period"]

    if kind == "houses":
        payload["propertyType"] = values["property_type"]
        payload["garage"] = bool(values.get("garage"))
        payload["garageCapacity"] = int(values.get("garage_capacity") or 0)
        payload["hasGarden"] = bool(values.get("has_garden"))
        payload["hasPool"] = bool(values.get("has_pool"))
    else:
        payload["floor"] = int(values["floor"])
        payload["unit"] = str(values["unit"]).strip()
        payload["hasBalcony"] = bool(values.get("has_balcony"))
        payload["hasParkingSpace"] = bool(values.get("has_parking_space"))
        payload["hasElevator"] = bool(values.get("has_elevator"))
        payload["buildingAmenities"] = _split_lines(values.get("building_amenities"))
    return payload
