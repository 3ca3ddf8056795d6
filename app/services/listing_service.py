import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database.models import LISTING_MODELS, Favorite, Listing, Payment, Purchase, User
from enums.listing_kind import ListingKind
from enums.listing_status import ListingStatus, RENTAL_STATUSES, can_transition
from schemas.listing_schema import ListingCreateBase, ListingUpdateBase
from services.base_service import BaseService
from utils.exceptions import (
    DuplicateFavoriteError,
    InvalidStatusTransition,
    ValidationFailed,
)

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "price": "price",
    "title": "title",
    "size": "size",
    "location": "location",
}

# Shorthands sent by the listing pages' sort dropdown
SORT_PRESETS = {
    "newest": ("created_at", "desc"),
    "oldest": ("created_at", "asc"),
    "priceAsc": ("price", "asc"),
    "priceDesc": ("price", "desc"),
    "sizeAsc": ("size", "asc"),
    "sizeDesc": ("size", "desc"),
}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains(column, term: str):
    """Case-insensitive substring match."""
    return column.ilike(f"%{_escape_like(term)}%", escape="\\")


class ListingService(BaseService):
    """CRUD, search and favorites for one kind of listing."""

    def __init__(self, kind: ListingKind):
        super().__init__(LISTING_MODELS[kind])
        self.kind = kind

    # Queries

    def resolve_sort(self, sort_by: Optional[str], sort_order: Optional[str]):
        sort_by = sort_by or "createdAt"
        if sort_by in SORT_PRESETS:
            field, preset_order = SORT_PRESETS[sort_by]
            sort_order = sort_order or preset_order
        else:
            field = SORT_FIELDS.get(sort_by) or (sort_by if sort_by in SORT_FIELDS.values() else None)
            if field is None:
                raise ValidationFailed(f"Invalid sort field '{sort_by}'")

        sort_order = (sort_order or "desc").lower()
        if sort_order not in ("asc", "desc"):
            raise ValidationFailed(f"Invalid sort order '{sort_order}'")

        column = getattr(self.model, field)
        if sort_order == "asc":
            return [column.asc(), self.model.id.asc()]
        return [column.desc(), self.model.id.desc()]

    def list_listings(
        self,
        db: Session,
        page: int = 1,
        limit: int = 10,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        status: Optional[ListingStatus] = None,
    ) -> Tuple[List[Listing], int]:
        query = db.query(self.model)
        if status is not None:
            query = query.filter(self.model.status == ListingStatus(status).value)
        query = query.order_by(*self.resolve_sort(sort_by, sort_order))
        return self.paginate(query, page, limit)

    def list_available(self, db: Session, page: int = 1, limit: int = 10, sort_by=None, sort_order=None):
        return self.list_listings(db, page, limit, sort_by, sort_order, status=ListingStatus.AVAILABLE)

    def search(
        self,
        db: Session,
        term: str,
        page: int = 1,
        limit: int = 10,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Tuple[List[Listing], int]:
        term = (term or "").strip()
        if not term:
            raise ValidationFailed("Search query is required")

        query = db.query(self.model).filter(
            or_(
                contains(self.model.title, term),
                contains(self.model.location, term),
                contains(self.model.description, term),
            )
        )
        query = query.order_by(*self.resolve_sort(sort_by, sort_order))
        return self.paginate(query, page, limit)

    def filter(
        self,
        db: Session,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        location: Optional[str] = None,
        size: Optional[str] = None,
        status: Optional[ListingStatus] = None,
        page: int = 1,
        limit: int = 10,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Tuple[List[Listing], int]:
        if min_price is not None and max_price is not None and min_price > max_price:
            raise ValidationFailed("minPrice cannot be greater than maxPrice")

        query = db.query(self.model)
        if min_price is not None:
            query = query.filter(self.model.price >= min_price)
        if max_price is not None:
            query = query.filter(self.model.price <= max_price)
        if location:
            query = query.filter(contains(self.model.location, location))
        if size:
            query = query.filter(contains(self.model.size, size))
        if status is not None:
            query = query.filter(self.model.status == ListingStatus(status).value)

        query = query.order_by(*self.resolve_sort(sort_by, sort_order))
        return self.paginate(query, page, limit)

    def get_listing(self, db: Session, listing_id: int) -> Optional[Listing]:
        return self.get(db, listing_id)

    # Mutations

    @staticmethod
    def _column_values(payload, exclude_unset: bool = False) -> Dict:
        values = payload.model_dump(mode="json", exclude_unset=exclude_unset)
        # DateTime column; everything else is stored as its JSON form
        if "purchase_date" in values:
            values["purchase_date"] = payload.purchase_date
        return values

    def _check_owner(self, db: Session, owner_id: Optional[int]):
        if owner_id is not None and db.get(User, owner_id) is None:
            raise ValidationFailed(f"No user found with id {owner_id}")

    def create_listing(self, db: Session, payload: ListingCreateBase) -> Listing:
        values = self._column_values(payload)
        self._check_owner(db, values.get("owner_id"))
        listing = self.create(db, values)
        logger.info("Created %s %s", self.kind.value, listing.id)
        return listing

    def update_listing(self, db: Session, listing: Listing, payload: ListingUpdateBase) -> Listing:
        values = self._column_values(payload, exclude_unset=True)
        if "owner_id" in values:
            self._check_owner(db, values["owner_id"])

        current = ListingStatus(listing.status)
        target = ListingStatus(values.get("status", current))
        if not can_transition(self.kind, current, target):
            raise InvalidStatusTransition(self.kind.value, current.value, target.value)

        if target in RENTAL_STATUSES:
            rent_price = values.get("rent_price", listing.rent_price)
            rent_period = values.get("rent_period", listing.rent_period)
            if rent_price is None or rent_period is None:
                raise ValidationFailed(
                    "rentPrice and rentPeriod are required when the status is 'For Rent' or 'Rented'"
                )

        return self.update(db, listing, values)

    def delete_listing(self, db: Session, listing: Listing) -> Dict[str, int]:
        """
        Delete a listing together with everything that points at it.

        Favorites and purchase records are removed and payment references are
        cleared in the same transaction as the delete; any failure rolls the
        whole cascade back.
        """
        listing_id = listing.id
        try:
            favorites = (
                db.query(Favorite)
                .filter(Favorite.listing_id == listing_id)
                .delete(synchronize_session=False)
            )
            purchases = (
                db.query(Purchase)
                .filter(Purchase.listing_id == listing_id)
                .delete(synchronize_session=False)
            )
            db.query(Payment).filter(Payment.property_id == listing_id).update(
                {Payment.property_id: None}, synchronize_session=False
            )
            db.query(Payment).filter(Payment.land_id == listing_id).update(
                {Payment.land_id: None}, synchronize_session=False
            )
            db.delete(listing)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Rolled back delete of %s %s", self.kind.value, listing_id)
            raise

        logger.info(
            "Deleted %s %s (favorites=%s, purchases=%s)",
            self.kind.value, listing_id, favorites, purchases,
        )
        return {"favorites": favorites, "purchases": purchases}

    # Favorites & purchases

    def add_favorite(self, db: Session, user: User, listing: Listing) -> Favorite:
        existing = (
            db.query(Favorite)
            .filter(
                Favorite.user_id == user.id,
                Favorite.property_type == self.kind.label,
                Favorite.listing_id == listing.id,
            )
            .first()
        )
        if existing:
            raise DuplicateFavoriteError(f"{self.kind.label} already in favorites")

        favorite = Favorite(user_id=user.id, property_type=self.kind.label, listing_id=listing.id)
        db.add(favorite)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateFavoriteError(f"{self.kind.label} already in favorites")
        db.refresh(favorite)
        return favorite

    def remove_favorite(self, db: Session, user: User, listing_id: int) -> bool:
        removed = (
            db.query(Favorite)
            .filter(
                Favorite.user_id == user.id,
                Favorite.property_type == self.kind.label,
                Favorite.listing_id == listing_id,
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        return removed > 0

    def get_favorites(self, db: Session, user: User) -> List[Listing]:
        return (
            db.query(self.model)
            .join(Favorite, Favorite.listing_id == self.model.id)
            .filter(
                Favorite.user_id == user.id,
                Favorite.property_type == self.kind.label,
            )
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .all()
        )

    def get_purchased(self, db: Session, user: User) -> List[Listing]:
        return (
            db.query(self.model)
            .join(Purchase, Purchase.listing_id == self.model.id)
            .filter(Purchase.user_id == user.id)
            .order_by(Purchase.purchased_at.desc())
            .all()
        )
