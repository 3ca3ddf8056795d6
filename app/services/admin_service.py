import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database.models import LISTING_MODELS, Listing, Payment, Purchase, User
from enums.listing_kind import ListingKind
from enums.listing_status import ListingStatus, allowed_statuses
from enums.payment_status import PaymentStatus
from enums.user_role import UserRole
from schemas.auth_schema import UserResponse
from schemas.listing_schema import listing_to_response
from schemas.payment_schema import PaymentDetailResponse, PaymentResponse
from services.base_service import BaseService

logger = logging.getLogger(__name__)


def _status_key(status: str) -> str:
    # "For Rent" -> "forRent"
    head, *rest = status.split(" ")
    return head.lower() + "".join(word.capitalize() for word in rest)


class AdminService:
    def __init__(self, db: Session):
        self.db = db

    # Aggregates

    def _counts(self) -> Dict[str, int]:
        db = self.db
        counts = {
            "users": db.query(User).filter(User.role == UserRole.USER.value).count(),
            "payments": db.query(Payment).count(),
        }
        for kind, model in LISTING_MODELS.items():
            counts[kind.plural] = db.query(model).count()
        return counts

    def total_revenue(self) -> float:
        # Summed in Python over every completed payment
        payments = (
            self.db.query(Payment)
            .filter(Payment.status == PaymentStatus.COMPLETED.value)
            .all()
        )
        return sum(payment.amount for payment in payments)

    def _status_distribution(self) -> Dict[str, Dict[str, int]]:
        rows = (
            self.db.query(Listing.kind, Listing.status, func.count(Listing.id))
            .group_by(Listing.kind, Listing.status)
            .all()
        )
        found = {(kind, status): count for kind, status, count in rows}
        distribution = {}
        for kind in ListingKind:
            allowed = allowed_statuses(kind)
            distribution[kind.plural] = {
                _status_key(status.value): found.get((kind.value, status.value), 0)
                for status in ListingStatus
                if status in allowed
            }
        return distribution

    def dashboard(self) -> Dict[str, Any]:
        counts = self._counts()

        recent_payments = (
            self.db.query(Payment)
            .options(joinedload(Payment.user), joinedload(Payment.property), joinedload(Payment.land))
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .limit(5)
            .all()
        )
        recent_users = (
            self.db.query(User)
            .order_by(User.created_at.desc(), User.id.desc())
            .limit(5)
            .all()
        )

        return {
            "counts": {
                "users": counts["users"],
                "properties": sum(counts[kind.plural] for kind in ListingKind),
                "payments": counts["payments"],
            },
            "recentPayments": [PaymentDetailResponse.model_validate(p) for p in recent_payments],
            "recentUsers": [UserResponse.model_validate(u) for u in recent_users],
            "totalRevenue": self.total_revenue(),
            "propertyDistribution": {kind.plural: counts[kind.plural] for kind in ListingKind},
        }

    def stats(self) -> Dict[str, Any]:
        return {
            "counts": self._counts(),
            "revenue": self.total_revenue(),
            "propertyStatus": self._status_distribution(),
        }

    # Users

    def list_users(self, page: int = 1, limit: int = 10) -> Tuple[List[User], int]:
        query = self.db.query(User).order_by(User.created_at.desc(), User.id.desc())
        return BaseService.paginate(query, page, limit)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def user_details(self, user: User) -> Dict[str, Any]:
        purchased = (
            self.db.query(Listing)
            .join(Purchase, Purchase.listing_id == Listing.id)
            .filter(Purchase.user_id == user.id)
            .order_by(Purchase.purchased_at.desc())
            .all()
        )
        properties = {kind.plural: [] for kind in ListingKind}
        for listing in purchased:
            properties[ListingKind(listing.kind).plural].append(listing_to_response(listing))

        payments = (
            self.db.query(Payment)
            .filter(Payment.user_id == user.id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .all()
        )
        return {
            "user": UserResponse.model_validate(user),
            "properties": properties,
            "payments": [PaymentResponse.model_validate(p) for p in payments],
        }

    def update_role(self, user: User, role: UserRole) -> User:
        user.role = UserRole(role).value
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_user(self, user: User) -> None:
        """Delete a user with their favorites, purchases and payments; owned listings are released."""
        user_id = user.id
        try:
            self.db.query(Listing).filter(Listing.owner_id == user_id).update(
                {Listing.owner_id: None}, synchronize_session=False
            )
            # favorites, purchases and payments go with the user through the ORM cascade
            self.db.delete(user)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception("Rolled back delete of user %s", user_id)
            raise
        logger.info("Deleted user %s", user_id)
