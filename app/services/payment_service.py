import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session, joinedload

from database.models import Listing, Payment, Purchase, User
from enums.listing_kind import ListingKind
from enums.payment_status import PaymentStatus, TERMINAL_PAYMENT_STATUSES
from schemas.payment_schema import PaymentCreate
from services.base_service import BaseService
from utils.exceptions import NotFoundError, PaymentFinalizedError, ValidationFailed

logger = logging.getLogger(__name__)


class PaymentService(BaseService):
    def __init__(self):
        super().__init__(Payment)

    def _with_relations(self, db: Session):
        return db.query(Payment).options(
            joinedload(Payment.user),
            joinedload(Payment.property),
            joinedload(Payment.land),
        )

    def get_payment(self, db: Session, payment_id: int) -> Optional[Payment]:
        return self._with_relations(db).filter(Payment.id == payment_id).first()

    def _check_listing(self, db: Session, listing_id: int, land: bool) -> None:
        listing = db.get(Listing, listing_id)
        if listing is None:
            raise NotFoundError(f"No property found with id {listing_id}")
        if (listing.kind == ListingKind.LAND.value) != land:
            field = "landId" if land else "propertyId"
            raise ValidationFailed(f"{field} {listing_id} refers to a {listing.kind}")

    def create_payment(self, db: Session, payment_in: PaymentCreate, user: User) -> Payment:
        """landId must name a land listing and propertyId a house or apartment."""
        if payment_in.land_id is not None:
            self._check_listing(db, payment_in.land_id, land=True)
        if payment_in.property_id is not None:
            self._check_listing(db, payment_in.property_id, land=False)

        payment = Payment(
            user_id=user.id,
            amount=payment_in.amount,
            method=payment_in.method.value,
            land_id=payment_in.land_id,
            property_id=payment_in.property_id,
            status=PaymentStatus.PENDING.value,
        )
        if payment_in.payment_date is not None:
            payment.payment_date = payment_in.payment_date

        payment = self.create(db, payment)
        logger.info("Payment %s created by user %s", payment.id, user.id)
        return payment

    def get_history(self, db: Session, user: User) -> List[Payment]:
        return (
            self._with_relations(db)
            .filter(Payment.user_id == user.id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .all()
        )

    def list_payments(
        self, db: Session, page: int = 1, limit: int = 10, status: Optional[PaymentStatus] = None
    ) -> Tuple[List[Payment], int]:
        query = self._with_relations(db)
        if status is not None:
            query = query.filter(Payment.status == PaymentStatus(status).value)
        query = query.order_by(Payment.created_at.desc(), Payment.id.desc())
        return self.paginate(query, page, limit)

    def _finalize(self, payment: Payment, status: PaymentStatus) -> Payment:
        if PaymentStatus(payment.status) in TERMINAL_PAYMENT_STATUSES:
            raise PaymentFinalizedError(
                f"Payment {payment.id} is already {payment.status}"
            )
        payment.status = status.value
        payment.updated_at = datetime.now(timezone.utc)
        return payment

    def complete_payment(self, db: Session, payment: Payment) -> Payment:
        """Mark a pending payment completed and record the purchase for the payer."""
        self._finalize(payment, PaymentStatus.COMPLETED)

        for listing_id in (payment.property_id, payment.land_id):
            if listing_id is None:
                continue
            if db.get(Purchase, (payment.user_id, listing_id)) is None:
                db.add(Purchase(user_id=payment.user_id, listing_id=listing_id))

        db.commit()
        db.refresh(payment)
        logger.info("Payment %s completed", payment.id)
        return payment

    def fail_payment(self, db: Session, payment: Payment) -> Payment:
        self._finalize(payment, PaymentStatus.FAILED)
        db.commit()
        db.refresh(payment)
        logger.info("Payment %s failed", payment.id)
        return payment
