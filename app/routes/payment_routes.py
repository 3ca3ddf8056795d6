import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models.user_model import User
from enums.payment_status import PaymentStatus
from schemas.payment_schema import PaymentCreate, PaymentDetailResponse, PaymentResponse
from services.payment_service import PaymentService
from utils.dependencies import admin_required, get_current_user
from utils.exceptions import NotFoundError, PaymentFinalizedError, ValidationFailed
from responses.success import created_response, data_response, paginated_response
from responses.error import (
    bad_request_error,
    forbidden_error,
    internal_server_error,
    not_found_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payments", tags=["Payments"])
payment_service = PaymentService()


@router.get("/history")
def payment_history(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Payments made by the current user, newest first"""
    payments = payment_service.get_history(db, current_user)
    return data_response([PaymentDetailResponse.model_validate(p) for p in payments])


@router.post("")
def create_payment(
    payment_in: PaymentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        payment = payment_service.create_payment(db, payment_in, current_user)
        return created_response(PaymentResponse.model_validate(payment), "Payment created")
    except NotFoundError as e:
        return not_found_error(str(e))
    except ValidationFailed as e:
        return bad_request_error(str(e))
    except Exception as e:
        logger.exception("Failed to create payment for user %s", current_user.id)
        return internal_server_error(str(e))


@router.get("")
def list_payments(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    status: Optional[PaymentStatus] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    payments, total = payment_service.list_payments(db, page, limit, status)
    return paginated_response(
        [PaymentDetailResponse.model_validate(p) for p in payments], total, page, limit
    )


@router.get("/{payment_id}")
def get_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = payment_service.get_payment(db, payment_id)
    if not payment:
        return not_found_error("Payment not found")
    if payment.user_id != current_user.id and not current_user.is_admin:
        return forbidden_error("You can only view your own payments")
    return data_response(PaymentDetailResponse.model_validate(payment))


def _finalize(db: Session, payment_id: int, complete: bool):
    payment = payment_service.get_payment(db, payment_id)
    if not payment:
        return not_found_error("Payment not found")
    try:
        if complete:
            payment = payment_service.complete_payment(db, payment)
        else:
            payment = payment_service.fail_payment(db, payment)
        return data_response(
            PaymentResponse.model_validate(payment), f"Payment marked as {payment.status}"
        )
    except PaymentFinalizedError as e:
        return bad_request_error(str(e))
    except Exception as e:
        logger.exception("Failed to update payment %s", payment_id)
        return internal_server_error(str(e))


@router.patch("/{payment_id}/complete")
def complete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    return _finalize(db, payment_id, complete=True)


@router.patch("/{payment_id}/fail")
def fail_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    return _finalize(db, payment_id, complete=False)
