import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database.init import get_db
from database.models.user_model import User
from enums.user_role import UserRole
from routes.auth_routes import token_response
from schemas.auth_schema import LoginRequest, RoleUpdate, UserResponse
from services.admin_service import AdminService
from services.auth_service import get_user_by_email
from utils.dependencies import admin_required, verify_password
from responses.success import data_response, paginated_response, success_response
from responses.error import (
    bad_request_error,
    internal_server_error,
    not_found_error,
    unauthorized_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/login")
def admin_login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    admin = get_user_by_email(credentials.email, db, role=UserRole.ADMIN)
    if not admin:
        return not_found_error("Admin not found")
    if not verify_password(credentials.password, admin.hashed_password):
        return unauthorized_error("Invalid credentials")
    logger.info("Admin %s logged in", admin.id)
    return token_response(admin, settings, "Admin login successful")


@router.get("/dashboard")
def dashboard(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    try:
        return data_response(AdminService(db).dashboard())
    except Exception as e:
        logger.exception("Failed to build admin dashboard")
        return internal_server_error(str(e))


@router.get("/stats")
def stats(
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    try:
        return data_response(AdminService(db).stats())
    except Exception as e:
        logger.exception("Failed to compute admin stats")
        return internal_server_error(str(e))


# Users


@router.get("/users")
def list_users(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    users, total = AdminService(db).list_users(page, limit)
    return paginated_response([UserResponse.model_validate(u) for u in users], total, page, limit)


@router.get("/users/{user_id}")
def user_details(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    service = AdminService(db)
    user = service.get_user(user_id)
    if not user:
        return not_found_error("User not found")
    return data_response(service.user_details(user))


@router.put("/users/{user_id}/role")
def update_user_role(
    user_id: int,
    payload: RoleUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    service = AdminService(db)
    user = service.get_user(user_id)
    if not user:
        return not_found_error("User not found")
    if user.id == current_user.id and payload.role != UserRole.ADMIN:
        return bad_request_error("You cannot remove your own admin role")
    user = service.update_role(user, payload.role)
    return data_response(UserResponse.model_validate(user), "User role updated successfully")


@router.delete("/users/{user_id}")
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_required),
):
    service = AdminService(db)
    user = service.get_user(user_id)
    if not user:
        return not_found_error("User not found")
    if user.id == current_user.id:
        return bad_request_error("You cannot delete your own account")
    try:
        service.delete_user(user)
        return success_response("User deleted successfully")
    except Exception as e:
        logger.exception("Failed to delete user %s", user_id)
        return internal_server_error(str(e))


# Placeholders kept for the dashboard's navigation; nothing is stored yet.


def _placeholder_routes(resource: str):
    title = resource.capitalize()

    @router.get(f"/{resource}")
    def list_items(current_user: User = Depends(admin_required)):
        return data_response([])

    @router.post(f"/{resource}")
    def create_item(current_user: User = Depends(admin_required)):
        return success_response(f"{title} feature coming soon")

    @router.put(f"/{resource}/{{item_id}}")
    def update_item(item_id: str, current_user: User = Depends(admin_required)):
        return success_response(f"{title} feature coming soon")

    @router.delete(f"/{resource}/{{item_id}}")
    def delete_item(item_id: str, current_user: User = Depends(admin_required)):
        return success_response(f"{title} feature coming soon")


for _resource in ("announcements", "teams", "inspections"):
    _placeholder_routes(_resource)
