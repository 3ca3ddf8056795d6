import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from config import Settings, get_settings
from database.init import get_db
from database.models.user_model import User
from schemas.auth_schema import (
    ForgotPasswordRequest,
    LoginRequest,
    PasswordUpdate,
    RegisterRequest,
    UserResponse,
)
from services.auth_service import (
    authenticate,
    change_password,
    create_user,
    get_user_by_email,
    reset_password,
)
from services.email_service import EmailService, get_email_service
from utils.dependencies import (
    create_access_token,
    get_current_user,
    set_token_cookie,
    verify_password,
)

from responses.success import created_response, data_response, success_response
from responses.error import (
    bad_request_error,
    internal_server_error,
    not_found_error,
    unauthorized_error,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def token_response(user: User, settings: Settings, message: str, status_code: int = 200):
    """Body carries the token and user; the same token is set as an httpOnly cookie."""
    token = create_access_token(user, settings)
    payload = {"token": token, "tokenType": "bearer", "user": UserResponse.model_validate(user)}
    if status_code == 201:
        response = created_response(payload, message)
    else:
        response = data_response(payload, message)
    return set_token_cookie(response, token, settings)


@router.post("/register")
def register(
    payload: RegisterRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if get_user_by_email(payload.email, db):
        return bad_request_error("User already exists", error="conflict")

    try:
        user = create_user(payload, db)
        logger.info("Registered user %s", user.id)
        return token_response(user, settings, "Registration successful", status_code=201)
    except Exception as e:
        logger.exception("Failed to register user")
        return internal_server_error(f"Failed to register user: {str(e)}")


@router.post("/login")
def login(
    credentials: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user = authenticate(credentials.email, credentials.password, db)
        if not user:
            return unauthorized_error("Invalid credentials")
        return token_response(user, settings, "Login successful")
    except Exception as e:
        logger.exception("Login failed")
        return internal_server_error(str(e))


@router.post("/logout")
def logout(settings: Settings = Depends(get_settings)):
    response = success_response("Logged out successfully")
    response.delete_cookie(settings.token_cookie_name)
    return response


@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return data_response(UserResponse.model_validate(current_user))


@router.patch("/password")
def update_password(
    payload: PasswordUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Route for any authenticated user to update their own password"""
    try:
        if not verify_password(payload.current_password, current_user.hashed_password):
            return unauthorized_error("Current password is incorrect")

        change_password(current_user, payload.new_password, db)
        return success_response("Password updated successfully")
    except Exception as e:
        logger.exception("Failed to update password for user %s", current_user.id)
        return internal_server_error(str(e))


@router.post("/forgot-password")
async def forgot_password(
    payload: ForgotPasswordRequest,
    db: Session = Depends(get_db),
    email_service: EmailService = Depends(get_email_service),
):
    try:
        user = get_user_by_email(payload.email, db)
        if not user:
            return not_found_error("User not found")

        new_password = reset_password(user, db)
        await email_service.send_new_password_email(user.email, new_password)

        return success_response("Check your email for the new password")
    except Exception as e:
        logger.exception("Password reset failed")
        return internal_server_error(str(e))
