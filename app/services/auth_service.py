import secrets
import string
from typing import Optional

from sqlalchemy.orm import Session

from database.models import User
from enums.user_role import UserRole
from schemas.auth_schema import RegisterRequest
from utils.dependencies import hash_password, verify_password


def create_user(payload: RegisterRequest, db: Session, role: UserRole = UserRole.USER) -> User:
    user = User(
        name=payload.name,
        email=payload.email.lower(),
        phone=payload.phone,
        hashed_password=hash_password(payload.password),
        role=role.value,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user_by_email(email: str, db: Session, role: Optional[UserRole] = None):
    query = db.query(User).filter(User.email == email.lower())
    if role is not None:
        query = query.filter(User.role == role.value)
    return query.first()


def get_user_by_id(user_id: int, db: Session):
    return db.query(User).filter(User.id == user_id).first()


def authenticate(email: str, password: str, db: Session) -> Optional[User]:
    user = get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def change_password(user: User, new_password: str, db: Session) -> User:
    user.hashed_password = hash_password(new_password)
    db.commit()
    db.refresh(user)
    return user


def generate_temporary_password(length: int = 10) -> str:
    alphabet = string.ascii_letters + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def reset_password(user: User, db: Session) -> str:
    """Replace the user's password with a random one and return it."""
    new_password = generate_temporary_password()
    change_password(user, new_password, db)
    return new_password
