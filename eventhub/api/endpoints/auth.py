# eventhub/api/endpoints/auth.py
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from eventhub.api import deps
from eventhub.constants.statuses import UserRole
from eventhub.core.config import settings
from eventhub.core.email import send_password_reset_email
from eventhub.core.exceptions import (
    AppError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from eventhub.core.limiter import limiter
from eventhub.core.security import (
    create_access_token,
    generate_reset_token,
    hash_reset_token,
)
from eventhub.crud import crud_user
from eventhub.db.session import get_db
from eventhub.models.user import User
from eventhub.schemas.common import Msg
from eventhub.schemas.token import Token
from eventhub.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    UserCreate,
)
from eventhub.utils.dates import utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _user_token(user: User) -> Token:
    return Token(token=create_access_token(user.id))


@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
def signup(user_in: UserCreate, db: Session = Depends(get_db)):
    """Create a regular user account and return a session token."""
    user = crud_user.user.create(db, obj_in=user_in)
    return _user_token(user)


@router.post("/login", response_model=Token)
@limiter.limit("20/minute")
def login(request: Request, credentials: LoginRequest, db: Session = Depends(get_db)):
    user = crud_user.user.authenticate(
        db, email=credentials.email, password=credentials.password
    )
    if not user:
        logger.info(f"Failed login for {credentials.email}")
        raise UnauthorizedError("Invalid credentials")
    return _user_token(user)


@router.post("/admin/login", response_model=Token)
@limiter.limit("10/minute")
def admin_login(
    request: Request, credentials: LoginRequest, db: Session = Depends(get_db)
):
    """
    Admin sign-in. The token carries `role=admin` and lives longer than a
    regular session.
    """
    user = crud_user.user.authenticate(
        db, email=credentials.email, password=credentials.password
    )
    if not user:
        logger.info(f"Failed admin login for {credentials.email}")
        raise UnauthorizedError("Invalid credentials")
    if user.role != UserRole.ADMIN:
        logger.warning(f"Non-admin {user.id} attempted admin login")
        raise ForbiddenError("Access denied. Not an administrator.")

    token = create_access_token(
        user.id,
        role=UserRole.ADMIN,
        expires_minutes=settings.ADMIN_TOKEN_EXPIRE_MINUTES,
    )
    return Token(token=token)


@router.post("/admin/create", response_model=Msg, status_code=status.HTTP_201_CREATED)
def create_admin(
    admin_in: UserCreate,
    db: Session = Depends(get_db),
    current_admin: User = Depends(deps.get_current_admin),
):
    """Create another administrator account. Admin only."""
    admin = crud_user.user.create(db, obj_in=admin_in, role=UserRole.ADMIN)
    logger.info(f"Admin {current_admin.id} created admin account {admin.id}")
    return {"msg": "Admin account created successfully"}


@router.post("/forgot-password")
def forgot_password(body: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """
    Email a one-time reset link. Only the sha256 of the token is stored; it
    expires after RESET_TOKEN_EXPIRE_MINUTES.
    """
    user = crud_user.user.get_by_email(db, email=body.email)
    if not user:
        raise NotFoundError("User with this email does not exist.")

    token, token_hash = generate_reset_token()
    expires = utcnow() + timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES)
    crud_user.user.set_reset_token(db, db_obj=user, token_hash=token_hash, expires=expires)

    reset_url = f"{settings.CLIENT_URL.rstrip('/')}/reset-password/{token}"
    try:
        sent = send_password_reset_email(user.email, user.first_name, reset_url)
    except Exception as e:
        # A link that was never delivered must not stay usable
        crud_user.user.clear_reset_token(db, db_obj=user)
        logger.error(f"Failed to send password reset email to {user.email}: {e}")
        raise AppError("An error occurred while sending the password reset email.")

    if not sent:
        logger.warning(f"Password reset email for user {user.id} was skipped")
        return {
            "status": "success",
            "message": "Token generated, but email delivery is not configured.",
        }
    return {"status": "success", "message": "Token sent to email!"}


@router.patch("/reset-password/{token}", response_model=Token)
def reset_password(
    token: str, body: ResetPasswordRequest, db: Session = Depends(get_db)
):
    user = crud_user.user.get_by_reset_token(
        db, token_hash=hash_reset_token(token), now=utcnow()
    )
    if not user:
        raise ValidationError("Token is invalid or has expired.")
    if body.password != body.confirm_password:
        raise ValidationError("Passwords do not match.", field="confirmPassword")

    crud_user.user.set_password(db, db_obj=user, password=body.password)
    logger.info(f"Password reset for user {user.id}")
    return _user_token(user)
