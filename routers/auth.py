from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import logging

from database.connection import get_db
from services.auth import (
    authenticate_user,
    create_user,
    create_access_token,
    verify_token,
    update_last_login,
    update_password,
    get_user_by_id
)
from schemas.user import UserSignup, UserLogin, PasswordUpdate, Token, UserResponse
from models.user import UserRole
from core.exceptions import BaseCustomException, AuthenticationError, AuthorizationError
from core.response import MessageResponse, message_response

logger = logging.getLogger(__name__)

router = APIRouter()
security = HTTPBearer(auto_error=False)

def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )

# Dependency to get current user
def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> UserResponse:
    """Resolve the bearer token to the user it was issued for."""
    if not credentials or not credentials.credentials:
        raise _unauthorized("Authentication credentials required")

    token_data = verify_token(credentials.credentials)
    if token_data is None:
        raise _unauthorized("Invalid or expired token")

    user = get_user_by_id(db, token_data.user_id)
    if user is None:
        logger.warning(f"Token valid but user not found: {token_data.email}")
        raise _unauthorized("User not found")

    return UserResponse.model_validate(user)

def require_role(*roles: UserRole):
    """Build a dependency that admits only callers holding one of ``roles``."""
    allowed = ", ".join(role.value for role in roles)

    def role_checker(current_user: UserResponse = Depends(get_current_user)) -> UserResponse:
        if current_user.role not in roles:
            logger.warning(
                f"User {current_user.email} with role {current_user.role.value} denied; requires {allowed}"
            )
            raise AuthorizationError(f"Access denied. Requires role: {allowed}")
        return current_user

    return role_checker

get_admin_user = require_role(UserRole.ADMIN)
get_store_owner_user = require_role(UserRole.STORE_OWNER)
get_rating_user = require_role(UserRole.USER)

@router.post("/signup", response_model=Token, status_code=status.HTTP_201_CREATED)
def signup(user_data: UserSignup, db: Session = Depends(get_db)):
    """Register a new user or store owner."""
    try:
        logger.info(f"Signup attempt for email: {user_data.email}")

        user = create_user(
            db=db,
            name=user_data.name,
            email=user_data.email,
            password=user_data.password,
            address=user_data.address,
            role=user_data.role,
            store_name=user_data.store_name,
            create_store=True
        )

        access_token = create_access_token(user)
        logger.info(f"User signed up successfully: {user.email}")

        return Token(
            access_token=access_token,
            token_type="bearer",
            user=UserResponse.model_validate(user)
        )

    except BaseCustomException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during signup: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again."
        )

@router.post("/login", response_model=Token)
def login(user_credentials: UserLogin, db: Session = Depends(get_db)):
    """Login user and return access token."""
    try:
        logger.info(f"Login attempt for email: {user_credentials.email}")

        user = authenticate_user(db, user_credentials.email, user_credentials.password)
        if not user:
            raise AuthenticationError("Invalid email or password")

        update_last_login(db, user)
        access_token = create_access_token(user)

        logger.info(f"User logged in successfully: {user.email}")

        return Token(
            access_token=access_token,
            token_type="bearer",
            user=UserResponse.model_validate(user)
        )

    except BaseCustomException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during login: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again."
        )

@router.put("/update-password", response_model=MessageResponse)
def change_password(
    password_data: PasswordUpdate,
    current_user: UserResponse = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Change the caller's password after re-checking the current one."""
    try:
        update_password(
            db=db,
            user_id=current_user.id,
            current_password=password_data.current_password,
            new_password=password_data.new_password
        )
        return message_response("Password updated successfully")

    except BaseCustomException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error updating password: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update password"
        )

@router.post("/logout", response_model=MessageResponse)
def logout(current_user: UserResponse = Depends(get_current_user)):
    """Logout user (client should discard token)."""
    logger.info(f"User logged out: {current_user.email}")
    return message_response("Successfully logged out")
