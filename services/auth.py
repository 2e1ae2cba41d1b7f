from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from models.user import User, UserRole
from models.store import Store
from schemas.user import TokenData, NAME_MAX_LENGTH
from core.config import settings
from core.exceptions import BusinessLogicError, ConflictError, ResourceNotFoundError
import logging

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS
)

# JWT settings
SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.JWT_ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
TOKEN_ISSUER = "store-ratings"

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)

def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT embedding the user's id, email and role."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    now = datetime.utcnow()
    role = user.role.value if isinstance(user.role, UserRole) else user.role
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": role,
        "exp": now + expires_delta,
        "iat": now,
        "iss": TOKEN_ISSUER,
        "type": "access"
    }

    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    logger.info(f"Access token created for user: {user.email}")

    return encoded_jwt

def verify_token(token: str) -> Optional[TokenData]:
    """Decode a JWT; returns None when it is malformed, tampered with or expired."""
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], issuer=TOKEN_ISSUER)
    except JWTError as e:
        logger.warning(f"JWT verification failed: {str(e)}")
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if user_id is None or email is None or payload.get("type") != "access":
        logger.warning("Token missing required claims")
        return None

    try:
        role = UserRole(payload.get("role"))
    except ValueError:
        logger.warning(f"Token carries unknown role: {payload.get('role')}")
        return None

    return TokenData(user_id=user_id, email=email, role=role)

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get a user by email."""
    email = email.lower().strip()
    return db.query(User).filter(User.email == email).first()

def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    """Get a user by primary key."""
    return db.query(User).filter(User.id == user_id).first()

def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Authenticate a user with email and password."""
    email = email.lower().strip()

    user = get_user_by_email(db, email)
    if not user:
        logger.warning(f"Authentication attempt with non-existent email: {email}")
        return None

    if not verify_password(password, user.password_hash):
        logger.warning(f"Authentication attempt with invalid password for user: {email}")
        return None

    logger.info(f"Successful authentication for user: {email}")
    return user

def default_store_name(owner_name: str) -> str:
    return f"{owner_name}'s Store"[:NAME_MAX_LENGTH]

def create_user(db: Session, name: str, email: str, password: str, address: str,
                role: UserRole = UserRole.USER, store_name: Optional[str] = None,
                create_store: bool = False) -> User:
    """Create a new user, plus a companion store when asked to for a store owner."""
    email = email.lower().strip()

    if get_user_by_email(db, email):
        logger.warning(f"Attempt to create user with existing email: {email}")
        raise ConflictError("User with this email already exists", details={"field": "email"})

    db_user = User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role=role,
        address=address,
        created_at=datetime.utcnow(),
        updated_at=datetime.utcnow()
    )
    db.add(db_user)

    if create_store and role == UserRole.STORE_OWNER:
        db_user.store = Store(
            name=store_name or default_store_name(name),
            address=address,
            created_at=datetime.utcnow()
        )

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Database integrity error creating user {email}: {str(e)}")
        if "email" in str(e).lower():
            raise ConflictError("User with this email already exists", details={"field": "email"})
        raise ConflictError("Database constraint violation")

    db.refresh(db_user)
    logger.info(f"User created successfully: {email} with role {role.value}")
    return db_user

def update_password(db: Session, user_id: str, current_password: str, new_password: str) -> User:
    """Re-verify the current password, then store a hash of the new one."""
    user = get_user_by_id(db, user_id)
    if not user:
        raise ResourceNotFoundError("User", user_id)

    if not verify_password(current_password, user.password_hash):
        logger.warning(f"Password change with wrong current password for user: {user.email}")
        raise BusinessLogicError("Current password is incorrect", details={"field": "current_password"})

    user.password_hash = get_password_hash(new_password)
    user.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(user)

    logger.info(f"Password updated for user: {user.email}")
    return user

def update_last_login(db: Session, user: User):
    """Update user's last login timestamp."""
    try:
        user.last_login = datetime.utcnow()
        db.commit()
        db.refresh(user)
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating last login for user {user.email}: {str(e)}")
