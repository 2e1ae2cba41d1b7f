from pydantic import BaseModel, ConfigDict, EmailStr, field_validator, Field
from typing import Optional
from datetime import datetime
from models.user import UserRole
import re

NAME_MIN_LENGTH = 20
NAME_MAX_LENGTH = 60
ADDRESS_MAX_LENGTH = 400
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 16
PASSWORD_SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'

# Shared field rules, reused by signup, admin and profile schemas
def check_name(v: str, label: str = "Name") -> str:
    v = v.strip()
    if len(v) < NAME_MIN_LENGTH:
        raise ValueError(f'{label} must be at least {NAME_MIN_LENGTH} characters')
    if len(v) > NAME_MAX_LENGTH:
        raise ValueError(f'{label} must be at most {NAME_MAX_LENGTH} characters')
    return v

def check_address(v: str) -> str:
    v = v.strip()
    if len(v) > ADDRESS_MAX_LENGTH:
        raise ValueError(f'Address must be at most {ADDRESS_MAX_LENGTH} characters')
    return v

def check_password(v: str) -> str:
    if len(v) < PASSWORD_MIN_LENGTH:
        raise ValueError(f'Password must be at least {PASSWORD_MIN_LENGTH} characters')
    if len(v) > PASSWORD_MAX_LENGTH:
        raise ValueError(f'Password must be at most {PASSWORD_MAX_LENGTH} characters')
    if not re.search(r'[A-Z]', v):
        raise ValueError('Password must contain at least one uppercase letter')
    if not any(c in PASSWORD_SPECIAL_CHARACTERS for c in v):
        raise ValueError('Password must contain at least one special character')
    return v

# Base User Schema
class UserBase(BaseModel):
    name: str
    email: EmailStr
    address: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return check_name(v)

    @field_validator('email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @field_validator('address')
    @classmethod
    def validate_address(cls, v):
        return check_address(v)

# User Signup Schema
class UserSignup(UserBase):
    password: str
    role: UserRole = UserRole.USER
    store_name: Optional[str] = None

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return check_password(v)

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        if v == UserRole.ADMIN:
            raise ValueError("Role must be either 'user' or 'store_owner'")
        return v

    @field_validator('store_name')
    @classmethod
    def validate_store_name(cls, v):
        if v is None or not v.strip():
            return None
        return check_name(v, label="Store name")

# Admin-created user: any role, password policy still applies
class AdminUserCreate(UserBase):
    password: str
    role: UserRole = UserRole.USER

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        return check_password(v)

# User Login Schema
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class PasswordUpdate(BaseModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return check_password(v)

class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        return check_name(v)

    @field_validator('address')
    @classmethod
    def validate_address(cls, v):
        if v is None:
            return v
        return check_address(v)

# User Response Schema
class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    address: str
    created_at: datetime

# Token Schema
class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse

# Token Data Schema
class TokenData(BaseModel):
    user_id: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
