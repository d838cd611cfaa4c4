from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional


class UserRegister(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100, description="First name (required)")
    last_name: str = Field(..., min_length=1, max_length=100, description="Last name (required)")
    email: str = Field(..., max_length=255, description="User email address, unique and case-sensitive")
    password: str = Field(..., min_length=6, description="Password (minimum 6 characters)")
    avatar: Optional[str] = Field(None, max_length=500, description="Avatar image URI (optional)")

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_not_empty(cls, v: str, info) -> str:
        if not v or not v.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace only")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, v: str) -> str:
        # Checked for shape only; the address is stored exactly as submitted
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(str(e))
        return v

    @field_validator("avatar")
    @classmethod
    def blank_avatar_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "firstName": "Asha",
                "lastName": "Rao",
                "email": "asha@fundraise.org",
                "password": "myPassword123",
                "avatar": "https://cdn.fundraise.org/avatars/asha.png"
            }
        }


class UserLogin(BaseModel):
    email: str = Field(..., min_length=1, description="User email address")
    password: str = Field(..., min_length=1, description="User password")

    class Config:
        json_schema_extra = {
            "example": {
                "email": "asha@fundraise.org",
                "password": "myPassword123"
            }
        }


class UserPublic(BaseModel):
    """User fields that are safe to return; the password hash is never included."""
    id: int
    first_name: str
    last_name: str
    email: str
    avatar: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class Identity(BaseModel):
    """Caller identity extracted from a verified session token."""
    id: int
    email: str
