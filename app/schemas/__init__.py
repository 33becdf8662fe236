from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID


def normalize_email(value: str) -> str:
    """Trim and sanity check an email address.

    Case is preserved; uniqueness follows the database collation.
    """
    value = value.strip()
    local, sep, domain = value.partition("@")
    if not sep or not local or not domain or "@" in domain:
        raise ValueError("must be a valid email address")
    return value


# AddedEmail schemas
class AddedEmailCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_by: Optional[UUID] = Field(
        None, description="Defaults to the authenticated caller"
    )

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)


class AddedEmailUpdate(BaseModel):
    email: Optional[str] = Field(None, min_length=3, max_length=320)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_by: Optional[UUID] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("email cannot be null")
        return normalize_email(value)


class AddedEmailResponse(BaseModel):
    id: int
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    created_by: Optional[UUID]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    message: str
