"""Pydantic v2 input/output schemas for users."""

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic.networks import validate_email


def _check_email_format(value: str) -> str:
    # Lookups match the stored text exactly, so keep the caller's spelling.
    validate_email(value)
    return value


EmailAddress = Annotated[str, Field(max_length=255), AfterValidator(_check_email_format)]


class UserCreate(BaseModel):
    """Schema for inserting a user. ``email`` and ``password`` are stored as given."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailAddress
    password: str = Field(..., min_length=1, max_length=255)


class UserRecord(BaseModel):
    """A stored user row."""

    id: int
    name: str
    email: str
    password: str

    model_config = ConfigDict(from_attributes=True)
