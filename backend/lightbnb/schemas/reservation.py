"""Pydantic v2 input/output schemas for reservations."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator

from lightbnb.schemas.property import PropertyRecord


class ReservationCreate(BaseModel):
    """Schema for inserting a reservation."""

    guest_id: int = Field(..., ge=1)
    property_id: int = Field(..., ge=1)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_dates(self) -> "ReservationCreate":
        """Validate that end_date is strictly after start_date."""
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class ReservationRecord(BaseModel):
    """A reservation joined with its property and that property's average rating."""

    id: int
    guest_id: int
    property_id: int
    start_date: date
    end_date: date
    property: PropertyRecord | None = None
    average_rating: float = 0.0

    model_config = ConfigDict(from_attributes=True)
