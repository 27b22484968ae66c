"""Pydantic v2 input/output schemas for properties and property search."""

from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ---------------------------------------------------------------------------
# Input schemas
# ---------------------------------------------------------------------------


class PropertyCreate(BaseModel):
    """Schema for inserting a property. ``cost_per_night`` is in cents."""

    owner_id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    thumbnail_photo_url: str = Field(..., max_length=255)
    cover_photo_url: str = Field(..., max_length=255)
    cost_per_night: int = Field(..., ge=0)
    parking_spaces: int = Field(0, ge=0)
    number_of_bathrooms: int = Field(0, ge=0)
    number_of_bedrooms: int = Field(0, ge=0)
    country: str = Field(..., min_length=1, max_length=255)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=255)
    province: str = Field(..., min_length=1, max_length=255)
    post_code: str = Field(..., min_length=1, max_length=255)


class PropertySearchFilters(BaseModel):
    """Optional criteria narrowing a property search.

    Price bounds are given in dollars; ``minimum_price_cents`` and
    ``maximum_price_cents`` convert them to the stored unit. Empty strings,
    as submitted by a blank search form field, count as absent.
    """

    model_config = ConfigDict(extra="ignore")

    city: str | None = None
    owner_id: int | None = Field(None, ge=1)
    minimum_price_per_night: Decimal | None = Field(None, ge=0)
    maximum_price_per_night: Decimal | None = Field(None, ge=0)
    minimum_rating: Decimal | None = Field(None, ge=0, le=5)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def check_price_range(self) -> "PropertySearchFilters":
        """If both bounds are provided, the minimum must not exceed the maximum."""
        if (
            self.minimum_price_per_night is not None
            and self.maximum_price_per_night is not None
            and self.minimum_price_per_night > self.maximum_price_per_night
        ):
            raise ValueError("minimum_price_per_night must not exceed maximum_price_per_night")
        return self

    @staticmethod
    def _to_cents(amount: Decimal | None) -> int | None:
        if amount is None:
            return None
        return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def minimum_price_cents(self) -> int | None:
        return self._to_cents(self.minimum_price_per_night)

    @property
    def maximum_price_cents(self) -> int | None:
        return self._to_cents(self.maximum_price_per_night)


# ---------------------------------------------------------------------------
# Output schemas
# ---------------------------------------------------------------------------


class PropertyRecord(BaseModel):
    """A stored property row, optionally with its aggregated rating."""

    id: int
    owner_id: int
    title: str
    description: str | None = None
    thumbnail_photo_url: str
    cover_photo_url: str
    cost_per_night: int
    parking_spaces: int
    number_of_bathrooms: int
    number_of_bedrooms: int
    country: str
    street: str
    city: str
    province: str
    post_code: str
    active: bool = True
    average_rating: float | None = None

    model_config = ConfigDict(from_attributes=True)
