"""Pydantic v2 records passed into and returned from the query service."""

from lightbnb.schemas.property import PropertyCreate, PropertyRecord, PropertySearchFilters
from lightbnb.schemas.reservation import ReservationCreate, ReservationRecord
from lightbnb.schemas.user import UserCreate, UserRecord

__all__ = [
    "PropertyCreate",
    "PropertyRecord",
    "PropertySearchFilters",
    "ReservationCreate",
    "ReservationRecord",
    "UserCreate",
    "UserRecord",
]
