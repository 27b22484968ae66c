"""Query service — users, reservations and property search.

Every coroutine opens its own session from the configured session factory,
runs one parameterized statement and returns plain pydantic records. Missing
rows come back as ``None`` or ``[]``; failures are raised as the typed errors
in :mod:`lightbnb.errors`.
"""

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError
from sqlalchemy import Select, func, select

from lightbnb.auth.passwords import hash_password, verify_password
from lightbnb.config import settings
from lightbnb.database import get_session_factory
from lightbnb.errors import MalformedInputError, translate_errors
from lightbnb.models.property import Property
from lightbnb.models.reservation import Reservation
from lightbnb.models.review import PropertyReview
from lightbnb.models.user import User
from lightbnb.schemas.property import PropertyCreate, PropertyRecord, PropertySearchFilters
from lightbnb.schemas.reservation import ReservationCreate, ReservationRecord
from lightbnb.schemas.user import UserCreate, UserRecord

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

_ID_ADAPTER = TypeAdapter(int)


def _coerce(schema: type[SchemaT], value: SchemaT | Mapping[str, Any] | None, operation: str) -> SchemaT:
    """Accept either a schema instance or a plain mapping of its fields."""
    if isinstance(value, schema):
        return value
    if value is None:
        value = {}
    if not isinstance(value, Mapping):
        raise MalformedInputError(
            operation, f"expected a mapping of {schema.__name__} fields, got {type(value).__name__}"
        )
    return schema.model_validate(dict(value))


def _parse_id(value: int | str, operation: str) -> int:
    # Fractional floats are rejected rather than truncated onto another row.
    if isinstance(value, bool):
        raise MalformedInputError(operation, f"invalid id: {value!r}")
    try:
        return _ID_ADAPTER.validate_python(value)
    except ValidationError:
        raise MalformedInputError(operation, f"invalid id: {value!r}") from None


def _parse_limit(limit: int | None, operation: str) -> int:
    if limit is None:
        return settings.default_result_limit
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise MalformedInputError(operation, f"limit must be a positive integer, got {limit!r}")
    return limit


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def get_user_with_email(email: str) -> UserRecord | None:
    """Get a single user given their email, or ``None`` if there is no such user."""
    with translate_errors("get_user_with_email"):
        session_factory = get_session_factory()
        async with session_factory() as session:
            result = await session.execute(select(User).where(User.email == email))
            user = result.scalars().first()
    return UserRecord.model_validate(user) if user is not None else None


async def get_user_with_id(user_id: int | str) -> UserRecord | None:
    """Get a single user given their id, or ``None`` if there is no such user."""
    with translate_errors("get_user_with_id"):
        uid = _parse_id(user_id, "get_user_with_id")
        session_factory = get_session_factory()
        async with session_factory() as session:
            user = await session.get(User, uid)
    return UserRecord.model_validate(user) if user is not None else None


async def add_user(user: UserCreate | Mapping[str, Any]) -> UserRecord:
    """Insert a user and return it with its generated id.

    Raises:
        ConstraintViolationError: if the email is already taken.
        MalformedInputError: if name, email or password is missing or invalid.
    """
    with translate_errors("add_user"):
        payload = _coerce(UserCreate, user, "add_user")
        session_factory = get_session_factory()
        async with session_factory() as session:
            db_user = User(**payload.model_dump())
            session.add(db_user)
            await session.flush()
            await session.refresh(db_user)
            await session.commit()

    logger.info("User created: %s (id %s)", db_user.email, db_user.id)
    return UserRecord.model_validate(db_user)


async def register_user(name: str, email: str, password: str) -> UserRecord:
    """Hash a plain-text password with bcrypt and insert the user."""
    try:
        hashed = hash_password(password)
    except ValueError as e:
        raise MalformedInputError("register_user", str(e)) from e
    return await add_user({"name": name, "email": email, "password": hashed})


async def authenticate_user(email: str, password: str) -> UserRecord | None:
    """Return the user when ``password`` matches the stored hash, otherwise ``None``."""
    user = await get_user_with_email(email)
    if user is None or not verify_password(password, user.password):
        logger.info("Login rejected for %s", email)
        return None
    return user


# ---------------------------------------------------------------------------
# Reservations
# ---------------------------------------------------------------------------


async def get_all_reservations(
    guest_id: int | str,
    limit: int | None = None,
    completed_only: bool = True,
) -> list[ReservationRecord]:
    """Get a guest's reservations, each with its property and average rating.

    Args:
        guest_id: id of the user who made the reservations.
        limit: Maximum number of reservations returned (default 10).
        completed_only: Only stays whose end_date is before today.

    Returns:
        Reservations ordered by start_date, oldest first.
    """
    with translate_errors("get_all_reservations"):
        gid = _parse_id(guest_id, "get_all_reservations")
        row_limit = _parse_limit(limit, "get_all_reservations")

        conditions = [Reservation.guest_id == gid]
        if completed_only:
            conditions.append(Reservation.end_date < func.current_date())

        average_rating = func.coalesce(func.avg(PropertyReview.rating), 0).label("average_rating")
        query = (
            select(Reservation, Property, average_rating)
            .join(Property, Property.id == Reservation.property_id)
            .outerjoin(PropertyReview, PropertyReview.property_id == Property.id)
            .where(*conditions)
            .group_by(Property.id, Reservation.id)
            .order_by(Reservation.start_date)
            .limit(row_limit)
        )

        session_factory = get_session_factory()
        async with session_factory() as session:
            result = await session.execute(query)
            rows = result.all()

    return [
        ReservationRecord(
            id=reservation.id,
            guest_id=reservation.guest_id,
            property_id=reservation.property_id,
            start_date=reservation.start_date,
            end_date=reservation.end_date,
            property=PropertyRecord.model_validate(prop),
            average_rating=float(rating),
        )
        for reservation, prop, rating in rows
    ]


async def add_reservation(reservation: ReservationCreate | Mapping[str, Any]) -> ReservationRecord:
    """Insert a reservation and return it with its generated id."""
    with translate_errors("add_reservation"):
        payload = _coerce(ReservationCreate, reservation, "add_reservation")
        session_factory = get_session_factory()
        async with session_factory() as session:
            db_reservation = Reservation(**payload.model_dump())
            session.add(db_reservation)
            await session.flush()
            await session.refresh(db_reservation)
            await session.commit()

    logger.info(
        "Reservation created: %s (guest %s, property %s)",
        db_reservation.id,
        db_reservation.guest_id,
        db_reservation.property_id,
    )
    return ReservationRecord.model_validate(db_reservation)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def build_property_search(
    filters: PropertySearchFilters | Mapping[str, Any] | None = None,
    limit: int | None = None,
) -> Select:
    """Build the property search statement for the filters that are present.

    Each present filter adds one predicate and one bind parameter; the WHERE
    predicates are AND-ed together and the rating filter goes into HAVING,
    since it applies to the per-property average.
    """
    with translate_errors("build_property_search"):
        options = _coerce(PropertySearchFilters, filters, "build_property_search")
        row_limit = _parse_limit(limit, "build_property_search")

    conditions = []
    if options.city is not None:
        conditions.append(Property.city.icontains(options.city, autoescape=True))
    if options.owner_id is not None:
        conditions.append(Property.owner_id == options.owner_id)
    if options.minimum_price_cents is not None:
        conditions.append(Property.cost_per_night >= options.minimum_price_cents)
    if options.maximum_price_cents is not None:
        conditions.append(Property.cost_per_night <= options.maximum_price_cents)

    query = select(*Property.__table__.c, func.avg(PropertyReview.rating).label("average_rating")).outerjoin(
        PropertyReview, PropertyReview.property_id == Property.id
    )
    if conditions:
        query = query.where(*conditions)
    query = query.group_by(Property.id)
    if options.minimum_rating is not None:
        query = query.having(func.avg(PropertyReview.rating) >= float(options.minimum_rating))

    return query.order_by(Property.cost_per_night).limit(row_limit)


async def get_all_properties(
    options: PropertySearchFilters | Mapping[str, Any] | None = None,
    limit: int | None = None,
) -> list[PropertyRecord]:
    """Search properties, cheapest first.

    Args:
        options: Any of city, owner_id, minimum_price_per_night,
            maximum_price_per_night (dollars) and minimum_rating.
        limit: Maximum number of properties returned (default 10).
    """
    query = build_property_search(options, limit)

    with translate_errors("get_all_properties"):
        session_factory = get_session_factory()
        async with session_factory() as session:
            result = await session.execute(query)
            rows = result.all()

    return [PropertyRecord.model_validate(row._asdict()) for row in rows]


async def add_property(property: PropertyCreate | Mapping[str, Any]) -> PropertyRecord:
    """Insert a property and return it with its generated id.

    ``cost_per_night`` is taken and stored in cents, so the returned record
    carries exactly the values that were passed in.
    """
    with translate_errors("add_property"):
        payload = _coerce(PropertyCreate, property, "add_property")
        session_factory = get_session_factory()
        async with session_factory() as session:
            prop = Property(**payload.model_dump())
            session.add(prop)
            await session.flush()
            await session.refresh(prop)
            await session.commit()

    logger.info("Property created: %s (owner %s)", prop.title, prop.owner_id)
    return PropertyRecord.model_validate(prop)
