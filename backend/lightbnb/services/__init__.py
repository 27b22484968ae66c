"""Public data-access operations."""

from lightbnb.services.queries import (
    add_property,
    add_reservation,
    add_user,
    authenticate_user,
    build_property_search,
    get_all_properties,
    get_all_reservations,
    get_user_with_email,
    get_user_with_id,
    register_user,
)

__all__ = [
    "add_property",
    "add_reservation",
    "add_user",
    "authenticate_user",
    "build_property_search",
    "get_all_properties",
    "get_all_reservations",
    "get_user_with_email",
    "get_user_with_id",
    "register_user",
]
