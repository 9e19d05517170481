from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fastapi import Header


class Role(str, Enum):
    ADMIN = "admin"
    KITCHEN = "kitchen"
    WAITER = "waiter"
    USER = "user"


class PermissionDeniedError(Exception):
    def __init__(self, message: str = "permission denied") -> None:
        super().__init__(message)
        self.details: dict[str, object] = {}


@dataclass(frozen=True)
class Principal:
    roles: frozenset[Role]
    restaurant_id: int | None = None
    table_id: int | None = None


def parse_roles(raw: str | None) -> frozenset[Role]:
    roles: set[Role] = set()
    for value in (raw or "").split(","):
        value = value.strip().lower()
        if not value:
            continue
        try:
            roles.add(Role(value))
        except ValueError:
            continue
    return frozenset(roles)


def get_principal(
    x_roles: str | None = Header(default=None, alias="X-Roles"),
    x_restaurant_id: int | None = Header(default=None, alias="X-Restaurant-Id"),
    x_table_id: int | None = Header(default=None, alias="X-Table-Id"),
) -> Principal:
    return Principal(
        roles=parse_roles(x_roles),
        restaurant_id=x_restaurant_id,
        table_id=x_table_id,
    )


def has_role(principal: Principal, restaurant_id: int, *roles: Role) -> bool:
    if principal.restaurant_id != restaurant_id:
        return False
    return any(role in principal.roles for role in roles)


def has_table_permissions(principal: Principal, table_id: int) -> bool:
    return principal.table_id is not None and principal.table_id == table_id


def require_role(principal: Principal, restaurant_id: int, *roles: Role) -> None:
    if not has_role(principal, restaurant_id, *roles):
        allowed = ", ".join(role.value for role in roles)
        raise PermissionDeniedError(
            f"requires one of roles [{allowed}] in restaurant {restaurant_id}"
        )


def require_table(principal: Principal, restaurant_id: int, table_id: int) -> None:
    """The caller must be a user of ``restaurant_id`` seated at ``table_id``."""
    require_role(principal, restaurant_id, Role.USER)
    if not has_table_permissions(principal, table_id):
        raise PermissionDeniedError(f"no permission for table {table_id}")
