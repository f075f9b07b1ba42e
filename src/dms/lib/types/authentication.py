from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:
    from dms.models.enums.user_role import UserRole
    from dms.models.user import User


@dataclass
class UserData:
    """An authenticated user and the roles they are acting in for the current request."""

    user: "User"
    active_roles: list["UserRole"]

    def acts_as_any(self, roles: Iterable["UserRole"]) -> bool:
        return any(role in self.active_roles for role in roles)
