from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, relationship

from dms.db.base import Base
from dms.models.enums.user_role import UserRole
from dms.models.group import Group
from dms.models.permission import Permission
from dms.models.role import Role

users_roles_association_table = Table(
    "users_roles",
    Base.metadata,
    Column("user_id", ForeignKey("users.id"), primary_key=True),
    Column("role_id", ForeignKey("roles.id"), primary_key=True),
)

users_permissions_association_table = Table(
    "users_permissions",
    Base.metadata,
    Column("user_id", ForeignKey("users.id"), primary_key=True),
    Column("permission_id", ForeignKey("permissions.id"), primary_key=True),
)

if TYPE_CHECKING:
    from dms.models.access_key import AccessKey


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String, index=True, nullable=False, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    date_joined = Column(DateTime, nullable=True)
    last_login = Column(DateTime, nullable=True)

    group_id = Column(Integer, ForeignKey("groups.id"), index=True, nullable=True)
    group: Mapped[Optional[Group]] = relationship(back_populates="users")

    role_objs: Mapped[list[Role]] = relationship("Role", secondary=users_roles_association_table, backref="users")
    permissions: Mapped[list[Permission]] = relationship(
        "Permission", secondary=users_permissions_association_table, backref="users"
    )

    access_keys: Mapped[list["AccessKey"]] = relationship(back_populates="user", cascade="all, delete-orphan")

    @property
    def roles(self) -> list[UserRole]:
        role_objs = self.role_objs or []
        return [role_obj.name for role_obj in role_objs if role_obj.name is not None]

    def add_permission(self, permission: Permission) -> None:
        if permission not in self.permissions:
            self.permissions.append(permission)

    def __repr__(self) -> str:
        return f"<User {self.username}>"
