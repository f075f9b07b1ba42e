from typing import TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, relationship

from dms.db.base import Base
from dms.models.permission import Permission

groups_permissions_association_table = Table(
    "groups_permissions",
    Base.metadata,
    Column("group_id", ForeignKey("groups.id"), primary_key=True),
    Column("permission_id", ForeignKey("permissions.id"), primary_key=True),
)

if TYPE_CHECKING:
    from dms.models.user import User


class Group(Base):
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True)
    code = Column(String, index=True, nullable=False, unique=True)
    name = Column(String, nullable=False)

    users: Mapped[list["User"]] = relationship(back_populates="group")
    permissions: Mapped[list[Permission]] = relationship(
        "Permission", secondary=groups_permissions_association_table, backref="groups"
    )

    def add_permission(self, permission: Permission) -> None:
        if permission not in self.permissions:
            self.permissions.append(permission)

    def __repr__(self) -> str:
        return f"<Group {self.code}>"
