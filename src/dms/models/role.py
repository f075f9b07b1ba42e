from sqlalchemy import Column, Enum, Integer

from dms.db.base import Base
from dms.models.enums.user_role import UserRole


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    name = Column(
        Enum(UserRole, create_constraint=True, length=32, native_enum=False, validate_strings=True),
        nullable=False,
        unique=True,
    )

    def __repr__(self) -> str:
        return f"<Role {self.name}>"
