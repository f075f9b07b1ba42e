from datetime import date, datetime
from typing import Optional

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, relationship

from dms.db.base import Base
from dms.models.enums.user_role import UserRole
from dms.models.role import Role
from dms.models.user import User


class AccessKey(Base):
    """
    API key authenticating its user outside of the browser. A key may restrict its holder to a single role.
    """

    __tablename__ = "access_keys"

    id = Column(Integer, primary_key=True)
    key_id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)

    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=False)
    user: Mapped[User] = relationship(back_populates="access_keys")
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    role_obj: Mapped[Optional[Role]] = relationship(Role)

    expiration_date = Column(Date, nullable=True)
    creation_time = Column(DateTime, nullable=True, default=datetime.now)

    @property
    def role(self) -> Optional[UserRole]:
        return self.role_obj.name if self.role_obj is not None else None

    def is_expired(self, on: Optional[date] = None) -> bool:
        return self.expiration_date is not None and self.expiration_date < (on or date.today())
