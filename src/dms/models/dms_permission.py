from datetime import date
from typing import Optional

from sqlalchemy import Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, relationship

from dms.db.base import Base
from dms.models.dms_file import DMSFile
from dms.models.group import Group
from dms.models.permission import Permission
from dms.models.user import User


class DMSPermission(Base):
    """
    Sharing record granting a user and/or a group an access tier on a document.

    ``value`` holds the tier literal (``FULL``, ``WRITE`` or ``READ``). Other values are stored but grant nothing.
    ``permission`` is the tier permission resolved when the record was last saved.
    """

    __tablename__ = "dms_permissions"

    id = Column(Integer, primary_key=True)

    file_id = Column(Integer, ForeignKey("dms_files.id"), index=True, nullable=False)
    file: Mapped[DMSFile] = relationship(DMSFile, back_populates="permissions")
    user_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    user: Mapped[Optional[User]] = relationship("User", foreign_keys="DMSPermission.user_id")
    group_id = Column(Integer, ForeignKey("groups.id"), index=True, nullable=True)
    group: Mapped[Optional[Group]] = relationship(Group)

    value = Column(String(32), nullable=True)
    permission_id = Column(Integer, ForeignKey("permissions.id"), nullable=True)
    permission: Mapped[Optional[Permission]] = relationship(Permission)

    created_by_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    created_by: Mapped[Optional[User]] = relationship("User", foreign_keys="DMSPermission.created_by_id")
    creation_date = Column(Date, nullable=False, default=date.today)
