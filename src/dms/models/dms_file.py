from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, relationship

from dms.db.base import Base
from dms.models.meta_file import MetaFile
from dms.models.user import User

if TYPE_CHECKING:
    from dms.models.dms_permission import DMSPermission


class DMSFile(Base):
    __tablename__ = "dms_files"

    id = Column(Integer, primary_key=True)
    file_name = Column(String, nullable=False)
    is_directory = Column(Boolean, nullable=False, default=False)

    parent_id = Column(Integer, ForeignKey("dms_files.id"), index=True, nullable=True)
    parent: Mapped[Optional["DMSFile"]] = relationship(
        "DMSFile", remote_side="DMSFile.id", back_populates="children"
    )
    children: Mapped[list["DMSFile"]] = relationship("DMSFile", back_populates="parent")

    meta_file_id = Column(Integer, ForeignKey("meta_files.id"), nullable=True)
    meta_file: Mapped[Optional[MetaFile]] = relationship(MetaFile)

    created_by_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    created_by: Mapped[User] = relationship("User", foreign_keys="DMSFile.created_by_id")
    modified_by_id = Column(Integer, ForeignKey("users.id"), index=True, nullable=True)
    modified_by: Mapped[User] = relationship("User", foreign_keys="DMSFile.modified_by_id")
    creation_date = Column(Date, nullable=False, default=date.today)
    modification_date = Column(Date, nullable=False, default=date.today, onupdate=date.today)

    permissions: Mapped[list["DMSPermission"]] = relationship(
        "DMSPermission",
        back_populates="file",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<DMSFile {self.file_name}>"
