from datetime import date

from sqlalchemy import Column, Date, Integer, String

from dms.db.base import Base


class MetaFile(Base):
    """Stored upload backing a document."""

    __tablename__ = "meta_files"

    id = Column(Integer, primary_key=True)
    file_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_type = Column(String, nullable=True)
    file_size = Column(Integer, nullable=True)
    creation_date = Column(Date, nullable=False, default=date.today)
