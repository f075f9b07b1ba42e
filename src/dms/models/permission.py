from sqlalchemy import Boolean, Column, Integer, String

from dms.db.base import Base


class Permission(Base):
    """
    A named grant on a model class, optionally restricted to the rows matching a filter predicate.

    ``condition`` is a query predicate with positional ``?`` placeholders and ``condition_params`` is the
    comma-separated list of expressions bound to them (``__user__`` is the acting user). Both are stored verbatim
    and evaluated by the query layer that enforces row-level security.
    """

    __tablename__ = "permissions"

    id = Column(Integer, primary_key=True)
    name = Column(String, index=True, nullable=False, unique=True)
    object = Column(String, nullable=False)
    condition = Column(String, nullable=True)
    condition_params = Column(String, nullable=True)

    can_create = Column(Boolean, nullable=False, default=False)
    can_read = Column(Boolean, nullable=False, default=False)
    can_write = Column(Boolean, nullable=False, default=False)
    can_remove = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<Permission {self.name}>"
