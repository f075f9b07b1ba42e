from typing import Any

from sqlalchemy.orm import as_declarative


@as_declarative()
class Base:
    """
    Declarative base of the document management models.

    Every model names its table explicitly with ``__tablename__``.
    """

    id: Any
    __name__: str

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"
