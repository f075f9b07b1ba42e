import enum
from typing import Optional, Union


class PermissionValue(str, enum.Enum):
    """Access tier granted by a document sharing record."""

    full = "FULL"
    write = "WRITE"
    read = "READ"

    @classmethod
    def parse(cls, value: Union["PermissionValue", str, None]) -> Optional["PermissionValue"]:
        """
        Interpret a stored tier literal, returning ``None`` for empty or unrecognized values.
        """
        if value is None or isinstance(value, cls):
            return value

        try:
            return cls(value)
        except ValueError:
            return None
