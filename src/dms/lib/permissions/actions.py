from enum import Enum


class Action(Enum):
    CREATE = "create"
    READ = "read"
    WRITE = "write"
    REMOVE = "remove"
