__all__ = [
    "access_key",
    "dms_file",
    "dms_permission",
    "group",
    "meta_file",
    "permission",
    "role",
    "user",
]
