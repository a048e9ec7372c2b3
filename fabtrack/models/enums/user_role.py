# fabtrack/models/enums/user_role.py
import enum


class UserRole(str, enum.Enum):
    admin = "admin"
    client = "client"
