from dataclasses import dataclass
from enum import Enum

from flask_login import UserMixin


class Role(str, Enum):
    ADMIN = "ADMIN"
    USER = "USER"


@dataclass(eq=False)
class User(UserMixin):
    id: int
    name: str
    department: str
    role: Role
    username: str
    password: str

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=int(data["id"]),
            name=data["name"],
            department=data.get("department") or "",
            role=Role(data["role"]),
            username=data["username"],
            password=data["password"],
        )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "department": self.department,
            "role": self.role.value,
            "username": self.username,
            "password": self.password,
        }

    def __repr__(self):
        return f"<User {self.username} ({self.role.value})>"
