from .material import Material
from .user import Role, User
from .request import Request, RequestStatus, utcnow

__all__ = [
    "Material", "User", "Role", "Request", "RequestStatus", "utcnow",
]
