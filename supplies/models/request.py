from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    ISSUED = "ISSUED"

    @property
    def is_terminal(self) -> bool:
        return self in (RequestStatus.REJECTED, RequestStatus.ISSUED)


def utcnow():
    return datetime.now(timezone.utc)


@dataclass
class Request:
    id: int
    user_id: int
    material_id: int
    quantity: int
    request_date: datetime
    status: RequestStatus = RequestStatus.PENDING

    @classmethod
    def from_dict(cls, data):
        request_date = data["request_date"]
        if isinstance(request_date, str):
            request_date = datetime.fromisoformat(request_date)
        if request_date.tzinfo is None:
            request_date = request_date.replace(tzinfo=timezone.utc)
        return cls(
            id=int(data["id"]),
            user_id=int(data["user_id"]),
            material_id=int(data["material_id"]),
            quantity=int(data["quantity"]),
            request_date=request_date,
            status=RequestStatus(data["status"]),
        )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "material_id": self.material_id,
            "quantity": self.quantity,
            "request_date": self.request_date.isoformat(),
            "status": self.status.value,
        }
