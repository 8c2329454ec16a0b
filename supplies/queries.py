"""Read-only views over the store used by the pages and the reports."""
from dataclasses import dataclass
from datetime import datetime

from supplies.models import RequestStatus

UNKNOWN = "Unknown"
MISSING = "-"


@dataclass
class RequestRow:
    id: int
    user_name: str
    department: str
    material_name: str
    quantity: int
    unit: str
    request_date: datetime
    status: RequestStatus


def filter_materials(materials, name="", stock="", unit=""):
    name = (name or "").strip().lower()
    stock = (stock or "").strip()
    unit = (unit or "").strip().lower()

    result = list(materials)
    if name:
        result = [m for m in result if name in m.name.lower()]
    if stock:
        result = [m for m in result if stock in str(m.stock)]
    if unit:
        result = [m for m in result if unit in m.unit.lower()]
    return result


def sort_records(records, key=None, direction="asc"):
    records = list(records)
    if not key or not records or not hasattr(records[0], key):
        return records
    return sorted(records, key=lambda r: getattr(r, key), reverse=(direction == "desc"))


def request_queue(requests):
    """Pending first, newest first within each group."""
    newest_first = sorted(requests, key=lambda r: r.request_date, reverse=True)
    return sorted(newest_first, key=lambda r: r.status is not RequestStatus.PENDING)


def requests_for_user(requests, user_id):
    mine = [r for r in requests if r.user_id == user_id]
    return sorted(mine, key=lambda r: r.request_date, reverse=True)


def describe_request(store, req):
    user = store.get_user(req.user_id)
    material = store.get_material(req.material_id)
    return RequestRow(
        id=req.id,
        user_name=user.name if user else UNKNOWN,
        department=user.department if user else MISSING,
        material_name=material.name if material else UNKNOWN,
        quantity=req.quantity,
        unit=material.unit if material else MISSING,
        request_date=req.request_date,
        status=req.status,
    )


def dashboard_summary(store, low_stock_threshold=10):
    materials = store.materials
    return {
        "total_materials": len(materials),
        "pending_requests": sum(1 for r in store.requests if r.status is RequestStatus.PENDING),
        "low_stock": sum(1 for m in materials if m.stock < low_stock_threshold),
        "chart": [{"name": m.name, "stock": m.stock} for m in materials],
    }
