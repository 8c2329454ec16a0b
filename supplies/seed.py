import logging
from datetime import timedelta

from supplies.models import utcnow

log = logging.getLogger(__name__)


def seed_data(now=None):
    now = now or utcnow()
    return {
        "materials": [
            {"id": 1, "name": "A4 paper", "stock": 50, "unit": "ream"},
            {"id": 2, "name": "Blue pen", "stock": 100, "unit": "piece"},
            {"id": 3, "name": "Stapler", "stock": 10, "unit": "piece"},
            {"id": 4, "name": "Whiteboard marker", "stock": 25, "unit": "box"},
        ],
        "users": [
            {"id": 1, "name": "Admin Officer", "department": "Administration",
             "role": "ADMIN", "username": "admin", "password": "123"},
            {"id": 2, "name": "Somchai Jaidee", "department": "Sales",
             "role": "USER", "username": "somchai", "password": "123"},
            {"id": 3, "name": "Somsri Rakngan", "department": "Human Resources",
             "role": "USER", "username": "somsri", "password": "123"},
        ],
        "requests": [
            {"id": 1, "user_id": 2, "material_id": 1, "quantity": 2,
             "request_date": (now - timedelta(days=1)).isoformat(), "status": "ISSUED"},
            {"id": 2, "user_id": 3, "material_id": 2, "quantity": 5,
             "request_date": now.isoformat(), "status": "PENDING"},
        ],
    }


def seed_if_empty(backend):
    """Write the seed set when the users collection is empty."""
    if not backend.is_empty("users"):
        return False
    log.info("empty %s store, writing seed data", backend.name)
    backend.seed(seed_data())
    return True
