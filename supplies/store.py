"""In-memory entity store mirrored from a storage backend.

Every write goes to the backend first; the backend's change notification
then replaces the affected collection here and the store tells its own
subscribers which collection changed.
"""
import logging

from supplies.errors import DuplicateUsername, NotFound, ValidationError
from supplies.models import Material, Request, RequestStatus, Role, User, utcnow
from supplies.storage import COLLECTIONS

log = logging.getLogger(__name__)

RECORD_TYPES = {
    "materials": Material,
    "users": User,
    "requests": Request,
}

MATERIAL_FIELDS = ("name", "stock", "unit")
USER_FIELDS = ("name", "department", "role", "username", "password")


def _to_int(value, field):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field.capitalize()} must be a whole number.")


def _clean_material(fields):
    out = {}
    for key in MATERIAL_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if key == "stock":
            value = _to_int(value, "stock")
            if value < 0:
                raise ValidationError("Stock cannot be negative.")
        else:
            value = (value or "").strip()
            if not value:
                raise ValidationError("Name and unit are required.")
        out[key] = value
    return out


def _clean_user(fields):
    out = {}
    for key in USER_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if key == "role":
            try:
                value = Role(value).value
            except ValueError:
                raise ValidationError(f"Unknown role: {value}.")
        elif key == "department":
            value = (value or "").strip()
        else:
            value = (value or "").strip()
            if not value:
                raise ValidationError("Name, username and password are required.")
        out[key] = value
    return out


class InventoryStore:
    def __init__(self, backend):
        self.backend = backend
        self.materials: list[Material] = []
        self.users: list[User] = []
        self.requests: list[Request] = []
        self._listeners = []
        self._unsubscribe = [
            backend.subscribe(name, lambda records, name=name: self._replace(name, records))
            for name in COLLECTIONS
        ]
        self.reload()

    # ------------------------- sync -------------------------
    def subscribe(self, callback):
        """``callback(collection_name)`` runs after a collection changes."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _replace(self, name, records):
        record_type = RECORD_TYPES[name]
        setattr(self, name, [record_type.from_dict(r) for r in records])
        for callback in list(self._listeners):
            callback(name)

    def reload(self):
        for name in COLLECTIONS:
            self._replace(name, self.backend.list(name))

    def sync(self):
        self.backend.poll()

    def close(self):
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self._unsubscribe = []
        self._listeners = []

    # ------------------------- lookups -------------------------
    def get_material(self, material_id):
        return next((m for m in self.materials if m.id == material_id), None)

    def get_user(self, user_id):
        return next((u for u in self.users if u.id == user_id), None)

    def get_request(self, request_id):
        return next((r for r in self.requests if r.id == request_id), None)

    def find_user_by_username(self, username):
        return next((u for u in self.users if u.username == username), None)

    # ------------------------- materials -------------------------
    def add_material(self, name, stock, unit):
        fields = _clean_material({"name": name, "stock": stock, "unit": unit})
        new_id = self.backend.create("materials", fields)
        log.info("material #%s created: %s", new_id, fields["name"])
        return self.get_material(new_id)

    def update_material(self, material_id, **fields):
        if self.get_material(material_id) is None:
            raise NotFound("material", material_id)
        self.backend.update("materials", material_id, _clean_material(fields))
        return self.get_material(material_id)

    def delete_material(self, material_id):
        if self.get_material(material_id) is None:
            raise NotFound("material", material_id)
        self.backend.delete("materials", material_id)
        log.info("material #%s deleted", material_id)

    # ------------------------- users -------------------------
    def add_user(self, name, department, role, username, password):
        fields = _clean_user({
            "name": name,
            "department": department,
            "role": role,
            "username": username,
            "password": password,
        })
        if self.find_user_by_username(fields["username"]) is not None:
            raise DuplicateUsername(fields["username"])
        new_id = self.backend.create("users", fields)
        log.info("user #%s created: %s", new_id, fields["username"])
        return self.get_user(new_id)

    def update_user(self, user_id, **fields):
        # no username uniqueness check here, only on creation
        if self.get_user(user_id) is None:
            raise NotFound("user", user_id)
        self.backend.update("users", user_id, _clean_user(fields))
        return self.get_user(user_id)

    def delete_user(self, user_id):
        if self.get_user(user_id) is None:
            raise NotFound("user", user_id)
        self.backend.delete("users", user_id)
        log.info("user #%s deleted", user_id)

    # ------------------------- requests -------------------------
    def create_request(self, user_id, material_id, quantity):
        quantity = _to_int(quantity, "quantity")
        if quantity <= 0:
            raise ValidationError("Quantity must be at least 1.")
        record = {
            "user_id": int(user_id),
            "material_id": int(material_id),
            "quantity": quantity,
            "request_date": utcnow().isoformat(),
            "status": RequestStatus.PENDING.value,
        }
        new_id = self.backend.create("requests", record)
        log.info("request #%s created by user #%s", new_id, user_id)
        return self.get_request(new_id)

    def set_request_status(self, request_id, status):
        return self.backend.set_status(request_id, RequestStatus(status).value)

    def fulfill_request(self, request):
        return self.backend.fulfill(request.id, request.material_id, request.quantity)
