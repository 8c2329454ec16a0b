"""Persistence contract shared by every storage backend.

Records cross this boundary as plain dicts keyed like the model fields.
Listeners registered with :meth:`Backend.subscribe` receive the full,
current record list of a collection after it changes.
"""
import logging
from abc import ABC, abstractmethod
from collections import defaultdict
from enum import Enum

log = logging.getLogger(__name__)

COLLECTIONS = ("materials", "users", "requests")


class FulfillOutcome(str, Enum):
    ISSUED = "ISSUED"
    MISSING_REQUEST = "MISSING_REQUEST"
    ALREADY_ISSUED = "ALREADY_ISSUED"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    MISSING_MATERIAL = "MISSING_MATERIAL"


class StatusOutcome(str, Enum):
    UPDATED = "UPDATED"
    MISSING_REQUEST = "MISSING_REQUEST"
    ALREADY_ISSUED = "ALREADY_ISSUED"


class Backend(ABC):
    name = "abstract"

    def __init__(self):
        self._listeners = defaultdict(list)
        self._seen = {}

    # ------------------------- notifications -------------------------
    def subscribe(self, collection, on_change):
        _check_collection(collection)
        self._listeners[collection].append(on_change)

        def unsubscribe():
            if on_change in self._listeners[collection]:
                self._listeners[collection].remove(on_change)

        return unsubscribe

    def _notify(self, *collections):
        for collection in collections:
            records = self.list(collection)
            self._seen[collection] = records
            listeners = list(self._listeners[collection])
            for on_change in listeners:
                on_change(records)

    def poll(self):
        """Pick up writes made outside this process."""
        changed = [c for c in COLLECTIONS if self.list(c) != self._seen.get(c)]
        if changed:
            log.debug("external changes in %s", ", ".join(changed))
        self._notify(*changed)

    # ------------------------- records -------------------------
    @abstractmethod
    def list(self, collection):
        ...

    def get(self, collection, record_id):
        for record in self.list(collection):
            if record["id"] == record_id:
                return record
        return None

    def is_empty(self, collection):
        return not self.list(collection)

    @abstractmethod
    def create(self, collection, record):
        """Store ``record`` (without id) and return the new id."""

    @abstractmethod
    def update(self, collection, record_id, fields):
        """Overwrite the given fields; return False when the id is unknown."""

    @abstractmethod
    def delete(self, collection, record_id):
        ...

    def seed(self, data):
        """Bulk write ``{collection: [record, ...]}``.

        Backends assign their own ids; request references to the seeded
        users and materials are rewritten to match.
        """
        new_ids = {}
        for collection in ("materials", "users"):
            for record in data.get(collection, ()):
                fields = {k: v for k, v in record.items() if k != "id"}
                new_ids[collection, record["id"]] = self.create(collection, fields)
        for record in data.get("requests", ()):
            fields = {k: v for k, v in record.items() if k != "id"}
            fields["user_id"] = new_ids.get(("users", record["user_id"]), record["user_id"])
            fields["material_id"] = new_ids.get(
                ("materials", record["material_id"]), record["material_id"]
            )
            self.create("requests", fields)

    @abstractmethod
    def fulfill(self, request_id, material_id, quantity):
        """Mark the request ISSUED and take ``quantity`` from the material.

        Both writes land together or not at all. Returns a FulfillOutcome.
        """

    @abstractmethod
    def set_status(self, request_id, status):
        """Write ``status`` unless the stored request is already ISSUED.

        Check and write happen as one step. Returns a StatusOutcome.
        """

    def clear(self):
        for collection in COLLECTIONS:
            for record in self.list(collection):
                self.delete(collection, record["id"])

    def close(self):
        self._listeners.clear()


def _check_collection(collection):
    if collection not in COLLECTIONS:
        raise KeyError(f"unknown collection: {collection}")
