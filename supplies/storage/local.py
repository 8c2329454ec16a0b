"""Single JSON document on disk, the local-only storage mode.

The lock covers threads of one process; run one server process per file.
"""
import json
import logging
import os
import threading

from .base import COLLECTIONS, Backend, FulfillOutcome, StatusOutcome, _check_collection

log = logging.getLogger(__name__)


class LocalBackend(Backend):
    name = "local"

    def __init__(self, path):
        super().__init__()
        self.path = path
        self._lock = threading.RLock()

    # ------------------------- file helpers -------------------------
    def _empty(self):
        doc = {name: [] for name in COLLECTIONS}
        doc["next_ids"] = {name: 1 for name in COLLECTIONS}
        return doc

    def _read(self):
        if not os.path.exists(self.path):
            return self._empty()
        with open(self.path, encoding="utf-8") as f:
            doc = json.load(f)
        for name in COLLECTIONS:
            doc.setdefault(name, [])
        next_ids = doc.setdefault("next_ids", {})
        for name in COLLECTIONS:
            highest = max((r["id"] for r in doc[name]), default=0)
            next_ids[name] = max(next_ids.get(name, 1), highest + 1)
        return doc

    def _write(self, doc):
        tmp = f"{self.path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)
        os.replace(tmp, self.path)

    # ------------------------- contract -------------------------
    def list(self, collection):
        _check_collection(collection)
        with self._lock:
            return [dict(r) for r in self._read()[collection]]

    def create(self, collection, record):
        _check_collection(collection)
        with self._lock:
            doc = self._read()
            new_id = doc["next_ids"][collection]
            doc["next_ids"][collection] = new_id + 1
            doc[collection].append({**record, "id": new_id})
            self._write(doc)
        self._notify(collection)
        return new_id

    def update(self, collection, record_id, fields):
        _check_collection(collection)
        with self._lock:
            doc = self._read()
            for r in doc[collection]:
                if r["id"] == record_id:
                    r.update({k: v for k, v in fields.items() if k != "id"})
                    break
            else:
                return False
            self._write(doc)
        self._notify(collection)
        return True

    def delete(self, collection, record_id):
        _check_collection(collection)
        with self._lock:
            doc = self._read()
            doc[collection] = [r for r in doc[collection] if r["id"] != record_id]
            self._write(doc)
        self._notify(collection)

    def fulfill(self, request_id, material_id, quantity):
        with self._lock:
            doc = self._read()
            req = next((r for r in doc["requests"] if r["id"] == request_id), None)
            if req is None:
                return FulfillOutcome.MISSING_REQUEST
            if req["status"] == "ISSUED":
                return FulfillOutcome.ALREADY_ISSUED
            mat = next((m for m in doc["materials"] if m["id"] == material_id), None)
            if mat is None:
                return FulfillOutcome.MISSING_MATERIAL
            if mat["stock"] < quantity:
                return FulfillOutcome.INSUFFICIENT_STOCK

            mat["stock"] -= quantity
            req["status"] = "ISSUED"
            self._write(doc)
        self._notify("materials", "requests")
        return FulfillOutcome.ISSUED

    def set_status(self, request_id, status):
        with self._lock:
            doc = self._read()
            req = next((r for r in doc["requests"] if r["id"] == request_id), None)
            if req is None:
                return StatusOutcome.MISSING_REQUEST
            if req["status"] == "ISSUED":
                return StatusOutcome.ALREADY_ISSUED
            req["status"] = status
            self._write(doc)
        self._notify("requests")
        return StatusOutcome.UPDATED

    def clear(self):
        with self._lock:
            if os.path.exists(self.path):
                os.remove(self.path)
        self._notify(*COLLECTIONS)
