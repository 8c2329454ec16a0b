"""Shared database storage through Flask-SQLAlchemy.

Several processes may point at the same database. Writes of this process
are announced right after commit; writes of other processes are picked up
by :meth:`Backend.poll`, which the app runs before every request.
"""
import logging

from sqlalchemy import update

from supplies.extensions import db

from .base import COLLECTIONS, Backend, FulfillOutcome, StatusOutcome, _check_collection

log = logging.getLogger(__name__)


class MaterialRow(db.Model):
    __tablename__ = "materials"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    stock = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(30), nullable=False)

    def __repr__(self):
        return f"<MaterialRow {self.name}>"


class UserRow(db.Model):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    department = db.Column(db.String(120), nullable=False, default="")
    role = db.Column(db.String(10), nullable=False, default="USER")
    username = db.Column(db.String(80), nullable=False)
    password = db.Column(db.String(255), nullable=False)

    def __repr__(self):
        return f"<UserRow {self.username} ({self.role})>"


class RequestRow(db.Model):
    __tablename__ = "requests"
    __table_args__ = {"sqlite_autoincrement": True}

    # user_id / material_id stay plain columns: the parent may be deleted
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=False)
    material_id = db.Column(db.Integer, nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    request_date = db.Column(db.String(40), nullable=False)
    status = db.Column(db.String(20), nullable=False, default="PENDING")

    def __repr__(self):
        return f"<RequestRow {self.id} {self.status}>"


ROWS = {
    "materials": MaterialRow,
    "users": UserRow,
    "requests": RequestRow,
}


def _to_dict(row):
    return {c.name: getattr(row, c.name) for c in row.__table__.columns}


class SqlBackend(Backend):
    name = "sql"

    def __init__(self):
        super().__init__()
        db.create_all()

    def list(self, collection):
        _check_collection(collection)
        model = ROWS[collection]
        return [_to_dict(row) for row in model.query.order_by(model.id.asc()).all()]

    def get(self, collection, record_id):
        _check_collection(collection)
        row = db.session.get(ROWS[collection], record_id)
        return _to_dict(row) if row else None

    def is_empty(self, collection):
        _check_collection(collection)
        return ROWS[collection].query.first() is None

    def create(self, collection, record):
        _check_collection(collection)
        row = ROWS[collection](**{k: v for k, v in record.items() if k != "id"})
        db.session.add(row)
        db.session.commit()
        self._notify(collection)
        return row.id

    def update(self, collection, record_id, fields):
        _check_collection(collection)
        row = db.session.get(ROWS[collection], record_id)
        if row is None:
            return False
        for key, value in fields.items():
            if key != "id":
                setattr(row, key, value)
        db.session.commit()
        self._notify(collection)
        return True

    def delete(self, collection, record_id):
        _check_collection(collection)
        row = db.session.get(ROWS[collection], record_id)
        if row is not None:
            db.session.delete(row)
            db.session.commit()
        self._notify(collection)

    def fulfill(self, request_id, material_id, quantity):
        # status first: a concurrent issuer blocks on the row and then
        # finds it already ISSUED
        marked = db.session.execute(
            update(RequestRow)
            .where(RequestRow.id == request_id, RequestRow.status != "ISSUED")
            .values(status="ISSUED")
            .execution_options(synchronize_session=False)
        ).rowcount
        if not marked:
            db.session.rollback()
            if db.session.get(RequestRow, request_id) is None:
                return FulfillOutcome.MISSING_REQUEST
            return FulfillOutcome.ALREADY_ISSUED

        taken = db.session.execute(
            update(MaterialRow)
            .where(MaterialRow.id == material_id, MaterialRow.stock >= quantity)
            .values(stock=MaterialRow.stock - quantity)
            .execution_options(synchronize_session=False)
        ).rowcount
        if not taken:
            db.session.rollback()
            if db.session.get(MaterialRow, material_id) is None:
                return FulfillOutcome.MISSING_MATERIAL
            return FulfillOutcome.INSUFFICIENT_STOCK

        db.session.commit()
        self._notify("materials", "requests")
        return FulfillOutcome.ISSUED

    def set_status(self, request_id, status):
        changed = db.session.execute(
            update(RequestRow)
            .where(RequestRow.id == request_id, RequestRow.status != "ISSUED")
            .values(status=status)
            .execution_options(synchronize_session=False)
        ).rowcount
        if not changed:
            db.session.rollback()
            if db.session.get(RequestRow, request_id) is None:
                return StatusOutcome.MISSING_REQUEST
            return StatusOutcome.ALREADY_ISSUED
        db.session.commit()
        self._notify("requests")
        return StatusOutcome.UPDATED

    def clear(self):
        for collection in COLLECTIONS:
            ROWS[collection].query.delete()
        db.session.commit()
        self._notify(*COLLECTIONS)
