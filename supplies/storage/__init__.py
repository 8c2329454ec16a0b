from .base import COLLECTIONS, Backend, FulfillOutcome, StatusOutcome
from .local import LocalBackend

__all__ = ["COLLECTIONS", "Backend", "FulfillOutcome", "LocalBackend", "StatusOutcome", "make_backend"]


def make_backend(config):
    """Build the backend named by ``STORAGE_BACKEND``.

    The sql backend needs an application context (Flask-SQLAlchemy).
    """
    kind = (config.get("STORAGE_BACKEND") or "local").lower()
    if kind == "local":
        return LocalBackend(config.get("LOCAL_STORE_PATH") or "office_supply_db.json")
    if kind == "sql":
        from .sql import SqlBackend

        return SqlBackend()
    raise ValueError(f"unknown STORAGE_BACKEND: {kind!r}")
