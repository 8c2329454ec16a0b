"""Reset the stored data and write the seed set again.

Usage:
  python reset_store.py

Works for both storage backends (STORAGE_BACKEND=local|sql) and leaves:
  admin / 123      (ADMIN)
  somchai / 123    (USER)
  somsri / 123     (USER)
"""

from config import Config
from supplies import create_app
from supplies.extensions import get_store
from supplies.seed import seed_if_empty


class ResetConfig(Config):
    SEED_ON_EMPTY = False


def reset_store():
    app = create_app(ResetConfig)
    with app.app_context():
        backend = get_store().backend
        backend.clear()
        seed_if_empty(backend)

        print(f"OK! {backend.name} store reset.")
        print("Login: admin  |  Password: 123")


if __name__ == "__main__":
    reset_store()
