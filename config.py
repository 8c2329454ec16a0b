import os

from dotenv import load_dotenv

load_dotenv()


def _database_url():
    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        return "sqlite:///supplies.db"
    if db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql+psycopg://", 1)
    return db_url


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

    # local = JSON file on disk | sql = shared database
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
    LOCAL_STORE_PATH = os.getenv("LOCAL_STORE_PATH", "office_supply_db.json")

    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SEED_ON_EMPTY = os.getenv("SEED_ON_EMPTY", "1") not in ("0", "false", "False")
    LOW_STOCK_THRESHOLD = int(os.getenv("LOW_STOCK_THRESHOLD", "10"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    STORAGE_BACKEND = "sql"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SEED_ON_EMPTY = True
