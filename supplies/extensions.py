from flask import current_app
from flask_login import LoginManager
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
login_manager = LoginManager()


def get_store():
    return current_app.extensions["inventory_store"]
