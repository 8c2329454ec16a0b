import logging

from flask import Flask, redirect, url_for
from flask_login import current_user

from config import Config

from .auth import load_session_user
from .extensions import db, get_store, login_manager
from .seed import seed_if_empty
from .storage import make_backend
from .store import InventoryStore


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    log = logging.getLogger("supplies")

    db.init_app(app)
    login_manager.init_app(app)
    login_manager.login_view = "auth.login"
    login_manager.login_message = "Please log in to continue."

    @login_manager.user_loader
    def load_user(user_id):
        return load_session_user(get_store(), user_id)

    # storage + seed
    with app.app_context():
        backend = make_backend(app.config)
        log.info("using %s storage backend", backend.name)
        if app.config.get("SEED_ON_EMPTY", True):
            seed_if_empty(backend)
        app.extensions["inventory_store"] = InventoryStore(backend)

    @app.before_request
    def sync_store():
        get_store().sync()

    # Blueprints
    from supplies.blueprints.auth import auth_bp
    from supplies.blueprints.inventory import inventory_bp
    from supplies.blueprints.admin import admin_bp
    from supplies.blueprints.reports import reports_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(inventory_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(reports_bp)

    @app.get("/")
    def index():
        if not current_user.is_authenticated:
            return redirect(url_for("auth.login"))
        if current_user.is_admin:
            return redirect(url_for("inventory.dashboard"))
        return redirect(url_for("inventory.my_requests"))

    return app
