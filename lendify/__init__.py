from flask import Flask, jsonify
from werkzeug.exceptions import InternalServerError

from lendify.exceptions import LedgerError
from lendify.config import Config
from lendify.extensions import db, migrate, jwt, mail
from lendify.db_setup import configure_store
from lendify.utils.responses import json_error, ledger_error


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # models must be imported before the mappers are configured
    from lendify.models import user, item, borrow_record, notification_log  # noqa: F401

    # 1) db first, everything else needs db.engine / db.session
    db.init_app(app)

    # 2) dialect specific locking setup
    configure_store(app)

    # 3) other extensions
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    # 4) API blueprints
    from lendify.controllers.auth_controller import auth_bp
    from lendify.controllers.item_controller import item_bp
    from lendify.controllers.user_controller import user_bp
    from lendify.controllers.borrow_controller import borrow_bp
    from lendify.controllers.dashboard_controller import dashboard_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(item_bp, url_prefix="/items")
    app.register_blueprint(user_bp, url_prefix="/users")
    app.register_blueprint(borrow_bp, url_prefix="/borrow")
    app.register_blueprint(dashboard_bp, url_prefix="/dashboard")

    # anything a controller did not map still answers with the JSON envelope
    @app.errorhandler(LedgerError)
    def handle_ledger_error(e):
        return ledger_error(e)

    @app.errorhandler(InternalServerError)
    def handle_internal_error(e):
        # Flask has already logged the original exception
        return json_error("Internal server error", 500)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    # loan reminders
    from lendify.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
