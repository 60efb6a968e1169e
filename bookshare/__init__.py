import logging

from flask import Flask, jsonify
from bookshare.config import Config
from bookshare.errors import Unauthorized, json_error, register_error_handlers
from bookshare.extensions import db, migrate, jwt, mail


def _register_jwt_callbacks():
    # every credential failure renders as the same Unauthorized error body
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return json_error(f"Unauthorized: {reason}", 401, Unauthorized.kind)

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return json_error(f"Invalid token: {reason}", 401, Unauthorized.kind)

    @jwt.expired_token_loader
    def _expired_token(_header, _payload):
        return json_error("Token expired", 401, Unauthorized.kind)


def create_app(config_object=None):
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.logger.setLevel(getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO))
    app.url_map.strict_slashes = False

    # 1) extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)
    _register_jwt_callbacks()
    register_error_handlers(app)

    # 2) models have to be imported before create_all / migrations see them
    from bookshare.models import book, borrow_request, contact, invite, mail_log, message, review, user  # noqa: F401

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()

    # 3) API blueprints
    from bookshare.controllers.auth_controller import auth_bp
    from bookshare.controllers.book_controller import book_bp
    from bookshare.controllers.borrow_controller import borrow_bp
    from bookshare.controllers.invite_controller import invite_bp
    from bookshare.controllers.message_controller import message_bp
    from bookshare.controllers.review_controller import review_bp
    from bookshare.controllers.user_controller import user_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(user_bp, url_prefix="/users")
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(borrow_bp, url_prefix="/requests")
    app.register_blueprint(invite_bp)
    app.register_blueprint(message_bp, url_prefix="/messages")
    app.register_blueprint(review_bp, url_prefix="/reviews")

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    return app
