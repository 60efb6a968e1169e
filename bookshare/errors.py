"""Error taxonomy shared by the service layer and the blueprints.

Services raise these; controllers catch ``ServiceError`` and hand it to
``error_response``. They subclass ``ValueError``, so a plain
``except ValueError`` catches them too.
"""
from flask import jsonify


class ServiceError(ValueError):
    status_code = 400
    kind = "error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.kind


class Unauthorized(ServiceError):
    status_code = 401
    kind = "unauthorized"


class Forbidden(ServiceError):
    status_code = 403
    kind = "forbidden"


class NotFound(ServiceError):
    status_code = 404
    kind = "not_found"


class InvalidArgument(ServiceError):
    status_code = 400
    kind = "invalid_argument"


class Conflict(ServiceError):
    status_code = 409
    kind = "conflict"


class InvalidState(ServiceError):
    status_code = 400
    kind = "invalid_state"


def json_error(message: str, code: int = 400, kind: str = "error"):
    return jsonify({"success": False, "error": kind, "message": message}), code


def error_response(err: ServiceError):
    return json_error(err.message, err.status_code, err.kind)


def register_error_handlers(app):
    from bookshare.extensions import db

    @app.errorhandler(ServiceError)
    def _service_error(e):
        db.session.rollback()
        return error_response(e)

    @app.errorhandler(404)
    def _not_found(_e):
        return json_error("Not found", 404, NotFound.kind)

    @app.errorhandler(405)
    def _method_not_allowed(_e):
        return json_error("Method not allowed", 405)

    @app.errorhandler(500)
    def _internal(e):
        db.session.rollback()
        app.logger.exception(f"[app] Unhandled error: {e}")
        return json_error("Internal server error", 500)
