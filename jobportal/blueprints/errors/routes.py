from flask import jsonify, current_app, request
from werkzeug.exceptions import HTTPException
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from ...errors import PortalError, Unavailable
from ...extensions import db, _
from . import errors_bp


def _rollback():
    try:
        db.session.rollback()
    except SQLAlchemyError as e:
        current_app.logger.warning("rollback failed: %s", e)


def _error(kind: str, message: str, code: int, fields=None):
    body = {"kind": kind, "message": message}
    if fields:
        body["fields"] = fields
    return jsonify({"success": False, "error": body}), code


# Domain errors raised by the services
@errors_bp.app_errorhandler(PortalError)
def err_portal(e: PortalError):
    if e.status_code >= 500:
        current_app.logger.error("%s on %s %s: %s", e.kind, request.method, request.path, e.message)
    return jsonify({"success": False, "error": e.to_dict()}), e.status_code

# Store unreachable
@errors_bp.app_errorhandler(OperationalError)
def err_store(e):
    _rollback()
    current_app.logger.error("database unavailable on %s %s: %s", request.method, request.path, e)
    return err_portal(Unavailable(_("Database is unavailable. Please try again later.")))

# 413: Payload Too Large (useful for uploads)
@errors_bp.app_errorhandler(413)
def err_413(e):
    return _error("payload_too_large", _("File is too large."), 413)

# Fallback for uncaught HTTPException (404 routes, 405, malformed JSON ...)
@errors_bp.app_errorhandler(HTTPException)
def err_http(e: HTTPException):
    return _error(e.name.lower().replace(" ", "_"), e.description, e.code)

# Last-resort: any other Exception
@errors_bp.app_errorhandler(Exception)
def err_unexpected(e):
    # if a DB action caused this, rollback so app isn't stuck in bad transaction
    _rollback()
    current_app.logger.exception("Unhandled error on %s %s", request.method, request.path)
    # Don't leak internals, just a generic 500
    return _error("server_error", _("Server Error"), 500)
