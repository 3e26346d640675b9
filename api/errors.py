from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
import logging

from services.exceptions import AccountServiceError


def error_response(message: str, status: int):
    payload = {"statusCode": status, "message": message, "success": False}
    return jsonify(payload), status


def register_error_handlers(app):
    # Domain errors carry their own status
    @app.errorhandler(AccountServiceError)
    def handle_service_error(err: AccountServiceError):
        if err.status_code >= 500:
            logging.exception("Service error", exc_info=err)
        return error_response(err.message, err.status_code)

    # Marshmallow shape errors map to 400
    @app.errorhandler(SchemaValidationError)
    def handle_validation_error(err: SchemaValidationError):
        if current_app and current_app.debug:
            logging.exception("Invalid input", exc_info=err)
        return error_response("Invalid input", 400)

    # Unique index on username/email tripped outside the register path (e.g. updateDetails)
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        if current_app and current_app.debug:
            logging.exception("Integrity error", exc_info=err)
        lower_msg = str(getattr(err, "orig", err)).lower()
        if "unique" in lower_msg:
            return error_response("User with email or username already exists", 409)
        return error_response("Integrity error", 400)

    # Werkzeug HTTPExceptions (404 routes, 405, 413 uploads...) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all); details go to the log, never to the client
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        return error_response("An unexpected error occurred", 500)
