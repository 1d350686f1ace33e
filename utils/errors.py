import logging
from flask import jsonify
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException
from database.db import db

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInput(ApiError):
    status_code = 400


class InvalidState(ApiError):
    status_code = 400


class Unauthorized(ApiError):
    status_code = 401


class Forbidden(ApiError):
    status_code = 403


class NotFound(ApiError):
    status_code = 404


def register_error_handlers(blueprint, key="msg"):
    """Render ApiError and database failures raised inside ``blueprint``.

    ``key`` is the JSON field carrying the message; the users, services and
    bookings endpoints answer ``msg`` while payments and feedback answer
    ``message``.
    """

    @blueprint.errorhandler(ApiError)
    def handle_api_error(error):
        db.session.rollback()
        return jsonify({key: error.message}), error.status_code

    @blueprint.errorhandler(IntegrityError)
    def handle_integrity_error(error):
        db.session.rollback()
        logger.warning("Integrity error in %s: %s", blueprint.name, error.orig)
        return jsonify({key: "Invalid data"}), 400

    @blueprint.errorhandler(SQLAlchemyError)
    def handle_database_error(error):
        db.session.rollback()
        logger.exception("Database error in %s", blueprint.name)
        return jsonify({key: "Server Error"}), 500

    @blueprint.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        db.session.rollback()
        logger.exception("Unhandled error in %s", blueprint.name)
        return jsonify({key: "Server Error"}), 500
