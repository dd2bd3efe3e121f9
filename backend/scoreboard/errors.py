"""Error taxonomy shared by the services and the HTTP layer.

Services raise these; the app-level handlers registered by
``register_error_handlers`` turn them into ``{'error': message}`` bodies.
"""

from flask import jsonify
from sqlalchemy.exc import SQLAlchemyError


class ScoreboardError(Exception):
    status_code = 500
    message = 'Server error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message

    def to_response(self):
        return jsonify({'error': self.message}), self.status_code


class ValidationError(ScoreboardError):
    status_code = 400
    message = 'Invalid request'


class InvalidScore(ValidationError):
    message = 'Invalid score'


class DuplicateEmail(ScoreboardError):
    status_code = 400
    message = 'Email already registered'


class InvalidCredentials(ScoreboardError):
    status_code = 401
    message = 'Invalid credentials'


class Unauthenticated(ScoreboardError):
    status_code = 401
    message = 'Not logged in'


class UserNotFound(ScoreboardError):
    status_code = 404
    message = 'User not found'


class AlreadySubmitted(ScoreboardError):
    # Only meaningful under a one-shot submission policy; the ledger accumulates.
    status_code = 400
    message = 'Already submitted'


class StoreUnavailable(ScoreboardError):
    status_code = 500
    message = 'Server error'


def register_error_handlers(flask_app, db):
    @flask_app.errorhandler(ScoreboardError)
    def handle_scoreboard_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc}")
        return exc.to_response()

    @flask_app.errorhandler(SQLAlchemyError)
    def handle_store_error(exc):
        db.session.rollback()
        flask_app.logger.exception(f"[store] {type(exc).__name__}")
        return StoreUnavailable().to_response()

    @flask_app.errorhandler(404)
    def handle_not_found(exc):
        return jsonify({'error': 'Not found'}), 404

    @flask_app.errorhandler(405)
    def handle_method_not_allowed(exc):
        return jsonify({'error': 'Method not allowed'}), 405
