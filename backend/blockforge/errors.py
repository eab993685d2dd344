from flask import current_app, jsonify
from werkzeug.exceptions import HTTPException

from blockforge.domain.exceptions import (
    AssetUnresolved,
    InvariantViolation,
    SchemaUnavailable,
    ValidationFailed,
    VersionInvalidOperation,
    VersionNotFound,
)


def _error_response(error, status_code, **extra):
    body = {
        "error": type(error).__name__,
        "message": str(error),
    }
    body.update(extra)
    response = jsonify(body)
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(InvariantViolation)
    def handle_invariant_violation(error):
        return _error_response(error, 400)

    @app.errorhandler(SchemaUnavailable)
    def handle_schema_unavailable(error):
        status = 503 if error.reason == SchemaUnavailable.REGISTRY_UNAVAILABLE else 404
        return _error_response(error, status, reason=error.reason)

    @app.errorhandler(VersionNotFound)
    def handle_version_not_found(error):
        return _error_response(error, 404, timestamp=error.timestamp)

    @app.errorhandler(VersionInvalidOperation)
    def handle_version_invalid_operation(error):
        current_app.logger.info("Rejected version operation: %s", error)
        return _error_response(error, 409, reason=error.reason)

    @app.errorhandler(AssetUnresolved)
    def handle_asset_unresolved(error):
        return _error_response(error, 404, id=error.asset_id, kind=error.kind)

    @app.errorhandler(ValidationFailed)
    def handle_validation_failed(error):
        return _error_response(error, 422, errors=error.errors)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        if error.code is None or error.code < 400:
            return error
        response = jsonify({
            "error": error.name,
            "message": error.description,
        })
        response.status_code = error.code
        return response
