from flask import jsonify, request, current_app, g
from app.errors import bp
from app.extensions import db
from datetime import datetime, timezone


def create_api_error_response(error_type, message, status_code, details=None):
    """Create a standardized API error response"""
    response = {
        'success': False,
        'message': message,
        'error': {
            'code': status_code,
            'type': error_type,
            'timestamp': datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z'),
            'request_id': getattr(g, 'request_id', None),
            'path': request.path,
            'method': request.method
        }
    }

    if details:
        response['error']['details'] = details

    current_app.logger.warning(
        f"API Error {status_code}: {error_type} - {message} (Request ID: {response['error']['request_id']})"
    )

    return jsonify(response), status_code


@bp.app_errorhandler(400)
def bad_request(error):
    """Handle 400 Bad Request errors"""
    message = str(error.description) if hasattr(error, 'description') else 'Bad request'
    return create_api_error_response('bad_request', message, 400)


@bp.app_errorhandler(401)
def unauthorized(error):
    """Handle 401 Unauthorized errors"""
    return create_api_error_response('unauthorized', 'Not authorized, no token', 401)


@bp.app_errorhandler(403)
def forbidden(error):
    """Handle 403 Forbidden errors"""
    return create_api_error_response('forbidden', 'Access denied', 403)


@bp.app_errorhandler(404)
def not_found(error):
    """Handle 404 Not Found errors"""
    return create_api_error_response('not_found', 'Resource not found', 404)


@bp.app_errorhandler(405)
def method_not_allowed(error):
    """Handle 405 Method Not Allowed errors"""
    return create_api_error_response('method_not_allowed', 'Method not allowed', 405, {
        'allowed_methods': list(error.valid_methods) if getattr(error, 'valid_methods', None) else []
    })


@bp.app_errorhandler(500)
def internal_error(error):
    """Handle 500 Internal Server errors"""
    db.session.rollback()
    return create_api_error_response('internal_error', 'Internal server error', 500)


def register_jwt_handlers(jwt):
    """Render token failures with the same envelope as the other API errors."""

    @jwt.unauthorized_loader
    def missing_token(reason):
        return create_api_error_response('unauthorized', 'Not authorized, no token', 401, {'reason': reason})

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return create_api_error_response('unauthorized', 'Not authorized, token failed', 401, {'reason': reason})

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return create_api_error_response('unauthorized', 'Not authorized, token expired', 401)
