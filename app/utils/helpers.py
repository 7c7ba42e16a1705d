from flask import request, current_app, g, jsonify
from functools import wraps


_SENSITIVE_KEYS = {
    'password', 'password_hash', 'token', 'access_token', 'refresh_token',
    'authorization', 'Authorization', 'secret'
}


def _mask_sensitive(obj):
    """Recursively mask sensitive values in dicts/lists.

    Returns a copy suitable for logging.
    """
    if isinstance(obj, dict):
        out = {}
        for k, v in obj.items():
            if k in _SENSITIVE_KEYS or any(sk in str(k).lower() for sk in _SENSITIVE_KEYS):
                out[k] = '***REDACTED***'
            else:
                out[k] = _mask_sensitive(v)
        return out
    elif isinstance(obj, (list, tuple)):
        return [_mask_sensitive(i) for i in obj]
    else:
        return obj


def get_request_data():
    """
    Get data from the request, regardless of the content type.
    """
    if request.is_json:
        return request.get_json(silent=True) or {}
    else:
        return request.form.to_dict()


def get_pagination_params():
    """Page and limit query parameters; malformed values fall back to defaults."""
    default_limit = current_app.config.get('DEFAULT_PAGE_SIZE', 20)
    max_limit = current_app.config.get('MAX_PAGE_SIZE', 100)

    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', default_limit, type=int)
    if page is None or page < 1:
        page = 1
    if limit is None or limit < 1:
        limit = default_limit
    return page, min(limit, max_limit)


def get_sort_order(default='desc'):
    sort_order = request.args.get('sortOrder', default, type=str).lower()
    return sort_order if sort_order in ('asc', 'desc') else default


def log_route(func):
    """Decorator to log entry, exit, response status and exceptions for route handlers.

    Logs request method/path, request id (if set on `g`) and query args.
    Catches exceptions, logs the traceback, and returns a JSON 500 envelope
    carrying the underlying message so that unexpected errors are handled consistently.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        logger = current_app.logger
        rid = getattr(g, 'request_id', None)
        try:
            try:
                masked_args = _mask_sensitive(dict(request.args))
            except Exception:
                masked_args = str(request.args)

            logger.info(
                f"Enter {func.__name__} request_id={rid} method={request.method} path={request.path} "
                f"remote_addr={request.remote_addr} args={masked_args}"
            )

            result = func(*args, **kwargs)

            status_code = None
            if isinstance(result, tuple) and len(result) >= 2 and isinstance(result[1], int):
                status_code = result[1]
            else:
                status_code = getattr(result, 'status_code', None)

            logger.info(f"Exit {func.__name__} request_id={rid} status={status_code}")
            return result

        except Exception as e:
            if _is_http_error(e):
                raise
            logger.exception(f"Unhandled exception in {func.__name__} request_id={rid}: {e}")
            return jsonify({'success': False, 'message': 'Internal server error', 'error': str(e)}), 500

    return wrapper


def _is_http_error(exc):
    """Errors that carry their own HTTP response and are rendered by registered handlers."""
    from werkzeug.exceptions import HTTPException
    from flask_jwt_extended.exceptions import JWTExtendedException
    from jwt.exceptions import PyJWTError
    return isinstance(exc, (HTTPException, JWTExtendedException, PyJWTError))

