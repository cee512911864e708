from functools import wraps
from flask import g, jsonify, request

USER_HEADER = 'X-User-Id'


def current_user_id():
    """Opaque user id supplied by the upstream identity provider, or None."""
    return (request.headers.get(USER_HEADER) or '').strip() or None


def require_user(func):
    """Reject mutating calls that arrive without a user id."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        user_id = current_user_id()
        if not user_id:
            return jsonify({'error': f'{USER_HEADER} header required'}), 401
        g.user_id = user_id
        return func(*args, **kwargs)

    return wrapper
