import inspect
from functools import wraps

from flask import jsonify, session


def _unauthorized():
    return jsonify({'error': 'Authentication required'}), 401


def admin_required(f):
    """Decorator to require an admin session (sync or async views)"""
    if inspect.iscoroutinefunction(f):
        @wraps(f)
        async def decorated_async(*args, **kwargs):
            if 'admin_id' not in session:
                return _unauthorized()
            return await f(*args, **kwargs)
        return decorated_async

    @wraps(f)
    def decorated_function(*args, **kwargs):
        if 'admin_id' not in session:
            return _unauthorized()
        return f(*args, **kwargs)
    return decorated_function
