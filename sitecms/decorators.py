"""
Shared Decorators

Common decorators used across multiple blueprints.
"""

from functools import wraps
from flask import flash, redirect, url_for, request, jsonify
from flask_login import current_user


def _wants_json():
    return (
        request.path.startswith('/api/')
        or request.headers.get('X-Requested-With') == 'XMLHttpRequest'
        or request.is_json
    )


def admin_required(f):
    """
    Decorator to require admin access.

    Should be used with @login_required on HTML views:
        @route('/admin')
        @login_required
        @admin_required
        def admin_page():
            ...

    API views use it on its own so anonymous callers get JSON rather than a
    login redirect.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            if _wants_json():
                return jsonify({'error': 'unauthorized', 'message': 'Authentication required.'}), 401
            return redirect(url_for('auth.login', next=request.path))
        if not current_user.is_admin:
            if _wants_json():
                return jsonify({'error': 'forbidden', 'message': 'Admin access required.'}), 403
            flash('Admin access required.', 'error')
            return redirect(url_for('public.index'))
        return f(*args, **kwargs)
    return decorated_function
