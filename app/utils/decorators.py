from functools import wraps
from flask import jsonify
from flask_jwt_extended import verify_jwt_in_request, get_jwt_identity

from app.extensions import db
from app.models import User


def admin_required(f):
    """Require a valid admin JWT and pass the admin as ``current_user``."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        verify_jwt_in_request()
        identity = get_jwt_identity()

        user = None
        try:
            user = db.session.get(User, int(identity))
        except (TypeError, ValueError):
            user = None

        if not user:
            return jsonify({'success': False, 'message': 'User not found'}), 401
        if not user.is_admin:
            return jsonify({'success': False, 'message': 'Not authorized to access this route'}), 403

        kwargs['current_user'] = user
        return f(*args, **kwargs)
    return decorated_function


def tenant_guard(id_arg, loader, not_found_message, restaurant_of=None):
    """
    Reject requests for resources owned by another restaurant.

    :param id_arg: name of the view argument holding the resource id
    :param loader: callable loading the resource by id
    :param not_found_message: message returned when the resource does not exist
    :param restaurant_of: callable returning the owning restaurant id (defaults to ``restaurant_id``)
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            current_user = kwargs.get('current_user')
            resource = loader(kwargs.get(id_arg))
            if resource is None:
                return jsonify({'success': False, 'message': not_found_message}), 404

            owner_id = restaurant_of(resource) if restaurant_of else resource.restaurant_id
            if current_user is None or not current_user.can_access_restaurant(owner_id):
                return jsonify({'success': False, 'message': 'Not authorized to access this restaurant'}), 403
            return f(*args, **kwargs)
        return decorated_function
    return decorator
