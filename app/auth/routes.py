from flask import jsonify, current_app
from flask_jwt_extended import create_access_token, jwt_required, get_jwt_identity
from marshmallow import ValidationError

from app.auth import bp
from app.extensions import db
from app.models import User
from app.schemas import LoginSchema, RegisterSchema, UserPublicSchema
from app.services.user_service import UserService
from app.utils.helpers import get_request_data, log_route

login_schema = LoginSchema()
register_schema = RegisterSchema()
user_public_schema = UserPublicSchema()


@bp.route('/register', methods=['POST'])
@log_route
def register():
    """Register a restaurant with its first admin and return a JWT"""
    try:
        data = register_schema.load(get_request_data())
    except ValidationError as err:
        return jsonify({'success': False, 'message': 'Invalid input data', 'details': err.messages}), 400

    user, error = UserService.register_restaurant(data)
    if error:
        return jsonify({'success': False, 'message': error}), 400

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims=user.token_claims()
    )

    return jsonify({
        'success': True,
        'token': access_token,
        'user': user_public_schema.dump(user),
        'restaurant': {'id': user.restaurant.id, 'name': user.restaurant.name}
    }), 201


@bp.route('/login', methods=['POST'])
@log_route
def login():
    """Authenticate an admin and return a JWT carrying the restaurant claim"""
    try:
        data = login_schema.load(get_request_data())
    except ValidationError as err:
        return jsonify({'success': False, 'message': 'Invalid input data', 'details': err.messages}), 400

    user = User.query.filter_by(email=data['email'].lower()).first()
    if not user or not user.check_password(data['password']):
        current_app.logger.warning(f"Failed login attempt for {data['email']}")
        return jsonify({'success': False, 'message': 'Invalid email or password'}), 401

    access_token = create_access_token(
        identity=str(user.id),
        additional_claims=user.token_claims()
    )
    current_app.logger.info(f"User {user.id} logged in for restaurant {user.restaurant_id}")

    return jsonify({
        'success': True,
        'token': access_token,
        'user': user_public_schema.dump(user)
    }), 200


@bp.route('/me', methods=['GET'])
@jwt_required()
@log_route
def me():
    """Return the authenticated user"""
    user_id = get_jwt_identity()
    try:
        user = db.session.get(User, int(user_id))
    except (TypeError, ValueError):
        user = None
    if not user:
        return jsonify({'success': False, 'message': 'User not found'}), 404

    return jsonify({'success': True, 'data': user_public_schema.dump(user)}), 200
