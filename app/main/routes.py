from flask import jsonify
from app.main import bp


@bp.route('/')
def index():
    """Liveness check"""
    return jsonify({'message': 'Restaurant QR Feedback API is running'}), 200
