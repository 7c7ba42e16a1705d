import os
import uuid
from flask import Flask, g, request
from dotenv import load_dotenv

from app.extensions import db, migrate, bcrypt, jwt
from app.config import config

# Load environment variables from .env file
load_dotenv()

def create_app(config_name=None):
    app = Flask(__name__)

    # Determine configuration name
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'default')

    # Load the appropriate configuration class based on config_name
    config_class = config.get(config_name, config['default'])
    app.config.from_object(config_class)

    # Initialize extensions after configuration is applied
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    jwt.init_app(app)

    # Run any additional initialization specific to the config
    config_class.init_app(app)

    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get('X-Request-ID') or uuid.uuid4().hex

    # Register blueprints
    from app.errors import bp as errors_bp
    from app.errors.handlers import register_jwt_handlers
    app.register_blueprint(errors_bp)
    register_jwt_handlers(jwt)

    from app.main import bp as main_bp
    app.register_blueprint(main_bp)

    from app.auth import bp as auth_bp
    app.register_blueprint(auth_bp)

    from app.analytics import bp as analytics_bp
    app.register_blueprint(analytics_bp)

    from app.feedback import bp as feedback_bp
    app.register_blueprint(feedback_bp)

    return app
