"""
Weather Data API - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance.
"""

import logging
import os

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from weather_api.config import Config
from weather_api.errors import ApiError
from weather_api.extensions import db, login_manager

logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    logging.getLogger('weather_api').setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Register blueprints
    from weather_api.auth import auth_bp
    from weather_api.users import users_bp
    from weather_api.weather import weather_bp

    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(users_bp, url_prefix='/users')
    app.register_blueprint(weather_bp, url_prefix='/weather')

    # Resolve the caller from the authentication key on every request
    @login_manager.request_loader
    def load_user_from_request(request):
        from weather_api.auth.decorators import get_request_token
        from weather_api.services import identity
        return identity.find_by_token(get_request_token())

    _register_error_handlers(app)

    # Create database tables
    with app.app_context():
        if app.config['SQLALCHEMY_DATABASE_URI'].startswith('sqlite:///') and not app.testing:
            os.makedirs(os.path.join(Config.basedir, 'instance'), exist_ok=True)
        db.create_all()
        _ensure_default_data(app)

    return app


def _register_error_handlers(app):
    """Render every failure as a ``{status, message}`` JSON body."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        return jsonify({'status': error.code, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.exception('Unhandled error')
        return jsonify({'status': 500, 'message': 'Unexpected server error'}), 500


def _ensure_default_data(app):
    """Ensure the bootstrap Teacher account exists when one is configured."""
    from weather_api.models import User
    from weather_api.services import identity

    email = app.config.get('BOOTSTRAP_TEACHER_EMAIL')
    password = app.config.get('BOOTSTRAP_TEACHER_PASSWORD')
    if not email or not password:
        return

    user = User.query.filter_by(email=email).first()
    if user is None:
        identity.create_user(email, password, 'Teacher')
        logger.info('Created bootstrap Teacher account %s', email)
    elif user.role != 'Teacher':
        identity.update_user(user.id, {'role': 'Teacher'})
        logger.info('Promoted %s to Teacher', email)
