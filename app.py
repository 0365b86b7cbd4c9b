"""
Impact Track
Flask application factory for the ESG impact tracking API
"""

from flask import Flask, jsonify
from flask_cors import CORS
from flask_login import LoginManager
from datetime import datetime
import logging
import os

from config import config
from models import db
from storage import init_storage, get_storage
from services import cache_service

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

login_manager = LoginManager()


@login_manager.user_loader
def load_user(user_id):
    return get_storage().get_user(int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'message': 'Unauthorized'}), 401


def create_app(config_name=None, test_config=None):
    """Create and configure the Flask application"""
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'default')
    if config_name not in config:
        config_name = 'default'

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    if test_config:
        app.config.update(test_config)

    logging.getLogger().setLevel(app.config.get('LOG_LEVEL', 'INFO'))
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    CORS(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # Extensions
    db.init_app(app)
    login_manager.init_app(app)
    cache_service.init_app(app)
    init_storage(app)

    from blueprints import ALL_BLUEPRINTS
    for blueprint in ALL_BLUEPRINTS:
        app.register_blueprint(blueprint)

    register_error_handlers(app)

    @app.route('/api/health')
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy',
            'storage': get_storage().name,
            'cache': cache_service.enabled,
            'timestamp': datetime.utcnow().isoformat()
        })

    from commands import register_commands
    register_commands(app)

    from tasks import init_celery
    init_celery(app)

    logger.info(f'Application created with "{config_name}" configuration')
    return app


def register_error_handlers(app):
    """JSON bodies for HTTP errors raised outside the route handlers"""

    @app.errorhandler(400)
    def bad_request(e):
        return jsonify({'message': 'Bad request'}), 400

    @app.errorhandler(401)
    def unauthorized_error(e):
        return jsonify({'message': 'Unauthorized'}), 401

    @app.errorhandler(403)
    def forbidden(e):
        return jsonify({'message': 'Forbidden'}), 403

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({'message': 'Not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(e):
        logger.error(f'Unhandled server error: {e}')
        db.session.rollback()
        return jsonify({'message': 'Internal server error'}), 500


# Run the Flask app
if __name__ == "__main__":
    create_app().run(debug=True, host="0.0.0.0", port=5000)
