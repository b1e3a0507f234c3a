import logging

from flask import Flask
from flask_cors import CORS

from config import Config


def create_app(config_class=Config):
    """Application factory for creating autoleveller API instances."""
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Library modules log through their own loggers; route them at the configured level
    logging.getLogger('autoleveller').setLevel(app.config.get('LOG_LEVEL', 'INFO').upper())

    # Configure CORS - allow any origin on the JSON API
    CORS(app, resources={r"/api/*": {"origins": "*"}})

    # Import and register blueprints inside factory to avoid circular imports
    from web.routes.api import api_bp

    app.register_blueprint(api_bp, url_prefix='/api')

    return app


if __name__ == '__main__':
    logging.basicConfig(level=Config.LOG_LEVEL.upper())
    create_app().run(debug=True, port=5001)
