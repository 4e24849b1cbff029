import os

from flask import Flask, jsonify
from flask_cors import CORS

from app.models import db
from app.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_app(config_overrides=None):
    """
    Application factory.

    Args:
        config_overrides: Optional dict applied after the environment config
                          (tests use this to point at an in-memory database)
    """
    # Import config after dotenv is loaded
    from app.config import get_config
    from app.db_config import configure_database
    from app.api import api_bp

    # Get the appropriate config class based on environment
    config_class = get_config()

    app = Flask(__name__)
    app.config.from_object(config_class)

    # Configure database separately
    configure_database(app)

    if config_overrides:
        app.config.update(config_overrides)

    log_file = app.config.get("LOG_FILE")
    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    configure_logging(
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_file=log_file,
        json_console=app.config.get("LOG_JSON", False),
    )

    logger.info(f"Starting application in {config_class.ENV} environment")
    logger.info(f"Database URI: {app.config.get('SQLALCHEMY_DATABASE_URI', 'Not set')[:50]}...")

    # Get allowed origins from environment variable
    allowed_origins = app.config.get("CORS_ORIGINS", "*")
    if allowed_origins != "*":
        # Parse comma-separated list if provided
        allowed_origins = [origin.strip() for origin in allowed_origins.split(",")]

    CORS(app,
         resources={r"/*": {"origins": allowed_origins}},
         supports_credentials=True,
         allow_headers=["Content-Type", "Authorization"],
         methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"])

    db.init_app(app)

    @app.route("/")
    def index():
        return jsonify({"service": "job-calendar", "status": "ok"}), 200

    # Register blueprints
    app.register_blueprint(api_bp, url_prefix="/api")

    # Global error handler so every failure comes back as JSON
    @app.errorhandler(Exception)
    def handle_exception(e):
        """Handle all exceptions and return a JSON body"""
        if hasattr(e, 'code') and isinstance(e.code, int):
            status_code = e.code
        elif hasattr(e, 'status_code'):
            status_code = e.status_code
        else:
            status_code = 500

        if status_code >= 500:
            logger.error("Unhandled exception", error=str(e), exc_info=True)

        response = jsonify({
            "error": str(e),
            "message": "An error occurred processing your request"
        })
        response.status_code = status_code
        return response

    return app
