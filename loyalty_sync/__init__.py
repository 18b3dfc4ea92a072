"""
Loyalty Sync
Flask application factory for the Shopify -> HubSpot loyalty webhook.
"""
import os
import logging
from flask import Flask, jsonify

from .config import get_config, validate_config, SyncSettings
from .utils.errors import ErrorCode, error_body
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config_name: str = None, dispatcher=None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)
        dispatcher: Optional pre-built WebhookDispatcher (tests inject fakes)

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    # Setup logging before anything else
    setup_logging()

    validate_config(config_name)

    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    settings = SyncSettings.from_mapping(app.config)
    if dispatcher is None:
        from .services import WebhookDispatcher
        dispatcher = WebhookDispatcher.from_settings(settings)

    app.extensions['loyalty_sync'] = {
        'settings': settings,
        'dispatcher': dispatcher,
    }

    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    register_error_handlers(app)

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'service': 'loyalty-sync'}

    logger.info(
        f'Loyalty sync ready (config={config_name}, store={settings.shopify_store or "unset"}, '
        f'duplicates={settings.duplicate_policy})'
    )
    return app


def register_blueprints(app: Flask) -> None:
    """Register webhook blueprints."""
    from .webhooks import loyalty_hook_bp

    app.register_blueprint(loyalty_hook_bp, url_prefix='/api')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""

    @app.errorhandler(400)
    def bad_request(error):
        return jsonify(error_body('Bad request', ErrorCode.INVALID_REQUEST)), 400

    @app.errorhandler(404)
    def not_found(error):
        return jsonify(error_body('Not found', ErrorCode.NOT_FOUND)), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        from .webhooks.loyalty_hook import is_hook_request, liveness_response
        if is_hook_request():
            return liveness_response()
        return jsonify(error_body('Method not allowed', ErrorCode.METHOD_NOT_ALLOWED)), 405

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify(error_body('Internal server error', ErrorCode.INTERNAL_ERROR)), 500
