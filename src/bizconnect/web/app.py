"""
Flask application factory
Creates and configures the Flask web application
"""
import logging
import time

from flask import Flask, g, request
from flask_cors import CORS

from ..config import settings, setup_logging
from ..config.logging_config import generate_request_id, set_request_id
from ..database.store import QuickSaleStore
from .admin_routes import register_admin_routes
from .context import close_store
from .routes import register_routes

logger = logging.getLogger('bizconnect.http')


def create_app(store_factory=None):
    """
    Create and configure the Flask application

    Args:
        store_factory: Callable returning a QuickSaleStore-like object,
                       called once per request (defaults to QuickSaleStore)

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)
    app.config['STORE_FACTORY'] = store_factory or QuickSaleStore
    CORS(app, origins=settings.CORS_ORIGINS)

    @app.before_request
    def start_request():
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        set_request_id(request_id)
        g.request_id = request_id
        g.started_at = time.perf_counter()

    @app.after_request
    def finish_request(response):
        duration_ms = (time.perf_counter() - g.get('started_at', time.perf_counter())) * 1000
        response.headers['X-Request-ID'] = g.get('request_id', '')
        logger.info(
            "HTTP %s %s - %s (%.2fms)",
            request.method, request.path, response.status_code, duration_ms,
            extra={
                "http_method": request.method,
                "http_path": request.path,
                "http_status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
        )
        return response

    app.teardown_appcontext(close_store)

    # Register all routes
    register_routes(app)
    register_admin_routes(app)

    return app


def run_server(host='0.0.0.0', port=5001, debug=True):
    """
    Run the Flask development server

    Args:
        host: Host to bind to
        port: Port to listen on
        debug: Enable debug mode
    """
    setup_logging()
    app = create_app()
    app.run(host=host, port=port, debug=debug)
