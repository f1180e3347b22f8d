"""
Flight Tracker Flask Application.

Main entry point for the web application. Initializes:
- Database schema
- API routes and health check
- Request logging and CORS
- Error handlers
- Static file serving (production only)

Usage:
    python -m flight_tracker.app

Or with gunicorn:
    gunicorn 'flight_tracker.app:create_app()'
"""

import logging
import os
import sys
from typing import Optional

from flask import Flask, jsonify, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from flight_tracker.config import config
from flight_tracker.models import init_db, check_connection
from flight_tracker.api import flights_bp
from flight_tracker.schema import format_timestamp, utcnow

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def create_app(
    environment: Optional[str] = None,
    initialize_db: bool = True,
    static_dir: Optional[str] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        environment: 'development' or 'production'. Defaults to APP_ENV.
                     Controls error detail and static asset serving.
        initialize_db: Whether to create missing tables on startup.
        static_dir: Built client assets served in production. Defaults to STATIC_DIR.

    Returns:
        Configured Flask application instance.
    """
    environment = (environment or config.server.environment).lower()
    is_production = environment == 'production'

    static_folder = None
    if is_production:
        static_folder = os.path.abspath(static_dir or config.server.static_dir)

    app = Flask(
        __name__,
        static_folder=static_folder,
        static_url_path='' if static_folder else None,
    )

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key
    app.config['ENVIRONMENT'] = environment

    # CORS for API endpoints; credentials only with explicit origins
    origins = list(config.server.client_origins) or '*'
    CORS(
        app,
        resources={r'/api/*': {'origins': origins}},
        supports_credentials=origins != '*',
        methods=['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'],
        allow_headers=['Content-Type', 'Authorization'],
    )

    if initialize_db:
        logger.info('Initializing database...')
        init_db()

    # Register API blueprints
    app.register_blueprint(flights_bp)

    @app.before_request
    def log_request():
        logger.info(f'{request.method} {request.path}')

    @app.route('/api/health')
    def health():
        """Static health check; does not touch the database."""
        return jsonify({
            'status': 'ok',
            'timestamp': format_timestamp(utcnow()),
            'environment': app.config['ENVIRONMENT'],
        })

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(404)
    def not_found(e):
        if request.path.startswith('/api'):
            return jsonify({
                'error': 'API endpoint not found',
                'message': f'No endpoint for {request.method} {request.path}',
            }), 404

        # Client-side routing: unknown pages get the SPA shell
        if app.static_folder and os.path.isfile(os.path.join(app.static_folder, 'index.html')):
            return send_from_directory(app.static_folder, 'index.html')

        return jsonify({'error': 'Not found', 'message': f'No page at {request.path}'}), 404

    @app.errorhandler(HTTPException)
    def http_error(e):
        return jsonify({'error': e.name, 'message': e.description}), e.code

    @app.errorhandler(Exception)
    def server_error(e):
        logger.error(f'Server error: {e}', exc_info=True)
        if app.config['ENVIRONMENT'] == 'development':
            message = str(e)
        else:
            message = 'Something went wrong'
        return jsonify({'error': 'Internal server error', 'message': message}), 500

    return app


def run_server():
    """
    Run the server after checking the database is reachable.

    Exits with status 1 if the connectivity check fails, rather than
    serving requests that can only fail.
    """
    if not check_connection():
        logger.error('Failed to connect to database. Please check your DATABASE_URL.')
        sys.exit(1)

    app = create_app()
    port = config.server.port

    logger.info(f'Starting Flight Tracker on http://localhost:{port}')
    logger.info(f'Health check: http://localhost:{port}/api/health')
    logger.info(f'Flights API: http://localhost:{port}/api/flights')
    logger.info(f'Environment: {app.config["ENVIRONMENT"]}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        use_reloader=False,
    )


if __name__ == '__main__':
    run_server()
