from flask import Flask, current_app
from werkzeug.exceptions import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging
import os

load_dotenv()

STORE_EXTENSION = 'repair_store'


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(config: Optional[Dict[str, Any]] = None):
    app = Flask(__name__)

    app.config['SECRET_KEY'] = os.getenv('SECRET_KEY', 'dev-secret')
    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite:///repairdesk.db')
    app.config['STORAGE_KEY'] = os.getenv('STORAGE_KEY', 'crm_local_storage_v1')
    app.config['SEED_DEMO'] = _env_flag('SEED_DEMO', True)
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')
    # Optional BlobStorage instance; defaults to the SQL-backed key-value table
    app.config['STORAGE'] = None

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    logging.getLogger('repairdesk').setLevel(app.config['LOG_LEVEL'])

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_engine(db_url, echo=False, future=True)
    session_registry = scoped_session(sessionmaker(bind=engine, expire_on_commit=False, autoflush=False))

    from .models.base import Base
    from .models import kv_entry  # noqa: F401  registers kv_entries
    Base.metadata.create_all(engine)

    @app.teardown_appcontext
    def remove_session(exc=None):
        session_registry.remove()

    # Store
    from .services.storage import SqlBlobStorage
    from .services.store import RepairStore
    from .services.seed import seed_demo
    storage = app.config['STORAGE'] or SqlBlobStorage(session_registry)
    store = RepairStore(storage, key=app.config['STORAGE_KEY'])
    # an unreadable record is kept as-is; seeding only fills a store that has no record
    store.hydrate()
    if app.config['SEED_DEMO']:
        seed_demo(store)
    app.extensions[STORE_EXTENSION] = store

    from .routes.ui import ui_bp  # HTML page
    from .routes.customers import customers_bp
    from .routes.technicians import technicians_bp
    from .routes.devices import devices_bp
    from .routes.tickets import tickets_bp
    from .routes.data import data_bp  # import / export
    app.register_blueprint(ui_bp)
    app.register_blueprint(customers_bp, url_prefix='/api')
    app.register_blueprint(technicians_bp, url_prefix='/api')
    app.register_blueprint(devices_bp, url_prefix='/api')
    app.register_blueprint(tickets_bp, url_prefix='/api')
    app.register_blueprint(data_bp, url_prefix='/api/data')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            return payload, e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    # OpenAPI spec route (minimal)
    from .openapi_builder import build_openapi_spec

    @app.route('/openapi.json')
    def openapi_spec():
        return build_openapi_spec()

    @app.route('/docs')
    def docs_index():
        # Lightweight HTML referencing Redoc CDN (no local install) for quick browsing
        return (
            "<!DOCTYPE html><html><head><title>Repair Desk API Docs</title>"
            "<link rel=\"stylesheet\" href=\"https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css\" />"
            "</head><body><redoc spec-url='/openapi.json'></redoc>"
            "<script src='https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js'></script>"
            "</body></html>"
        )

    return app


def get_store():
    return current_app.extensions[STORE_EXTENSION]
