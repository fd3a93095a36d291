import os
import secrets
from logging.config import dictConfig
from flask import Flask, current_app, jsonify
from flask.cli import load_dotenv
from flask_cors import CORS
from flask_login import LoginManager
from werkzeug.exceptions import HTTPException

from vidshare.errors import VidshareError
from vidshare.routes import videos_bp, auth_bp
from vidshare.seed import DEFAULT_VIDEOS
from vidshare.services.assets import asset_store
from vidshare.services.tokens import read_token
from vidshare.services.youtube import youtube_resolver
from vidshare.stores import EXTENSION_KEY, create_store, get_store

login_manager = LoginManager()


@login_manager.user_loader
def load_user(user_id):
    return get_store().get_user(user_id)


@login_manager.request_loader
def load_user_from_request(request):
    """Resolve ``Authorization: Bearer <token>`` to a user; anything else stays anonymous."""
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    user_id = read_token(token.strip(), current_app.config["SECRET_KEY"])
    if user_id is None:
        return None
    return get_store().get_user(user_id)


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes")


def configure_logging():
    dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {'default': {
            'format': '[%(asctime)s] %(levelname)s in %(module)s: %(message)s',
        }},
        'handlers': {'wsgi': {
            'class': 'logging.StreamHandler',
            'stream': 'ext://flask.logging.wsgi_errors_stream',
            'formatter': 'default'
        }},
        'root': {
            'level': os.environ.get("VIDSHARE_LOG_LEVEL", "INFO").upper(),
            'handlers': ['wsgi']
        }
    })


def create_app(test_config=None):
    load_dotenv()
    configure_logging()
    app = Flask(__name__, instance_relative_config=True)

    # Check if running in test mode (from environment or test_config)
    is_testing = (
        _env_flag("TESTING")
        or bool(test_config and test_config.get("TESTING"))
    )

    # Secret key signs session tokens (generate if not set)
    app.config["SECRET_KEY"] = os.environ.get("VIDSHARE_SECRET_KEY") or secrets.token_hex(32)

    # Storage backend: "sql" (PostgreSQL / SQLite) or "mongo"
    app.config["STORE_BACKEND"] = os.environ.get("VIDSHARE_BACKEND", "sql").lower()

    if is_testing:
        # Use in-memory SQLite for tests
        app.config["SQLALCHEMY_DATABASE_URI"] = "sqlite:///:memory:"
        app.config["TESTING"] = True
    else:
        app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("VIDSHARE_DATABASE_URL") or "sqlite:///vidshare.db"

    auth_database_url = os.environ.get("VIDSHARE_AUTH_DATABASE_URL")
    if auth_database_url and not is_testing:
        app.config["SQLALCHEMY_BINDS"] = {"auth": auth_database_url}

    app.config["MONGO_URL"] = os.environ.get("VIDSHARE_MONGO_URL", "mongodb://localhost:27017")
    app.config["MONGO_DATABASE"] = os.environ.get("VIDSHARE_MONGO_DB", "vidshare")

    # Uploaded files
    app.config["UPLOAD_FOLDER"] = os.environ.get("VIDSHARE_UPLOAD_FOLDER") or os.path.join(app.instance_path, "uploads")
    app.config["MAX_CONTENT_LENGTH"] = 2 * 1024 * 1024 * 1024  # 2 GB max

    app.config["SEED_DEFAULT_VIDEOS"] = _env_flag("VIDSHARE_SEED", default=not is_testing)
    app.config["YOUTUBE_TIMEOUT"] = float(os.environ.get("VIDSHARE_YOUTUBE_TIMEOUT", "5"))
    app.config["YOUTUBE_FETCH_DESCRIPTIONS"] = _env_flag("VIDSHARE_YOUTUBE_DESCRIPTIONS", default=True)
    app.config["CORS_ORIGIN"] = os.environ.get("VIDSHARE_CORS_ORIGIN", "*")

    # Apply additional test configuration if provided
    if test_config:
        app.config.update(test_config)

    # Users live in the "auth" bind; it shares the main database unless configured
    app.config.setdefault("SQLALCHEMY_BINDS", {"auth": app.config["SQLALCHEMY_DATABASE_URI"]})

    login_manager.init_app(app)
    asset_store.init_app(app)
    youtube_resolver.init_app(app)

    # Explicit initialization phase: app creation fails if the store cannot be prepared
    store = create_store(app)
    app.extensions[EXTENSION_KEY] = store
    with app.app_context():
        store.initialize()
        if app.config["SEED_DEFAULT_VIDEOS"]:
            store.seed_if_empty(DEFAULT_VIDEOS)

    app.register_blueprint(videos_bp)
    app.register_blueprint(auth_bp)

    register_error_handlers(app)

    CORS(
        app,
        origins=app.config["CORS_ORIGIN"],
        allow_headers=["Content-Type", "Authorization"],
        methods=["GET", "POST", "DELETE", "OPTIONS"],
    )

    @app.route('/health')
    def health():
        store = get_store()
        return jsonify({"status": "OK", "ready": store.ready, "backend": store.name})

    return app


def register_error_handlers(app):
    @app.errorhandler(VidshareError)
    def handle_domain_error(e):
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        app.logger.exception(f"Unhandled error: {e}")
        return jsonify({"error": "Server error"}), 500
