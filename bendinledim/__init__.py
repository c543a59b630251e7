# bendinledim/__init__.py
from flask import Flask
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def create_app(overrides=None):
    from dotenv import load_dotenv; load_dotenv()

    from .config import Config
    from .logging_utils import setup_logging

    app = Flask(__name__, static_folder="static", static_url_path="/static")
    app.config.update(Config().as_dict())
    if overrides:
        app.config.update(overrides)
    app.json.ensure_ascii = False

    setup_logging(app.config["LOG_LEVEL"])
    db.init_app(app)

    # models must be imported before create_all
    from . import models  # noqa: F401
    from .repository import ArticleRepository

    with app.app_context():
        db.create_all()

    # one repository per process, handed to views via app.extensions
    app.extensions["repository"] = ArticleRepository(db.session)

    from .auth import add_cors_headers, guard_request
    app.before_request(guard_request)
    app.after_request(add_cors_headers)

    from .errors import register_error_handlers
    register_error_handlers(app)

    # blueprints
    from .main import main_bp
    app.register_blueprint(main_bp)  # public pages and feeds

    from .api import api_bp
    app.register_blueprint(api_bp, url_prefix="/api")

    from .admin import admin_bp
    app.register_blueprint(admin_bp, url_prefix="/admin")

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app
