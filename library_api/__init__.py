from flask import Flask, jsonify
from library_api.config import Config
from library_api.extensions import db, migrate, jwt


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) db first; models must be imported before create_all / migrations see them
    db.init_app(app)
    from library_api.models import book, lending_record, user  # noqa: F401

    # 2) remaining extensions
    migrate.init_app(app, db)
    jwt.init_app(app)

    from library_api.errors import register_error_handlers
    from library_api.utils.auth import register_jwt_handlers
    register_error_handlers(app)
    register_jwt_handlers(jwt)

    # 3) API blueprints
    from library_api.controllers.auth_controller import auth_bp
    from library_api.controllers.book_controller import book_bp
    from library_api.controllers.lending_controller import lending_bp
    from library_api.controllers.analytics_controller import analytics_bp
    from library_api.controllers.docs_controller import docs_bp
    prefix = app.config.get("API_PREFIX", "").rstrip("/")
    app.register_blueprint(auth_bp, url_prefix=prefix or None)
    app.register_blueprint(book_bp, url_prefix=f"{prefix}/books")
    app.register_blueprint(lending_bp, url_prefix=f"{prefix}/lending")
    app.register_blueprint(analytics_bp, url_prefix=f"{prefix}/analytics")
    app.register_blueprint(docs_bp, url_prefix=prefix or None)

    from library_api.cli import register_cli
    register_cli(app)

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    if app.config.get("AUTO_CREATE_TABLES"):
        with app.app_context():
            db.create_all()
        app.logger.info("[db] tables ensured.")

    return app
