import os

from dotenv import load_dotenv
from flask import Flask
from sqlalchemy import event
from werkzeug.middleware.proxy_fix import ProxyFix

from supperclub.config import config_by_env, engine_options_for, normalize_database_url
from supperclub.errors import register_error_handlers
from supperclub.extensions import cache, db, limiter, login_manager, migrate
from supperclub.models import User
from supperclub.routes.api.v1 import api_v1_bp


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


def create_app(config_object=None):
    load_dotenv()
    if config_object is None:
        config_object = config_by_env.get(os.getenv("FLASK_ENV", "development"), config_by_env["development"])

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object)
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)
    _configure_database_url(app)

    db.init_app(app)
    migrate.init_app(app, db)
    cache.init_app(app)
    limiter.init_app(app)
    login_manager.init_app(app)
    _init_sentry(app)

    register_error_handlers(app)
    app.register_blueprint(api_v1_bp, url_prefix="/api/v1")

    with app.app_context():
        if db.engine.dialect.name == "sqlite":
            _configure_sqlite_transactions(db.engine)
        if app.config.get("CREATE_TABLES"):
            db.create_all()

    app.logger.info("supperclub started with %s", config_object.__name__)
    return app


def _configure_database_url(app):
    db_uri = normalize_database_url(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
    if db_uri.startswith("sqlite:////"):
        os.makedirs(os.path.dirname(db_uri.replace("sqlite:///", "", 1)), exist_ok=True)
    app.config["SQLALCHEMY_DATABASE_URI"] = db_uri
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = engine_options_for(
        db_uri,
        app.config.get("SQLALCHEMY_ENGINE_OPTIONS"),
        busy_timeout=app.config.get("SQLITE_BUSY_TIMEOUT", 30),
    )


def _configure_sqlite_transactions(engine):
    """
    pysqlite defers BEGIN until the first write and breaks SAVEPOINT.
    Take over transaction control and open every transaction as IMMEDIATE,
    so the writer lock is held from the first read of a unit of work.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, _connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration()],
            traces_sample_rate=app.config.get("SENTRY_TRACES_SAMPLE_RATE", 0.05),
            environment=app.config.get("SENTRY_ENVIRONMENT"),
        )
        sentry_sdk.set_tag("service", "supperclub")
        app.logger.info("Sentry initialized.")
    except Exception as exc:
        app.logger.warning("Sentry initialization failed: %s", exc)
