import logging
import os

from flask import Flask, g, render_template, request
from dotenv import load_dotenv
from sqlalchemy import inspect as sa_inspect

from app.alliance.models import Base
from app.alliance.config import is_production, load_config
from app.alliance.db import init_db, teardown_db_session
from app.alliance.routes import bp as routes_bp
from app.alliance.auth import bp as auth_bp, load_current_user
from app.alliance.admin import bp as admin_bp, nav_for
from app.alliance.modules.hero.admin import bp as hero_bp
from app.alliance.modules.services.admin import bp as services_bp
from app.alliance.modules.sectors.admin import bp as sectors_bp

_SKIP_PREFIXES = ("/static/", "/health", "/healthz")


def _configure_logging(app: Flask) -> None:
    level = getattr(logging, str(app.config.get("LOG_LEVEL") or "INFO"), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    app.logger.setLevel(level)
    logging.getLogger("app.alliance").setLevel(level)


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, template_folder="templates", static_folder="static")
    app.config.from_mapping(load_config())
    _configure_logging(app)

    from app.alliance.security import ensure_csrf_token, validate_csrf

    @app.context_processor
    def _inject_csrf() -> dict:
        return {"csrf_token": ensure_csrf_token()}

    @app.context_processor
    def _inject_permissions() -> dict:
        from app.alliance.rbac import user_has_permission

        user = getattr(g, "current_user", None)

        def has_perm(key: str) -> bool:
            return user_has_permission(user, key)

        return {"has_perm": has_perm, "current_user": user, "admin_nav": nav_for(user)}

    @app.template_filter("dateformat")
    def _dateformat_filter(value, format: str = "%Y-%m-%d") -> str:
        if value is None:
            return "-"
        if hasattr(value, "strftime"):
            return value.strftime(format)
        return str(value)

    # Production guardrails (fail fast with clear logs)
    if is_production(app.config.get("ENV")):
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be MariaDB/MySQL or Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose(close=False)
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/admin")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(hero_bp, url_prefix="/admin")
    app.register_blueprint(services_bp, url_prefix="/admin")
    app.register_blueprint(sectors_bp, url_prefix="/admin")

    # Order matters: identify the user before CSRF so 400 pages still know who is signed in.
    @app.before_request
    def _load_user():
        return load_current_user()

    @app.before_request
    def _csrf_guard():
        if request.path.startswith(_SKIP_PREFIXES):
            return None
        ensure_csrf_token()
        if request.method in ("POST", "PUT", "PATCH", "DELETE"):
            # Sign-in/sign-out carry no privileged state change.
            if (request.endpoint or "").startswith("auth."):
                return None
            if not validate_csrf(request):
                app.logger.warning("CSRF validation failed path=%s request_id=%s", request.path, getattr(g, "request_id", None))
                return render_template("errors/400.html", message="CSRF token missing or invalid."), 400
        return None

    app.teardown_appcontext(teardown_db_session)

    # Schema health: detect tables the code expects but the database lacks.
    app.config.setdefault("_schema_health_ok", True)
    app.config.setdefault("_schema_health_missing", [])

    def _run_schema_health_check() -> None:
        missing: list[str] = []
        try:
            engine = app.extensions.get("sqlalchemy_engine")
            if engine is None:
                raise RuntimeError("sqlalchemy_engine not initialized")
            insp = sa_inspect(engine)
            for table in sorted(Base.metadata.tables):
                if not insp.has_table(table):
                    missing.append(f"{table} (table)")
        except Exception as e:
            app.logger.exception("Schema health check failed: %s", e)
            return

        app.config["_schema_health_missing"] = missing
        app.config["_schema_health_ok"] = not missing
        if missing:
            app.logger.error("DB schema out of date; run `alembic upgrade head`. Missing: %s", ", ".join(missing))

    _run_schema_health_check()

    @app.before_request
    def _schema_health_guardrail():
        if app.config.get("_schema_health_ok"):
            return None
        if request.path.startswith("/admin") and getattr(g, "current_user", None):
            # Re-check so a migration applied after boot clears the guard without a restart.
            _run_schema_health_check()
            if not app.config.get("_schema_health_ok"):
                return render_template("errors/schema_out_of_date.html", missing=app.config.get("_schema_health_missing") or []), 500
        return None

    @app.errorhandler(400)
    def _err_400(e):
        return render_template("errors/400.html", message=getattr(e, "description", None)), 400

    @app.errorhandler(403)
    def _err_403(e):
        return render_template("errors/403.html", missing_permission=getattr(g, "missing_permission", None)), 403

    @app.errorhandler(404)
    def _err_404(e):
        return render_template("errors/404.html", message=getattr(e, "description", None)), 404

    @app.errorhandler(500)
    def _err_500(e):
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return render_template("errors/500.html"), 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
