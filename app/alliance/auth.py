from __future__ import annotations

import uuid
from collections import defaultdict
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta
from typing import Any

from flask import Blueprint, current_app, flash, g, redirect, render_template, request, session, url_for
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.alliance.audit import record_event
from app.alliance.db import db_session
from app.alliance.models import Permission, Role, RolePermission, User, UserRole
from app.alliance.passwords import hash_password, needs_rehash, verify_password
from app.alliance.security import ensure_csrf_token

bp = Blueprint("auth", __name__)
_LOGIN_RATE_LIMIT = 5
_LOGIN_RATE_WINDOW = 300  # seconds

SESSION_USER_KEY = "user"


@dataclass
class SessionUser:
    """Identity and flattened permissions carried in the signed session cookie."""

    id: str
    email: str
    full_name: str
    permissions: list[str] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionUser":
        return cls(
            id=str(data["id"]),
            email=str(data["email"]),
            full_name=str(data.get("full_name") or ""),
            permissions=[str(p) for p in data.get("permissions") or []],
            roles=[str(r) for r in data.get("roles") or []],
        )


def _login_attempts() -> dict[str, list[datetime]]:
    # Kept per app so each create_app() starts with a clean slate.
    return current_app.extensions.setdefault("login_attempts", defaultdict(list))


def _check_rate_limit(ip: str) -> bool:
    attempts = _login_attempts()
    cutoff = datetime.utcnow() - timedelta(seconds=_LOGIN_RATE_WINDOW)
    attempts[ip] = [t for t in attempts[ip] if t > cutoff]
    return len(attempts[ip]) >= _LOGIN_RATE_LIMIT


def _record_attempt(ip: str) -> None:
    _login_attempts()[ip].append(datetime.utcnow())


def get_user_permissions(s: Session, user_id: str) -> list[str]:
    """Distinct permission keys granted to the user through any of their roles."""
    stmt = (
        select(Permission.key)
        .join(RolePermission, RolePermission.permission_id == Permission.id)
        .join(UserRole, UserRole.role_id == RolePermission.role_id)
        .where(UserRole.user_id == user_id)
        .distinct()
        .order_by(Permission.key.asc())
    )
    return list(s.scalars(stmt))


def get_user_roles(s: Session, user_id: str) -> list[str]:
    stmt = (
        select(Role.key)
        .join(UserRole, UserRole.role_id == Role.id)
        .where(UserRole.user_id == user_id)
        .order_by(Role.key.asc())
    )
    return list(s.scalars(stmt))


def authenticate_user(s: Session, email: str, password: str) -> SessionUser | None:
    """
    Verify credentials and build the session-ready user.
    Returns None for unknown or inactive users and wrong passwords.
    """
    email = (email or "").strip().lower()
    if not email or not password:
        return None
    user = (
        s.query(User)
        .filter(func.lower(User.email) == email)
        .filter(User.is_active.is_(True))
        .one_or_none()
    )
    if not user or not verify_password(user.password_hash, password):
        return None

    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(password)
        current_app.logger.info("Upgraded password hash parameters for user_id=%s", user.id)

    return SessionUser(
        id=user.id,
        email=user.email,
        full_name=user.full_name or "",
        permissions=get_user_permissions(s, user.id),
        roles=get_user_roles(s, user.id),
    )


def create_user_session(user: SessionUser, redirect_to: str):
    session.clear()
    session.permanent = True
    session[SESSION_USER_KEY] = user.to_dict()
    ensure_csrf_token()
    return redirect(redirect_to)


def get_user_from_session() -> SessionUser | None:
    data = session.get(SESSION_USER_KEY)
    if not data:
        return None
    try:
        return SessionUser.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        current_app.logger.warning("Discarding malformed session user: %s", e)
        session.pop(SESSION_USER_KEY, None)
        return None


def destroy_session():
    session.clear()
    return redirect(url_for("auth.signin_get"))


def load_current_user() -> None:
    """
    Loads g.current_user from the signed session cookie.
    Also assigns a simple per-request request_id (for audit/log correlation).
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    if request.path.startswith(("/static/", "/health", "/healthz")):
        g.current_user = None
        return
    g.current_user = get_user_from_session()


def _safe_next(nxt: str) -> str | None:
    # Only allow local paths to avoid open redirects.
    if nxt.startswith("/") and not nxt.startswith("//"):
        return nxt
    return None


@bp.get("/signin")
def signin_get():
    if getattr(g, "current_user", None):
        return redirect(url_for("admin.index"))
    nxt = (request.args.get("next") or "").strip()
    return render_template("auth/signin.html", next=nxt, email="", error=None)


@bp.post("/signin")
def signin_post():
    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""
    nxt = (request.form.get("next") or "").strip()
    ip = request.remote_addr or "unknown"

    if _check_rate_limit(ip):
        flash("Too many sign-in attempts. Please wait 5 minutes.", "danger")
        return redirect(url_for("auth.signin_get"))

    if not email or not password:
        return render_template("auth/signin.html", next=nxt, email=email, error="Invalid email or password"), 400

    _record_attempt(ip)

    try:
        s = db_session()
        user = authenticate_user(s, email, password)
        if not user:
            record_event(
                s,
                actor=None,
                action="auth.login_failed",
                entity_type="User",
                entity_id=email.lower(),
                reason="Invalid credentials",
                metadata={"email": email.lower()},
            )
            s.commit()
            return render_template("auth/signin.html", next=nxt, email=email, error="Invalid credentials"), 401

        _login_attempts()[ip].clear()
        record_event(s, actor=user, action="auth.login", entity_type="User", entity_id=user.id)
        s.commit()
        return create_user_session(user, _safe_next(nxt) or url_for("admin.index"))
    except Exception:
        current_app.logger.exception("Sign-in POST crashed (email=%s request_id=%s)", email, getattr(g, "request_id", None))
        raise


@bp.route("/signout", methods=["GET", "POST"])
def signout():
    user = getattr(g, "current_user", None)
    if user:
        s = db_session()
        record_event(s, actor=user, action="auth.logout", entity_type="User", entity_id=user.id)
        s.commit()
    return destroy_session()
