import re

from flask import Blueprint, abort, current_app, flash, g, redirect, render_template, request, url_for
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.alliance.audit import record_event
from app.alliance.auth import SessionUser
from app.alliance.content import SECTORS
from app.alliance.db import db_session
from app.alliance.models import AuditEvent, Role, User
from app.alliance.modules.hero.models import HeroSection
from app.alliance.modules.sectors.models import SectorDetail
from app.alliance.modules.services.models import Service
from app.alliance.modules.statuses.models import PUBLISHED, Status
from app.alliance.passwords import hash_password
from app.alliance.rbac import (
    HERO_MANAGE,
    SERVICES_MANAGE,
    SETTINGS_ACCESS,
    USERS_MANAGE,
    require_permission,
    require_user,
    user_has_permission,
)

bp = Blueprint("admin", __name__)

MIN_PASSWORD_LENGTH = 8

# Sidebar groups; items the user lacks the permission for are hidden.
NAV_GROUPS = [
    {
        "label": "Management",
        "items": [
            {"label": "Dashboard", "endpoint": "admin.index", "permission": None},
            {"label": "Hero Slider", "endpoint": "hero.hero_list", "permission": HERO_MANAGE},
            {"label": "Sectors & Services", "endpoint": "services.services_list", "permission": SERVICES_MANAGE},
            {"label": "Sector Details", "endpoint": "sectors.sectors_index", "permission": SERVICES_MANAGE},
        ],
    },
    {
        "label": "Administration",
        "items": [
            {"label": "Accounts", "endpoint": "admin.accounts_list", "permission": USERS_MANAGE},
            {"label": "System Settings", "endpoint": "admin.settings", "permission": SETTINGS_ACCESS},
            {"label": "Audit Trail", "endpoint": "admin.audit_list", "permission": SETTINGS_ACCESS},
        ],
    },
]


def nav_for(user: SessionUser | None) -> list[dict]:
    groups = []
    for group in NAV_GROUPS:
        items = [i for i in group["items"] if i["permission"] is None or user_has_permission(user, i["permission"])]
        if items:
            groups.append({"label": group["label"], "items": items})
    return groups


def _current_user() -> SessionUser:
    u = getattr(g, "current_user", None)
    if not u:
        raise RuntimeError("No current user")
    return u


def _is_valid_email(email: str) -> bool:
    pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
    return bool(re.match(pattern, email))


def _password_errors(password: str, password_confirm: str) -> list[str]:
    if not password:
        return ["Password is required."]
    if len(password) < MIN_PASSWORD_LENGTH:
        return [f"Password must be at least {MIN_PASSWORD_LENGTH} characters."]
    if password != password_confirm:
        return ["Passwords do not match."]
    return []


def _roles_from_form(s) -> list[Role]:
    role_ids = [r for r in request.form.getlist("role_ids") if r]
    if not role_ids:
        return []
    return s.query(Role).filter(Role.id.in_(role_ids)).all()


@bp.get("/")
@require_user()
def index():
    s = db_session()
    stats = {
        "hero_total": s.query(HeroSection).count(),
        "hero_published": (
            s.query(HeroSection).join(Status, HeroSection.status_id == Status.id).filter(Status.name == PUBLISHED).count()
        ),
        "services_total": s.query(Service).count(),
        "sectors_configured": s.query(SectorDetail).count(),
        "sectors_known": len(SECTORS),
        "staff_active": s.query(User).filter(User.is_active.is_(True)).count(),
    }
    return render_template("admin/index.html", stats=stats)


@bp.get("/me")
@require_user()
def me():
    user = _current_user()
    return render_template(
        "admin/me.html",
        user=user,
        role_keys=sorted(user.roles),
        perm_keys=sorted(user.permissions),
    )


@bp.get("/settings")
@require_permission(SETTINGS_ACCESS)
def settings():
    s = db_session()
    status = {
        "env": current_app.config.get("ENV"),
        "db_backend": str(current_app.config.get("DATABASE_URL", "")).split(":", 1)[0],
        "db_connected": False,
        "db_error": None,
        "schema_ok": current_app.config.get("_schema_health_ok", True),
        "schema_missing": current_app.config.get("_schema_health_missing") or [],
    }
    try:
        s.execute(text("SELECT 1"))
        status["db_connected"] = True
    except SQLAlchemyError as e:
        status["db_error"] = str(e)
    return render_template("admin/settings.html", system_status=status)


@bp.get("/audit")
@require_permission(SETTINGS_ACCESS)
def audit_list():
    """Last 200 audit events, filtered by action substring and actor e-mail."""
    s = db_session()
    action = (request.args.get("action") or "").strip()
    actor_email = (request.args.get("actor_email") or "").strip()

    q = s.query(AuditEvent)
    if action:
        q = q.filter(AuditEvent.action.like(f"%{action}%"))
    if actor_email:
        q = q.filter(AuditEvent.actor_user_email.like(f"%{actor_email.lower()}%"))

    events = q.order_by(AuditEvent.created_at.desc(), AuditEvent.id.desc()).limit(200).all()
    return render_template("admin/audit/list.html", events=events, action=action, actor_email=actor_email)


# ============================================================================
# ACCOUNT MANAGEMENT
# ============================================================================

@bp.get("/accounts")
@require_permission(USERS_MANAGE)
def accounts_list():
    s = db_session()
    users = s.query(User).order_by(User.email.asc()).all()
    return render_template("admin/accounts/list.html", users=users)


@bp.get("/accounts/new")
@require_permission(USERS_MANAGE)
def accounts_new_get():
    s = db_session()
    roles = s.query(Role).order_by(Role.name.asc()).all()
    return render_template("admin/accounts/new.html", roles=roles)


@bp.post("/accounts/new")
@require_permission(USERS_MANAGE)
def accounts_new_post():
    s = db_session()
    u = _current_user()

    email = (request.form.get("email") or "").strip().lower()
    full_name = (request.form.get("full_name") or "").strip()
    password = request.form.get("password") or ""
    password_confirm = request.form.get("password_confirm") or ""

    errors = []
    if not email:
        errors.append("Email is required.")
    elif not _is_valid_email(email):
        errors.append("Invalid email format.")
    elif s.query(User).filter(User.email == email).one_or_none():
        errors.append("An account with this email already exists.")
    errors.extend(_password_errors(password, password_confirm))

    if errors:
        for e in errors:
            flash(e, "danger")
        return redirect(url_for("admin.accounts_new_get"))

    new_user = User(email=email, full_name=full_name, password_hash=hash_password(password), is_active=True)
    s.add(new_user)
    for role in _roles_from_form(s):
        new_user.roles.append(role)
    s.flush()

    record_event(
        s,
        actor=u,
        action="user.create",
        entity_type="User",
        entity_id=new_user.id,
        metadata={"email": email, "roles": [r.key for r in new_user.roles]},
    )
    s.commit()
    flash(f"Account created for {email}.", "success")
    return redirect(url_for("admin.accounts_list"))


@bp.get("/accounts/<user_id>")
@require_permission(USERS_MANAGE)
def accounts_detail(user_id: str):
    s = db_session()
    user = s.get(User, user_id)
    if not user:
        abort(404)
    roles = s.query(Role).order_by(Role.name.asc()).all()
    return render_template("admin/accounts/detail.html", account=user, roles=roles)


@bp.post("/accounts/<user_id>/update")
@require_permission(USERS_MANAGE)
def accounts_update(user_id: str):
    s = db_session()
    u = _current_user()
    user = s.get(User, user_id)
    if not user:
        abort(404)

    if user.id == u.id:
        flash("You cannot modify your own account from this page.", "danger")
        return redirect(url_for("admin.accounts_detail", user_id=user_id))

    before = {"is_active": user.is_active, "roles": [r.key for r in user.roles]}

    user.is_active = request.form.get("is_active") == "1"
    user.full_name = (request.form.get("full_name") or user.full_name or "").strip()
    user.roles.clear()
    for role in _roles_from_form(s):
        user.roles.append(role)

    after = {"is_active": user.is_active, "roles": [r.key for r in user.roles]}

    record_event(
        s,
        actor=u,
        action="user.update",
        entity_type="User",
        entity_id=user.id,
        metadata={"before": before, "after": after},
    )
    s.commit()
    flash(f"Account updated for {user.email}. Changes apply at their next sign-in.", "success")
    return redirect(url_for("admin.accounts_detail", user_id=user_id))


@bp.post("/accounts/<user_id>/reset-password")
@require_permission(USERS_MANAGE)
def accounts_reset_password(user_id: str):
    s = db_session()
    u = _current_user()
    user = s.get(User, user_id)
    if not user:
        abort(404)

    errors = _password_errors(request.form.get("password") or "", request.form.get("password_confirm") or "")
    if errors:
        for e in errors:
            flash(e, "danger")
        return redirect(url_for("admin.accounts_detail", user_id=user_id))

    user.password_hash = hash_password(request.form["password"])

    record_event(
        s,
        actor=u,
        action="user.password_reset",
        entity_type="User",
        entity_id=user.id,
        metadata={"target_email": user.email, "reset_by": u.email},
    )
    s.commit()
    flash(f"Password reset for {user.email}.", "success")
    return redirect(url_for("admin.accounts_detail", user_id=user_id))
