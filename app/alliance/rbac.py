from collections.abc import Callable
from functools import wraps
from typing import Any

from flask import abort, current_app, g, redirect, request, url_for

from app.alliance.auth import SessionUser

SUPER_PERMISSION = "system:super"

DASHBOARD_ACCESS = "dashboard:access"
HERO_MANAGE = "hero:manage"
SERVICES_MANAGE = "services:manage"
USERS_MANAGE = "users:manage"
SETTINGS_ACCESS = "settings:access"

FORBIDDEN_MESSAGE = "Forbidden: You do not have permission to access this resource."


def user_has_permission(user: SessionUser | None, permission_key: str) -> bool:
    if not user:
        return False
    return SUPER_PERMISSION in user.permissions or permission_key in user.permissions


def require_user(permission_key: str | None = None) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(fn)
        def wrapped(*args: Any, **kwargs: Any):
            user: SessionUser | None = getattr(g, "current_user", None)
            # Unauthenticated -> sign-in page.
            if not user:
                nxt = request.full_path or request.path
                # Avoid trailing '?' from full_path when there is no query string.
                if nxt.endswith("?"):
                    nxt = nxt[:-1]
                return redirect(url_for("auth.signin_get", next=nxt))
            # Authenticated but unauthorized -> 403
            if permission_key and not user_has_permission(user, permission_key):
                g.missing_permission = permission_key
                current_app.logger.warning(
                    "Forbidden: user=%s missing_permission=%s path=%s", user.email, permission_key, request.path
                )
                abort(403)
            return fn(*args, **kwargs)

        return wrapped

    return decorator


def require_permission(permission_key: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    return require_user(permission_key)
