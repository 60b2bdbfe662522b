"""
Idempotent seed data: statuses, permissions, roles and the first staff users.

Existing users keep their passwords; only missing rows are created and
missing role grants are added.
"""
from __future__ import annotations

import logging
import os

from sqlalchemy.orm import Session

from app.alliance.models import Permission, Role, User
from app.alliance.modules.statuses.models import DEFAULT_STATUSES, Status
from app.alliance.passwords import hash_password
from app.alliance.rbac import (
    DASHBOARD_ACCESS,
    HERO_MANAGE,
    SERVICES_MANAGE,
    SETTINGS_ACCESS,
    SUPER_PERMISSION,
    USERS_MANAGE,
)

logger = logging.getLogger(__name__)

PERMISSIONS = {
    DASHBOARD_ACCESS: "Allows dashboard access",
    HERO_MANAGE: "Allows hero manage",
    SERVICES_MANAGE: "Allows services manage",
    USERS_MANAGE: "Allows users manage",
    SETTINGS_ACCESS: "Allows settings access",
    SUPER_PERMISSION: "Bypasses every permission check",
}

# role key -> (display name, permission keys)
ROLES = {
    "admin": (
        "System Administrator - Full Access",
        (DASHBOARD_ACCESS, HERO_MANAGE, SERVICES_MANAGE, USERS_MANAGE, SETTINGS_ACCESS),
    ),
    "staff": ("Operations Staff - Limited Access", (DASHBOARD_ACCESS, HERO_MANAGE)),
}


def ensure_statuses(s: Session) -> dict[str, Status]:
    out = {}
    for name in DEFAULT_STATUSES:
        st = s.query(Status).filter(Status.name == name).one_or_none()
        if not st:
            st = Status(name=name)
            s.add(st)
        out[name] = st
    return out


def ensure_permissions(s: Session) -> dict[str, Permission]:
    out = {}
    for key, name in PERMISSIONS.items():
        p = s.query(Permission).filter(Permission.key == key).one_or_none()
        if not p:
            p = Permission(key=key, name=name)
            s.add(p)
        out[key] = p
    return out


def ensure_roles(s: Session, perms: dict[str, Permission]) -> dict[str, Role]:
    out = {}
    for key, (name, perm_keys) in ROLES.items():
        role = s.query(Role).filter(Role.key == key).one_or_none()
        if not role:
            role = Role(key=key, name=name)
            s.add(role)
        for pk in perm_keys:
            if perms[pk] not in role.permissions:
                role.permissions.append(perms[pk])
        out[key] = role
    return out


def ensure_user(s: Session, *, email: str, full_name: str, password: str, role: Role) -> tuple[User, bool]:
    email = email.strip().lower()
    user = s.query(User).filter(User.email == email).one_or_none()
    created = user is None
    if created:
        user = User(email=email, full_name=full_name, password_hash=hash_password(password), is_active=True)
        s.add(user)
    if role not in user.roles:
        user.roles.append(role)
    return user, created


def seed_defaults(s: Session, *, with_users: bool = True) -> None:
    ensure_statuses(s)
    perms = ensure_permissions(s)
    roles = ensure_roles(s, perms)
    s.flush()
    if not with_users:
        return

    users = (
        (
            os.environ.get("ADMIN_EMAIL") or "admin@alliancecomputer.co",
            "Alliance Admin",
            os.environ.get("ADMIN_PASSWORD") or "change-me-admin",
            roles["admin"],
        ),
        (
            os.environ.get("STAFF_EMAIL") or "staff@alliancecomputer.co",
            "Field Staff",
            os.environ.get("STAFF_PASSWORD") or "change-me-staff",
            roles["staff"],
        ),
    )
    for email, full_name, password, role in users:
        _, created = ensure_user(s, email=email, full_name=full_name, password=password, role=role)
        if created:
            logger.info("Created %s user %s", role.key, email)
        else:
            logger.info("User %s already exists, skipping.", email)
