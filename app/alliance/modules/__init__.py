"""
CMS content modules live under this package.

Keep module boundaries clean: each module owns its models/service/admin routes,
while reusing platform primitives (auth, RBAC, audit, statuses, DB session).
"""
