"""
Sector pages (singletons keyed by slug).

Known sectors are declared in app.alliance.content.SECTORS; the admin
editor only accepts those slugs. A sector row is created on first save.
"""
