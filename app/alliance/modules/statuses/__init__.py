"""
Content statuses.

A lookup table shared by every CMS module. Only records whose status is
"published" are rendered on the public site; the admin panel sees all.
"""
