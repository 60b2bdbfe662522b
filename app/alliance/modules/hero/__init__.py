"""
Hero slides for the homepage carousel.

Admin-only editing under /admin/hero (hero:manage). The public home page
shows published slides oldest first and falls back to built-in slides.
"""
