from flask import Blueprint, abort, current_app, render_template
from sqlalchemy.exc import SQLAlchemyError

from app.alliance import content
from app.alliance.db import db_session
from app.alliance.modules.hero.service import get_hero_data
from app.alliance.modules.sectors.service import get_published_sector
from app.alliance.modules.services.service import get_published_services

bp = Blueprint("routes", __name__)


def _hero_slide(h) -> dict:
    return {
        "id": h.id,
        "category": h.button_text,
        "title": h.title,
        "emphasis": h.emphasis,
        "description": h.subtitle,
        "image_url": h.image_url,
        "link": h.button_link,
    }


def _sector_page(slug: str, cfg: dict) -> dict:
    """Published sector content from the database, else the built-in page."""
    try:
        sector = get_published_sector(db_session(), slug)
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load sector %s; using built-in content", slug)
        sector = None
    if sector is None:
        return {**cfg, "from_db": False}
    return {
        **cfg,
        "from_db": True,
        "hero_eyebrow": sector.hero_eyebrow,
        "hero_title_main": sector.hero_title_main,
        "hero_title_italic": sector.hero_title_italic,
        "hero_description": sector.hero_description,
        "hero_image": sector.hero_image,
        "portfolio_title": sector.portfolio_title,
        "portfolio_description": sector.portfolio_description,
        "sections": [
            {
                "title": sec.title,
                "description": sec.description,
                "image_url": sec.image_url,
                "features": list(sec.features or []),
            }
            for sec in sector.sections
        ],
    }


@bp.get("/")
def index():
    try:
        slides = [_hero_slide(h) for h in get_hero_data(db_session(), only_published=True)]
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load hero data; using fallback slides")
        slides = []
    return render_template("public/index.html", slides=slides or content.FALLBACK_HERO_SLIDES)


@bp.get("/about")
def about():
    return render_template("public/about.html", pillars=content.ABOUT_PILLARS)


@bp.get("/contact")
def contact():
    return render_template(
        "public/contact.html",
        subjects=content.CONTACT_SUBJECTS,
        email=content.CONTACT_EMAIL,
        phone=content.CONTACT_PHONE,
    )


@bp.get("/services")
def services_index():
    try:
        services = get_published_services(db_session())
    except SQLAlchemyError:
        current_app.logger.exception("Failed to load services; using built-in directory")
        services = []
    return render_template("public/services/index.html", services=services, cards=content.FALLBACK_SERVICE_CARDS)


@bp.get("/services/<slug>")
def sector(slug: str):
    cfg = content.sector_config(slug)
    if cfg is None:
        abort(404)
    return render_template("public/services/sector.html", slug=slug, page=_sector_page(slug, cfg))


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """Fast liveness probe. No DB access."""
    return "ok", 200
