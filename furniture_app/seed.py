from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from .config import Settings
from .models.static_data import Category, City
from .models.user import Role, User
from .utils.security import hash_password

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    "Chairs", "Tables", "Sofas", "Beds", "Wardrobes",
    "Cabinets", "Desks", "Shelves", "Mirrors", "Lighting",
]

DEFAULT_CITIES = [
    "Athens", "Thessaloniki", "Patras", "Heraklion", "Larissa",
    "Volos", "Ioannina", "Chania", "Kavala", "Rhodes",
]


def _insert_missing(db: Session, model, names) -> int:
    existing = set(db.execute(select(model.name)).scalars().all())
    missing = [n for n in names if n not in existing]
    for name in missing:
        db.add(model(name=name))
    return len(missing)


def seed_static_data(db: Session) -> None:
    added = _insert_missing(db, Category, DEFAULT_CATEGORIES)
    added += _insert_missing(db, City, DEFAULT_CITIES)
    db.commit()
    if added:
        logger.info("Seeded %s categories/cities", added)


def ensure_admin(db: Session, settings: Settings) -> User | None:
    """Create the bootstrap administrator from ADMIN_* settings, once."""
    if not settings.ADMIN_USERNAME or not settings.ADMIN_PASSWORD:
        return None
    u = db.execute(select(User).where(User.username == settings.ADMIN_USERNAME)).scalar_one_or_none()
    if u is not None:
        return u
    u = User(
        username=settings.ADMIN_USERNAME,
        email=settings.ADMIN_EMAIL or f"{settings.ADMIN_USERNAME}@localhost",
        password=hash_password(settings.ADMIN_PASSWORD),
        role=Role.ADMIN,
        is_active=True,
    )
    db.add(u)
    db.commit()
    logger.info("Created administrator %s", u.username)
    return u
