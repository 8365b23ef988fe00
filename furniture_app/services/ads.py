from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..errors import InvalidArgumentError, NotFoundError
from ..mapper import find_category_by_name, find_city_by_name, map_to_ad_entity, map_to_ad_read
from ..models.ad import Ad
from ..models.user import User
from ..schemas import AdInsert, AdRead, Paginated
from ..search.filters import AdFilters
from ..search.pagination import find_page
from ..search.specifications import ad_specs_from_filters, conjunction
from .attachments import create_ad_attachment, delete_ad_attachment, has_upload, is_valid_image_file, replace_ad_attachment
from .files import FileStorage

logger = logging.getLogger(__name__)


# ---- helpers ----

def _get_ad(db: Session, ad_id: int) -> Ad:
    ad = db.get(Ad, ad_id)
    if ad is None:
        raise NotFoundError("Ad", f"Ad with ID {ad_id} not found")
    return ad


def _validate_image(image: Optional[UploadFile]) -> None:
    if has_upload(image) and not is_valid_image_file(image):
        raise InvalidArgumentError("Image", "Invalid image file")


def _update_ad_fields(db: Session, ad: Ad, data: AdInsert) -> None:
    ad.title = data.title
    ad.condition = data.condition
    ad.price = data.price
    ad.is_available = data.is_available
    ad.description = data.description
    if data.category_name is not None:
        ad.category = find_category_by_name(db, data.category_name)
    if data.city_name is not None:
        ad.city = find_city_by_name(db, data.city_name)


def _commit(db: Session, ad: Ad) -> Ad:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(ad)
    return ad


# ---- CRUD ----

def create_ad(db: Session, storage: FileStorage, owner: User, data: AdInsert,
              image: Optional[UploadFile] = None) -> AdRead:
    logger.debug("Creating ad '%s' for user: %s", data.title, owner.username)
    _validate_image(image)

    ad = map_to_ad_entity(db, data)
    ad.user = owner
    db.add(ad)
    try:
        # the image directory is keyed by the generated id
        db.flush()
        if has_upload(image):
            ad.image = create_ad_attachment(storage, image, ad.id)
    except Exception:
        db.rollback()
        raise
    _commit(db, ad)

    logger.info("Ad created successfully with ID: %s", ad.id)
    return map_to_ad_read(ad)


def update_ad(db: Session, storage: FileStorage, ad_id: int, data: AdInsert,
              image: Optional[UploadFile] = None) -> AdRead:
    logger.debug("Updating ad ID: %s", ad_id)
    ad = _get_ad(db, ad_id)
    _validate_image(image)

    try:
        _update_ad_fields(db, ad, data)
        if has_upload(image):
            replace_ad_attachment(db, storage, ad, image)
    except Exception:
        db.rollback()
        raise
    _commit(db, ad)

    logger.info("Ad updated successfully: %s", ad_id)
    return map_to_ad_read(ad)


def delete_ad(db: Session, storage: FileStorage, ad_id: int) -> None:
    logger.debug("Deleting ad ID: %s", ad_id)
    ad = _get_ad(db, ad_id)

    delete_ad_attachment(db, storage, ad.image, ad_id)
    db.delete(ad)
    db.commit()
    logger.info("Ad deleted successfully: %s", ad_id)


# ---- reads ----

def get_ad_by_id(db: Session, ad_id: int) -> AdRead:
    return map_to_ad_read(_get_ad(db, ad_id))


def get_available_ads(db: Session) -> List[AdRead]:
    rows = db.execute(
        select(Ad).where(Ad.is_available.is_(True)).order_by(Ad.id.asc())
    ).scalars().all()
    return [map_to_ad_read(ad) for ad in rows]


def get_ads_by_user_id(db: Session, user_id: int) -> List[AdRead]:
    rows = db.execute(
        select(Ad).where(Ad.user_id == user_id).order_by(Ad.id.asc())
    ).scalars().all()
    return [map_to_ad_read(ad) for ad in rows]


def get_paginated_ads(db: Session, page: int, size: int) -> Paginated[AdRead]:
    return get_paginated_sorted_ads(db, page, size, "id", "asc")


def get_paginated_sorted_ads(db: Session, page: int, size: int,
                             sort_by: str, sort_direction: str) -> Paginated[AdRead]:
    filters = AdFilters(page=page, page_size=size, sort_by=sort_by, sort_direction=sort_direction)
    result = find_page(db, select(Ad), Ad, filters.get_pageable())
    return Paginated[AdRead].from_page(result.map(map_to_ad_read))


# ---- search ----

def get_ads_filtered(db: Session, filters: Optional[AdFilters],
                     current_user_id: Optional[int] = None) -> List[AdRead]:
    filters = filters or AdFilters()
    logger.debug("Searching ads with filters: %s", filters)

    where = conjunction(*ad_specs_from_filters(filters, current_user_id))
    rows = db.execute(select(Ad).where(where).order_by(Ad.id.asc())).scalars().all()

    logger.debug("Found %s filtered results", len(rows))
    return [map_to_ad_read(ad) for ad in rows]


def get_ads_filtered_paginated(db: Session, filters: Optional[AdFilters],
                               current_user_id: Optional[int] = None) -> Paginated[AdRead]:
    filters = filters or AdFilters()
    logger.debug("Searching ads with filters: %s", filters)

    where = conjunction(*ad_specs_from_filters(filters, current_user_id))
    result = find_page(db, select(Ad).where(where), Ad, filters.get_pageable())

    logger.debug("Found %s filtered results", result.total)
    return Paginated[AdRead].from_page(result.map(map_to_ad_read))


def get_ad_owner_id(db: Session, ad_id: int) -> int:
    return _get_ad(db, ad_id).user_id
