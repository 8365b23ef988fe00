from __future__ import annotations

import json
import logging
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.orm import Session

from ..admin.security import ensure_owner_or_admin
from ..db import get_db
from ..deps import get_current_user, get_file_storage, get_optional_user
from ..errors import InvalidArgumentError, ValidationError
from ..models.ad import Condition
from ..models.user import User
from ..schemas import AdInsert, AdRead, Paginated, ResponseMessage
from ..search.filters import AdFilters
from ..services import ads as ad_service
from ..services.files import FileStorage
from ..validation import ensure_valid, parse_payload, validate_ad_insert

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ads", tags=["ads"])


# ---------- helpers ----------

def _parse_ad_part(raw: str, partial: bool = False) -> AdInsert:
    try:
        payload = json.loads(raw)
    except ValueError:
        raise ValidationError("Ad", [("ad", "Ad data must be a JSON object.")]) from None
    if not isinstance(payload, dict):
        raise ValidationError("Ad", [("ad", "Ad data must be a JSON object.")])
    ensure_valid("Ad", validate_ad_insert(payload, partial=partial))
    return parse_payload("Ad", AdInsert, payload)


def _parse_condition(value: Optional[str]) -> Optional[Condition]:
    if value is None or not value.strip():
        return None
    try:
        return Condition(value.strip().upper())
    except ValueError:
        raise InvalidArgumentError("Condition", f"Unknown condition: {value}") from None


# ---------- write ----------

@router.post("/save", response_model=AdRead, status_code=status.HTTP_201_CREATED)
def create_ad(
    ad: str = Form(..., description="Ad data as JSON string"),
    image: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    logger.info("Creating ad request from user: %s", user.username)
    data = _parse_ad_part(ad)
    created = ad_service.create_ad(db, storage, user, data, image)
    logger.info("Ad created successfully with ID: %s", created.id)
    return created


@router.put("/{ad_id}", response_model=AdRead)
def update_ad(
    ad_id: int,
    ad: str = Form(..., description="Updated ad data as JSON string"),
    image: Optional[UploadFile] = File(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    logger.info("Updating ad ID: %s", ad_id)
    ensure_owner_or_admin(user, ad_service.get_ad_owner_id(db, ad_id))
    data = _parse_ad_part(ad, partial=True)
    return ad_service.update_ad(db, storage, ad_id, data, image)


@router.delete("/{ad_id}", response_model=ResponseMessage)
def delete_ad(
    ad_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    storage: FileStorage = Depends(get_file_storage),
):
    logger.info("Deleting ad ID: %s", ad_id)
    ensure_owner_or_admin(user, ad_service.get_ad_owner_id(db, ad_id))
    ad_service.delete_ad(db, storage, ad_id)
    return ResponseMessage(code="SUCCESS", description="Ad deleted successfully")


# ---------- read ----------

@router.get("/available", response_model=List[AdRead])
def get_available_ads(db: Session = Depends(get_db)):
    return ad_service.get_available_ads(db)


@router.get("/user/{user_id}", response_model=List[AdRead])
def get_ads_by_user(user_id: int, db: Session = Depends(get_db)):
    return ad_service.get_ads_by_user_id(db, user_id)


@router.get("/my-ads", response_model=List[AdRead])
def get_my_ads(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ad_service.get_ads_by_user_id(db, user.id)


@router.get("", response_model=Paginated[AdRead])
def get_paginated_ads(
    page: int = Query(0),
    size: int = Query(10),
    sort_by: str = Query("id", alias="sortBy"),
    sort_direction: str = Query("asc", alias="sortDirection"),
    db: Session = Depends(get_db),
):
    return ad_service.get_paginated_sorted_ads(db, page, size, sort_by, sort_direction)


# ---------- search ----------

@router.post("/search", response_model=List[AdRead])
def search_ads(
    filters: Optional[AdFilters] = Body(None),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    return ad_service.get_ads_filtered(db, filters, user.id if user else None)


@router.get("/search/paginated", response_model=Paginated[AdRead])
def search_ads_paginated(
    title: Optional[str] = Query(None),
    description: Optional[str] = Query(None),
    category_name: Optional[str] = Query(None, alias="categoryName"),
    city_name: Optional[str] = Query(None, alias="cityName"),
    condition: Optional[str] = Query(None),
    min_price: Optional[Decimal] = Query(None, alias="minPrice"),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice"),
    is_available: Optional[bool] = Query(None, alias="isAvailable"),
    my_ads: Optional[bool] = Query(None, alias="myAds"),
    page: int = Query(0),
    page_size: int = Query(10, alias="pageSize"),
    sort_by: str = Query("id", alias="sortBy"),
    sort_direction: str = Query("asc", alias="sortDirection"),
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    filters = AdFilters(
        title=title,
        description=description,
        category_name=category_name,
        city_name=city_name,
        condition=_parse_condition(condition),
        min_price=min_price,
        max_price=max_price,
        is_available=is_available,
        my_ads=my_ads,
        page=page,
        page_size=page_size,
        sort_by=sort_by,
        sort_direction=sort_direction,
    )
    return ad_service.get_ads_filtered_paginated(db, filters, user.id if user else None)


@router.get("/{ad_id}", response_model=AdRead)
def get_ad_by_id(ad_id: int, db: Session = Depends(get_db)):
    return ad_service.get_ad_by_id(db, ad_id)
